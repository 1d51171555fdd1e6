import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from fintrack.auth import get_current_user
from fintrack.database import get_db
from fintrack.services.transaction_service import TransactionService, serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


class TransactionCreate(BaseModel):
    amount: int  # miliunits
    payee: str = Field(min_length=1)
    notes: Optional[str] = None
    date: datetime
    account_id: str
    category_id: Optional[str] = None


class TransactionUpdate(BaseModel):
    amount: Optional[int] = None
    payee: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None
    date: Optional[datetime] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None

    @field_validator("amount", "payee", "date", "account_id")
    @classmethod
    def required_not_null(cls, v, info):
        # Omit a field to leave it unchanged; only category_id and notes can be cleared
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class BulkDelete(BaseModel):
    ids: List[str]


@router.get("")
async def list_transactions(
    account_id: Optional[str] = None,
    date_from: Optional[datetime] = Query(default=None, alias="from"),
    date_to: Optional[datetime] = Query(default=None, alias="to"),
    user_id: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        data = await TransactionService.get_all(db, user_id, account_id, date_from, date_to)
        return {"data": data}
    except Exception as e:
        logger.exception("Listing transactions failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{tx_id}")
async def get_transaction(tx_id: str, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    tx = await TransactionService.get_by_id(db, user_id, tx_id)
    if tx is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(tx)}


@router.post("")
async def create_transaction(body: TransactionCreate, user_id: str = Depends(get_current_user),
                             db: AsyncSession = Depends(get_db)):
    tx = await TransactionService.create(db, user_id, body.model_dump())
    if tx is None:
        raise HTTPException(status_code=404, detail="Account or category not found")
    return {"data": serialize(tx)}


@router.post("/bulk-create")
async def bulk_create_transactions(body: List[TransactionCreate], user_id: str = Depends(get_current_user),
                                   db: AsyncSession = Depends(get_db)):
    txs = await TransactionService.bulk_create(db, user_id, [item.model_dump() for item in body])
    if txs is None:
        raise HTTPException(status_code=404, detail="Account or category not found")
    return {"data": [serialize(tx) for tx in txs]}


@router.post("/bulk-delete")
async def bulk_delete_transactions(body: BulkDelete, user_id: str = Depends(get_current_user),
                                   db: AsyncSession = Depends(get_db)):
    deleted = await TransactionService.bulk_delete(db, user_id, body.ids)
    return {"data": [{"id": tx_id} for tx_id in deleted]}


@router.patch("/{tx_id}")
async def update_transaction(tx_id: str, body: TransactionUpdate, user_id: str = Depends(get_current_user),
                             db: AsyncSession = Depends(get_db)):
    tx = await TransactionService.update(db, user_id, tx_id, body.model_dump(exclude_unset=True))
    if tx is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(tx)}


@router.delete("/{tx_id}")
async def delete_transaction(tx_id: str, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    deleted = await TransactionService.delete(db, user_id, tx_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": {"id": deleted}}
