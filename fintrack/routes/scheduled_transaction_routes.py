import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from fintrack import config
from fintrack.auth import get_current_user
from fintrack.database import get_db
from fintrack.services.scheduled_transaction_service import ScheduledTransactionService, serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scheduled-transactions", tags=["Scheduled Transactions"])


class ScheduledTransactionCreate(BaseModel):
    amount: int  # miliunits
    payee: str = Field(min_length=1)
    notes: Optional[str] = None
    scheduled_date: datetime
    repeat_interval: Optional[int] = Field(default=None, gt=0)  # days
    account_id: str
    category_id: Optional[str] = None


class ScheduledTransactionUpdate(BaseModel):
    amount: Optional[int] = None
    payee: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    repeat_interval: Optional[int] = Field(default=None, gt=0)
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("amount", "payee", "scheduled_date", "account_id", "is_active")
    @classmethod
    def required_not_null(cls, v, info):
        # repeat_interval, notes and category_id may be cleared, the rest only omitted
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class BulkDelete(BaseModel):
    ids: List[str]


@router.get("")
async def list_scheduled_transactions(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    try:
        schedules = await ScheduledTransactionService.list_with_rollover(db, user_id, rollover=config.ROLLOVER_ON_LIST)
        return {"data": [serialize(s) for s in schedules]}
    except Exception as e:
        logger.exception("Listing scheduled transactions failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/rollover")
async def rollover_scheduled_transactions(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Materialize every due schedule now. Safe to call repeatedly."""
    try:
        created = await ScheduledTransactionService.materialize_due(db, user_id)
        return {"data": created}
    except Exception as e:
        logger.exception("Rollover failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{schedule_id}")
async def get_scheduled_transaction(schedule_id: str, user_id: str = Depends(get_current_user),
                                    db: AsyncSession = Depends(get_db)):
    schedule = await ScheduledTransactionService.get_by_id(db, user_id, schedule_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(schedule)}


@router.post("")
async def create_scheduled_transaction(body: ScheduledTransactionCreate, user_id: str = Depends(get_current_user),
                                       db: AsyncSession = Depends(get_db)):
    schedule = await ScheduledTransactionService.create(db, user_id, body.model_dump())
    if schedule is None:
        raise HTTPException(status_code=404, detail="Account or category not found")
    return {"data": serialize(schedule)}


@router.post("/bulk-delete")
async def bulk_delete_scheduled_transactions(body: BulkDelete, user_id: str = Depends(get_current_user),
                                             db: AsyncSession = Depends(get_db)):
    deleted = await ScheduledTransactionService.bulk_delete(db, user_id, body.ids)
    return {"data": [{"id": schedule_id} for schedule_id in deleted]}


@router.patch("/{schedule_id}")
async def update_scheduled_transaction(schedule_id: str, body: ScheduledTransactionUpdate,
                                       user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    schedule = await ScheduledTransactionService.update(db, user_id, schedule_id, body.model_dump(exclude_unset=True))
    if schedule is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(schedule)}


@router.delete("/{schedule_id}")
async def delete_scheduled_transaction(schedule_id: str, user_id: str = Depends(get_current_user),
                                       db: AsyncSession = Depends(get_db)):
    deleted = await ScheduledTransactionService.delete(db, user_id, schedule_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": {"id": deleted}}
