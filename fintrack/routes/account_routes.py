import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from fintrack.auth import get_current_user
from fintrack.database import get_db
from fintrack.services.account_service import AccountService, serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


class AccountCreate(BaseModel):
    name: str = Field(min_length=1)
    budget: Optional[int] = Field(default=None, gt=0)


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    budget: Optional[int] = Field(default=None, gt=0)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return v


class BudgetUpdate(BaseModel):
    budget: int


class BulkDelete(BaseModel):
    ids: List[str]


@router.get("")
async def list_accounts(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    try:
        return {"data": await AccountService.list_with_budget(db, user_id)}
    except Exception as e:
        logger.exception("Listing accounts failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{account_id}")
async def get_account(account_id: str, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    account = await AccountService.get_by_id(db, user_id, account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(account)}


@router.post("")
async def create_account(body: AccountCreate, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    try:
        account = await AccountService.create(db, user_id, body.model_dump())
        return {"data": serialize(account)}
    except Exception as e:
        logger.exception("Creating account failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/bulk-delete")
async def bulk_delete_accounts(body: BulkDelete, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    deleted = await AccountService.bulk_delete(db, user_id, body.ids)
    return {"data": [{"id": account_id} for account_id in deleted]}


@router.patch("/{account_id}")
async def update_account(account_id: str, body: AccountUpdate, user_id: str = Depends(get_current_user),
                         db: AsyncSession = Depends(get_db)):
    account = await AccountService.update(db, user_id, account_id, body.model_dump(exclude_unset=True))
    if account is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(account)}


@router.patch("/{account_id}/budget")
async def set_account_budget(account_id: str, body: BudgetUpdate, user_id: str = Depends(get_current_user),
                             db: AsyncSession = Depends(get_db)):
    account = await AccountService.set_budget(db, user_id, account_id, body.budget)
    if account is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(account)}


@router.delete("/{account_id}")
async def delete_account(account_id: str, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    deleted = await AccountService.delete(db, user_id, account_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": {"id": deleted}}
