from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from fintrack.auth import get_current_user
from fintrack.database import get_db
from fintrack.services.category_service import CategoryService, serialize

router = APIRouter(prefix="/api/categories", tags=["Categories"])


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    plaid_id: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1)


class BulkDelete(BaseModel):
    ids: List[str]


@router.get("")
async def list_categories(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    categories = await CategoryService.get_all(db, user_id)
    return {"data": [serialize(c) for c in categories]}


@router.get("/{category_id}")
async def get_category(category_id: str, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    category = await CategoryService.get_by_id(db, user_id, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(category)}


@router.post("")
async def create_category(body: CategoryCreate, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    category = await CategoryService.create(db, user_id, body.model_dump())
    return {"data": serialize(category)}


@router.post("/bulk-delete")
async def bulk_delete_categories(body: BulkDelete, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    deleted = await CategoryService.bulk_delete(db, user_id, body.ids)
    return {"data": [{"id": category_id} for category_id in deleted]}


@router.patch("/{category_id}")
async def update_category(category_id: str, body: CategoryUpdate, user_id: str = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    category = await CategoryService.update(db, user_id, category_id, body.model_dump(exclude_unset=True))
    if category is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": serialize(category)}


@router.delete("/{category_id}")
async def delete_category(category_id: str, user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    deleted = await CategoryService.delete(db, user_id, category_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": {"id": deleted}}
