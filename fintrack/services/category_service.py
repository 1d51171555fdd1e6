"""
category_service.py — Categories
Owner-scoped CRUD. Deleting a category clears it from transactions.
"""

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.models.category import Category


def serialize(category: Category) -> dict:
    return {"id": category.id, "name": category.name, "plaid_id": category.plaid_id}


class CategoryService:
    @staticmethod
    async def get_all(db: AsyncSession, user_id: str) -> list[Category]:
        result = await db.execute(select(Category).where(Category.user_id == user_id))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str, category_id: str) -> Category | None:
        result = await db.execute(
            select(Category).where(Category.user_id == user_id, Category.id == category_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def owns(db: AsyncSession, user_id: str, category_id: str | None) -> bool:
        """True when the category belongs to the owner; an unset category always passes."""
        if category_id is None:
            return True
        return await CategoryService.get_by_id(db, user_id, category_id) is not None

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: dict) -> Category:
        category = Category(user_id=user_id, name=data["name"], plaid_id=data.get("plaid_id"))
        db.add(category)
        await db.commit()
        return category

    @staticmethod
    async def update(db: AsyncSession, user_id: str, category_id: str, data: dict) -> Category | None:
        category = await CategoryService.get_by_id(db, user_id, category_id)
        if category is None:
            return None
        if "name" in data:
            category.name = data["name"]
        await db.commit()
        return category

    @staticmethod
    async def delete(db: AsyncSession, user_id: str, category_id: str) -> str | None:
        deleted = await CategoryService.bulk_delete(db, user_id, [category_id])
        return deleted[0] if deleted else None

    @staticmethod
    async def bulk_delete(db: AsyncSession, user_id: str, ids: list[str]) -> list[str]:
        if not ids:
            return []
        result = await db.execute(
            select(Category.id).where(Category.user_id == user_id, Category.id.in_(ids))
        )
        owned = list(result.scalars().all())
        if owned:
            await db.execute(delete(Category).where(Category.id.in_(owned)))
            await db.commit()
        return owned
