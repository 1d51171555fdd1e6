"""
account_service.py — Accounts & budgets
CRUD for accounts, owner scoped, plus the budget-aware account listing.
"""

import asyncio
import logging

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.database import SessionLocal
from fintrack.models.account import Account
from fintrack.money import normalize_zero
from fintrack.services.budget_service import BudgetService

logger = logging.getLogger(__name__)


def serialize(account: Account) -> dict:
    return {
        "id": account.id,
        "name": account.name,
        "plaid_id": account.plaid_id,
        "budget": normalize_zero(account.budget),
    }


class AccountService:
    @staticmethod
    async def list_with_budget(db: AsyncSession, user_id: str, session_factory=SessionLocal) -> list[dict]:
        """Every account of the owner with its remaining budget.

        Each account's transactions are read concurrently in separate sessions;
        a failure on one account leaves its remaining_budget unset.
        """
        result = await db.execute(
            select(Account.id, Account.name, Account.budget).where(Account.user_id == user_id)
        )
        rows = result.all()

        remaining = await asyncio.gather(
            *(BudgetService.remaining_budget_for(row.id, row.budget, session_factory) for row in rows),
            return_exceptions=True,
        )

        accounts = []
        for row, value in zip(rows, remaining):
            if isinstance(value, Exception):
                logger.error(f"Remaining budget failed for account {row.id}", exc_info=value)
                value = None
            accounts.append({
                "id": row.id,
                "name": row.name,
                "budget": normalize_zero(row.budget),
                "remaining_budget": normalize_zero(value),
            })
        return accounts

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str, account_id: str) -> Account | None:
        result = await db.execute(
            select(Account).where(Account.user_id == user_id, Account.id == account_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def owns(db: AsyncSession, user_id: str, account_id: str) -> bool:
        result = await db.execute(
            select(Account.id).where(Account.user_id == user_id, Account.id == account_id)
        )
        return result.first() is not None

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: dict) -> Account:
        account = Account(
            user_id=user_id,
            name=data["name"],
            plaid_id=data.get("plaid_id"),
            budget=data.get("budget") or 0,
        )
        db.add(account)
        await db.commit()
        return account

    @staticmethod
    async def update(db: AsyncSession, user_id: str, account_id: str, data: dict) -> Account | None:
        account = await AccountService.get_by_id(db, user_id, account_id)
        if account is None:
            return None
        if data.get("name") is not None:
            account.name = data["name"]
        if "budget" in data:
            account.budget = data["budget"] or 0
        await db.commit()
        return account

    @staticmethod
    async def set_budget(db: AsyncSession, user_id: str, account_id: str, budget: int) -> Account | None:
        account = await AccountService.get_by_id(db, user_id, account_id)
        if account is None:
            return None
        account.budget = budget
        await db.commit()
        return account

    @staticmethod
    async def delete(db: AsyncSession, user_id: str, account_id: str) -> str | None:
        deleted = await AccountService.bulk_delete(db, user_id, [account_id])
        return deleted[0] if deleted else None

    @staticmethod
    async def bulk_delete(db: AsyncSession, user_id: str, ids: list[str]) -> list[str]:
        """Delete the owner's accounts among ``ids``; transactions cascade in the database."""
        if not ids:
            return []
        result = await db.execute(
            select(Account.id).where(Account.user_id == user_id, Account.id.in_(ids))
        )
        owned = list(result.scalars().all())
        if owned:
            await db.execute(delete(Account).where(Account.id.in_(owned)))
            await db.commit()
        return owned
