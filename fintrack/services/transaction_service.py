"""
transaction_service.py — Transactions
Owner-scoped CRUD. Transactions have no owner column: ownership is checked
through the account they belong to.
"""

from datetime import datetime, timedelta

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.config import TRANSACTION_LIST_DAYS
from fintrack.dates import utc_now, to_naive_utc
from fintrack.models.account import Account
from fintrack.models.category import Category
from fintrack.models.transaction import Transaction, TYPE_DEFAULT
from fintrack.services.account_service import AccountService
from fintrack.services.category_service import CategoryService


def serialize(tx: Transaction, account_name: str | None = None, category_name: str | None = None) -> dict:
    data = {
        "id": tx.id,
        "amount": tx.amount,
        "payee": tx.payee,
        "notes": tx.notes,
        "date": tx.date,
        "account_id": tx.account_id,
        "category_id": tx.category_id,
        "type": tx.type,
        "scheduled_transaction_id": tx.scheduled_transaction_id,
    }
    if account_name is not None:
        data["account"] = account_name
        data["category"] = category_name
    return data


class TransactionService:
    @staticmethod
    async def get_all(
        db: AsyncSession,
        user_id: str,
        account_id: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[dict]:
        """Transactions in [date_from, date_to], newest first. Defaults to the last few weeks."""
        date_to = to_naive_utc(date_to) or utc_now()
        date_from = to_naive_utc(date_from) or date_to - timedelta(days=TRANSACTION_LIST_DAYS)

        query = (
            select(Transaction, Account.name, Category.name)
            .join(Account, Transaction.account_id == Account.id)
            .outerjoin(Category, Transaction.category_id == Category.id)
            .where(
                Account.user_id == user_id,
                Transaction.date >= date_from,
                Transaction.date <= date_to,
            )
        )
        if account_id:
            query = query.where(Transaction.account_id == account_id)

        result = await db.execute(query.order_by(Transaction.date.desc()))
        return [serialize(tx, account_name, category_name) for tx, account_name, category_name in result.all()]

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str, tx_id: str) -> Transaction | None:
        result = await db.execute(
            select(Transaction)
            .join(Account, Transaction.account_id == Account.id)
            .where(Account.user_id == user_id, Transaction.id == tx_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _check_refs(db: AsyncSession, user_id: str, data: dict) -> bool:
        if data.get("account_id") is not None and not await AccountService.owns(db, user_id, data["account_id"]):
            return False
        return await CategoryService.owns(db, user_id, data.get("category_id"))

    @staticmethod
    def _build(data: dict) -> Transaction:
        return Transaction(
            amount=data["amount"],
            payee=data["payee"],
            notes=data.get("notes"),
            date=to_naive_utc(data["date"]),
            account_id=data["account_id"],
            category_id=data.get("category_id"),
            type=TYPE_DEFAULT,
        )

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: dict) -> Transaction | None:
        """Returns None when the account or category is not the owner's."""
        if not await TransactionService._check_refs(db, user_id, data):
            return None
        tx = TransactionService._build(data)
        db.add(tx)
        await db.commit()
        return tx

    @staticmethod
    async def bulk_create(db: AsyncSession, user_id: str, items: list[dict]) -> list[Transaction] | None:
        """All-or-nothing: one foreign reference rejects the whole batch."""
        for data in items:
            if not await TransactionService._check_refs(db, user_id, data):
                return None
        txs = [TransactionService._build(data) for data in items]
        db.add_all(txs)
        await db.commit()
        return txs

    @staticmethod
    async def update(db: AsyncSession, user_id: str, tx_id: str, data: dict) -> Transaction | None:
        tx = await TransactionService.get_by_id(db, user_id, tx_id)
        if tx is None or not await TransactionService._check_refs(db, user_id, data):
            return None
        for field in ("amount", "payee", "account_id"):
            if data.get(field) is not None:
                setattr(tx, field, data[field])
        for field in ("notes", "category_id"):
            if field in data:
                setattr(tx, field, data[field])
        if data.get("date") is not None:
            tx.date = to_naive_utc(data["date"])
        await db.commit()
        return tx

    @staticmethod
    async def delete(db: AsyncSession, user_id: str, tx_id: str) -> str | None:
        deleted = await TransactionService.bulk_delete(db, user_id, [tx_id])
        return deleted[0] if deleted else None

    @staticmethod
    async def bulk_delete(db: AsyncSession, user_id: str, ids: list[str]) -> list[str]:
        if not ids:
            return []
        result = await db.execute(
            select(Transaction.id)
            .join(Account, Transaction.account_id == Account.id)
            .where(Account.user_id == user_id, Transaction.id.in_(ids))
        )
        owned = list(result.scalars().all())
        if owned:
            await db.execute(delete(Transaction).where(Transaction.id.in_(owned)))
            await db.commit()
        return owned
