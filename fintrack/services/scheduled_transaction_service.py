"""
scheduled_transaction_service.py — Recurring transactions
Owner-scoped CRUD for schedules and the rollover that turns due schedules
into real transactions.

A schedule is Pending while scheduled_date > now and Due otherwise. Rolling a
Due schedule over inserts one Transaction dated at the due date and moves
scheduled_date forward by repeat_interval days. Schedules without an interval
fire once and are then deactivated.

Each schedule is rolled over in its own database transaction. The schedule
update is conditional on the due date it was read with, so two overlapping
rollovers cannot both materialize the same period: the loser matches no row
and rolls its insert back.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.dates import utc_now, to_naive_utc, add_days
from fintrack.models.scheduled_transaction import ScheduledTransaction
from fintrack.models.transaction import Transaction, TYPE_SCHEDULED
from fintrack.services.account_service import AccountService
from fintrack.services.category_service import CategoryService

logger = logging.getLogger(__name__)

_DUE_COLUMNS = (
    ScheduledTransaction.id,
    ScheduledTransaction.amount,
    ScheduledTransaction.payee,
    ScheduledTransaction.notes,
    ScheduledTransaction.scheduled_date,
    ScheduledTransaction.repeat_interval,
    ScheduledTransaction.account_id,
    ScheduledTransaction.category_id,
)


def serialize(schedule: ScheduledTransaction) -> dict:
    return {
        "id": schedule.id,
        "amount": schedule.amount,
        "payee": schedule.payee,
        "notes": schedule.notes,
        "scheduled_date": schedule.scheduled_date,
        "repeat_interval": schedule.repeat_interval,
        "account_id": schedule.account_id,
        "category_id": schedule.category_id,
        "is_active": schedule.is_active,
    }


class ScheduledTransactionService:
    # ------------------------------------------------------------------
    @staticmethod
    async def get_due(db: AsyncSession, user_id: str, now: datetime) -> list:
        """Active schedules of the owner whose due date is at or before ``now``.

        Returned as plain rows so a later rollback cannot expire them.
        """
        result = await db.execute(
            select(*_DUE_COLUMNS).where(
                ScheduledTransaction.user_id == user_id,
                ScheduledTransaction.is_active.is_(True),
                ScheduledTransaction.scheduled_date <= now,
            )
        )
        return list(result.all())

    # ------------------------------------------------------------------
    @staticmethod
    async def materialize_one(db: AsyncSession, due) -> dict | None:
        """Roll one due schedule over. Returns the new transaction, or None if
        another caller already advanced the schedule."""
        if due.repeat_interval:
            changes = {"scheduled_date": add_days(due.scheduled_date, due.repeat_interval)}
        else:
            changes = {"is_active": False}

        claimed = await db.execute(
            update(ScheduledTransaction)
            .where(
                ScheduledTransaction.id == due.id,
                ScheduledTransaction.scheduled_date == due.scheduled_date,
                ScheduledTransaction.is_active.is_(True),
            )
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            await db.rollback()
            logger.info(f"Scheduled transaction {due.id} already rolled over")
            return None

        values = {
            "id": str(uuid.uuid4()),
            "amount": due.amount,
            "payee": due.payee,
            "notes": due.notes,
            "date": due.scheduled_date,
            "account_id": due.account_id,
            "category_id": due.category_id,
            "type": TYPE_SCHEDULED,
            "scheduled_transaction_id": due.id,
        }
        db.add(Transaction(**values))
        await db.commit()
        return values

    # ------------------------------------------------------------------
    @staticmethod
    async def materialize_due(db: AsyncSession, user_id: str, now: datetime | None = None) -> list[dict]:
        """Roll over every due schedule of the owner.

        A failing schedule is logged and skipped; it stays Due and is retried
        on the next call.
        """
        now = to_naive_utc(now) or utc_now()
        due_rows = await ScheduledTransactionService.get_due(db, user_id, now)
        # End the read transaction before the per-schedule writes
        await db.commit()

        created = []
        for due in due_rows:
            try:
                tx = await ScheduledTransactionService.materialize_one(db, due)
            except Exception:
                await db.rollback()
                logger.exception(f"Failed to roll over scheduled transaction {due.id}")
                continue
            if tx is not None:
                created.append(tx)

        if due_rows:
            logger.info(f"Rolled over {len(created)} of {len(due_rows)} due scheduled transactions for {user_id}")
        return created

    # ------------------------------------------------------------------
    @staticmethod
    async def list_with_rollover(db: AsyncSession, user_id: str, rollover: bool = True, now: datetime | None = None) -> list[ScheduledTransaction]:
        """Owner's schedules, rolling the due ones over first when ``rollover`` is set."""
        if rollover:
            await ScheduledTransactionService.materialize_due(db, user_id, now)
        return await ScheduledTransactionService.get_all(db, user_id)

    @staticmethod
    async def get_all(db: AsyncSession, user_id: str) -> list[ScheduledTransaction]:
        result = await db.execute(
            select(ScheduledTransaction)
            .where(ScheduledTransaction.user_id == user_id)
            .order_by(ScheduledTransaction.scheduled_date)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str, schedule_id: str) -> ScheduledTransaction | None:
        result = await db.execute(
            select(ScheduledTransaction).where(
                ScheduledTransaction.user_id == user_id,
                ScheduledTransaction.id == schedule_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _check_refs(db: AsyncSession, user_id: str, data: dict) -> bool:
        if data.get("account_id") is not None and not await AccountService.owns(db, user_id, data["account_id"]):
            return False
        return await CategoryService.owns(db, user_id, data.get("category_id"))

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: dict) -> ScheduledTransaction | None:
        if not await ScheduledTransactionService._check_refs(db, user_id, data):
            return None
        schedule = ScheduledTransaction(
            user_id=user_id,
            amount=data["amount"],
            payee=data["payee"],
            notes=data.get("notes"),
            scheduled_date=to_naive_utc(data["scheduled_date"]),
            repeat_interval=data.get("repeat_interval"),
            account_id=data["account_id"],
            category_id=data.get("category_id"),
            is_active=True,
        )
        db.add(schedule)
        await db.commit()
        return schedule

    @staticmethod
    async def update(db: AsyncSession, user_id: str, schedule_id: str, data: dict) -> ScheduledTransaction | None:
        schedule = await ScheduledTransactionService.get_by_id(db, user_id, schedule_id)
        if schedule is None or not await ScheduledTransactionService._check_refs(db, user_id, data):
            return None
        for field in ("amount", "payee", "account_id", "is_active"):
            if data.get(field) is not None:
                setattr(schedule, field, data[field])
        for field in ("notes", "repeat_interval", "category_id"):
            if field in data:
                setattr(schedule, field, data[field])
        if data.get("scheduled_date") is not None:
            schedule.scheduled_date = to_naive_utc(data["scheduled_date"])
            # A new due date re-arms a one-shot schedule
            if "is_active" not in data:
                schedule.is_active = True
        await db.commit()
        return schedule

    @staticmethod
    async def delete(db: AsyncSession, user_id: str, schedule_id: str) -> str | None:
        deleted = await ScheduledTransactionService.bulk_delete(db, user_id, [schedule_id])
        return deleted[0] if deleted else None

    @staticmethod
    async def bulk_delete(db: AsyncSession, user_id: str, ids: list[str]) -> list[str]:
        if not ids:
            return []
        result = await db.execute(
            select(ScheduledTransaction.id).where(
                ScheduledTransaction.user_id == user_id,
                ScheduledTransaction.id.in_(ids),
            )
        )
        owned = list(result.scalars().all())
        if owned:
            await db.execute(delete(ScheduledTransaction).where(ScheduledTransaction.id.in_(owned)))
            await db.commit()
        return owned
