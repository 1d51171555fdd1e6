"""
budget_service.py — Remaining budget
Combines an account's configured budget with the net of its transactions.
Computed on every read; nothing here is stored.
"""

import logging
from collections.abc import Mapping

from sqlalchemy import select

from fintrack.database import SessionLocal
from fintrack.models.transaction import Transaction
from fintrack.money import sum_amounts, to_display

logger = logging.getLogger(__name__)


def _amount_of(transaction):
    if isinstance(transaction, Mapping):
        return transaction.get("amount")
    return getattr(transaction, "amount", None)


class BudgetService:
    @staticmethod
    def compute_remaining_budget(budget, transactions) -> float:
        """budget (display units, None = 0) plus the net of ``transactions`` (miliunits).

        Unparseable amounts count as zero and are logged by ``sum_amounts``.
        """
        net = to_display(sum_amounts(_amount_of(t) for t in transactions))
        return (budget or 0) + net

    @staticmethod
    async def fetch_amounts(account_id: str, session_factory=SessionLocal) -> list[int]:
        """Amounts of every transaction on one account, read in a session of its own."""
        async with session_factory() as db:
            result = await db.execute(
                select(Transaction.amount).where(Transaction.account_id == account_id)
            )
            return list(result.scalars().all())

    @staticmethod
    async def remaining_budget_for(account_id: str, budget, session_factory=SessionLocal) -> float:
        amounts = await BudgetService.fetch_amounts(account_id, session_factory)
        return BudgetService.compute_remaining_budget(budget, [{"amount": a} for a in amounts])
