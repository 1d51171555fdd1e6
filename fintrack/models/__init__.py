# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from fintrack.models.account import Account
from fintrack.models.category import Category
from fintrack.models.scheduled_transaction import ScheduledTransaction
from fintrack.models.transaction import Transaction

__all__ = [
    "Account",
    "Category",
    "ScheduledTransaction",
    "Transaction",
]
