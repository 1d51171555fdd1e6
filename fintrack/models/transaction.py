import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from fintrack.database import Base

TYPE_DEFAULT = "default"
TYPE_SCHEDULED = "scheduled"


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    amount = Column(Integer, nullable=False)  # miliunits
    payee = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(20), nullable=False, default=TYPE_DEFAULT)  # default/scheduled
    scheduled_transaction_id = Column(
        String(36), ForeignKey("scheduled_transactions.id", ondelete="SET NULL"), nullable=True
    )
