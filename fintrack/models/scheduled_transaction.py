import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from fintrack.database import Base


class ScheduledTransaction(Base):
    __tablename__ = "scheduled_transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    amount = Column(Integer, nullable=False)  # miliunits
    payee = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    scheduled_date = Column(DateTime, nullable=False)  # next due, naive UTC
    repeat_interval = Column(Integer, nullable=True)  # days; NULL = fire once
    user_id = Column(String(255), nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
