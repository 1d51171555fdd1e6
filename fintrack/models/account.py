import uuid

from sqlalchemy import Column, Integer, String
from fintrack.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    plaid_id = Column(String(255), nullable=True)
    name = Column(String(255), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)
    budget = Column(Integer, nullable=True, default=0)  # display units, not miliunits
