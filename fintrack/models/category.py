import uuid

from sqlalchemy import Column, String
from fintrack.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    plaid_id = Column(String(255), nullable=True)
    name = Column(String(255), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)
