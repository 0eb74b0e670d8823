"""
Ledger transaction model.
"""
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel, utcnow
import enum


class TransactionType(str, enum.Enum):
    """Direction of a ledger entry."""
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class Transaction(BaseModel):
    """Money in or out. Amount is always stored positive; the type carries the sign."""
    __tablename__ = "transactions"
    
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    
    # Relationships
    user = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
