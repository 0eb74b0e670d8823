"""
Per-currency savings balance and its audit log.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Text, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class SavingsOperation(str, enum.Enum):
    """Savings balance operation."""
    ADD = "ADD"
    SUBTRACT = "SUBTRACT"


class Savings(BaseModel):
    """Savings balance for one user in one currency."""
    __tablename__ = "savings"
    
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    currency = Column(String(3), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False, default=0)
    
    # Relationships
    user = relationship("User", back_populates="savings")
    transactions = relationship(
        "SavingsTransaction", back_populates="savings", cascade="all, delete-orphan",
        order_by="SavingsTransaction.created_at.desc()"
    )
    
    # Unique constraint: one balance per user per currency
    __table_args__ = (
        UniqueConstraint('user_id', 'currency', name='uq_user_currency_savings'),
    )


class SavingsTransaction(BaseModel):
    """Append-only log row written together with every balance change."""
    __tablename__ = "savings_transactions"
    
    savings_id = Column(String(36), ForeignKey("savings.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)  # signed
    type = Column(SQLEnum(SavingsOperation), nullable=False)
    description = Column(Text, nullable=True)
    
    # Relationships
    savings = relationship("Savings", back_populates="transactions")
