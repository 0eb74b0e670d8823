"""
Monthly budget and its spending categories.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Budget(BaseModel):
    """Planned spending envelope for one user and one calendar month."""
    __tablename__ = "budgets"
    
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)
    total_amount = Column(Numeric(15, 2), nullable=False)
    
    # Relationships
    user = relationship("User", back_populates="budgets")
    categories = relationship("Category", back_populates="budget", cascade="all, delete-orphan")
    
    # Unique constraint: one budget per user per month
    __table_args__ = (
        UniqueConstraint('user_id', 'month', 'year', name='uq_user_month_year_budget'),
    )


class Category(BaseModel):
    """Spending bucket inside a budget. Spent is derived from transactions, never stored."""
    __tablename__ = "categories"
    
    budget_id = Column(String(36), ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(50), nullable=False)
    color = Column(String(20), nullable=False)
    budget_amount = Column(Numeric(15, 2), nullable=False)
    
    # Relationships
    budget = relationship("Budget", back_populates="categories")
    # No delete cascade: transactions outlive their category and become uncategorized
    transactions = relationship("Transaction", back_populates="category")
