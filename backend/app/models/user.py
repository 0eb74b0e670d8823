"""
User model for authentication and user management.
"""
from sqlalchemy import Column, String, Boolean, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class User(BaseModel):
    """User model; every budget, goal and savings record hangs off a user."""
    __tablename__ = "users"
    
    name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    currency = Column(String(3), nullable=False, default="BYN")
    month_start_day = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    budgets = relationship("Budget", back_populates="user", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")
    goals = relationship("Goal", back_populates="user", cascade="all, delete-orphan")
    savings = relationship("Savings", back_populates="user", cascade="all, delete-orphan")
