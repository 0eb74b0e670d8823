"""
Savings goal, its contribution log and milestone notifications.
"""
from sqlalchemy import (
    Column, String, Numeric, DateTime, Date, ForeignKey, Integer, Text, Boolean,
    UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from app.db.base import BaseModel, utcnow
import enum


class GoalStatus(str, enum.Enum):
    """Goal status enumeration."""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class GoalSource(str, enum.Enum):
    """Where a goal contribution came from."""
    MANUAL = "MANUAL"
    AUTO = "AUTO"
    FROM_SAVINGS = "FROM_SAVINGS"


class Goal(BaseModel):
    """Savings target with accumulated progress."""
    __tablename__ = "goals"
    
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    target_amount = Column(Numeric(15, 2), nullable=False)
    current_amount = Column(Numeric(15, 2), nullable=False, default=0)
    image_url = Column(String(500), nullable=True)
    priority = Column(Integer, nullable=False, default=1)  # 1 (highest) - 3
    deadline = Column(Date, nullable=True)
    status = Column(SQLEnum(GoalStatus), default=GoalStatus.ACTIVE, nullable=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    
    # Relationships
    user = relationship("User", back_populates="goals")
    transactions = relationship(
        "GoalTransaction", back_populates="goal", cascade="all, delete-orphan",
        order_by="GoalTransaction.date.desc()"
    )
    notifications = relationship("GoalNotification", back_populates="goal", cascade="all, delete-orphan")


class GoalTransaction(BaseModel):
    """Append-only record of a contribution (positive) or withdrawal (negative)."""
    __tablename__ = "goal_transactions"
    
    goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    source = Column(SQLEnum(GoalSource), nullable=False, default=GoalSource.MANUAL)
    note = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    
    # Relationships
    goal = relationship("Goal", back_populates="transactions")


class GoalNotification(BaseModel):
    """One-time notice that a goal reached a progress milestone."""
    __tablename__ = "goal_notifications"
    
    goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    milestone = Column(Integer, nullable=False)  # 20, 50, 80 or 100
    is_read = Column(Boolean, nullable=False, default=False)
    
    # Relationships
    goal = relationship("Goal", back_populates="notifications")
    
    # Unique constraint: a milestone is announced once per goal
    __table_args__ = (
        UniqueConstraint('goal_id', 'milestone', name='uq_goal_milestone'),
    )
