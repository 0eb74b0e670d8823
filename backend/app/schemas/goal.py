"""
Pydantic schemas for Goal entity.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from app.core.money import MAX_AMOUNT
from app.models.goal import GoalStatus, GoalSource


class GoalCreate(BaseModel):
    """Schema for goal creation."""
    name: str = Field(..., min_length=1)
    target_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    image_url: Optional[str] = None
    priority: int = Field(1, ge=1, le=3)
    deadline: Optional[date] = None


class GoalContribution(BaseModel):
    """Signed amount applied to a goal: positive tops up, negative withdraws."""
    goal_id: str
    amount: Decimal = Field(..., ge=-MAX_AMOUNT, le=MAX_AMOUNT)
    source: GoalSource = GoalSource.MANUAL
    note: Optional[str] = None


class GoalTransactionResponse(BaseModel):
    """Schema for goal transaction response."""
    id: str
    amount: Decimal
    source: GoalSource
    note: Optional[str] = None
    date: datetime
    
    class Config:
        from_attributes = True


class GoalResponse(BaseModel):
    """Schema for goal response."""
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    image_url: Optional[str] = None
    priority: int
    deadline: Optional[date] = None
    status: GoalStatus
    completed_at: Optional[datetime] = None
    percentage: int = 0
    transactions: List[GoalTransactionResponse] = []
    created_at: datetime
    
    class Config:
        from_attributes = True


class GoalContributionResult(BaseModel):
    """Updated goal plus milestones crossed by this contribution."""
    goal: GoalResponse
    notifications: List[int] = []


class GoalNotificationResponse(BaseModel):
    """Schema for milestone notification response."""
    id: str
    goal_id: str
    goal_name: str
    milestone: int
    is_read: bool
    created_at: datetime
