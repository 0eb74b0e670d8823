"""
Pydantic schemas for Savings entity.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from app.core.money import MAX_AMOUNT
from app.models.savings import SavingsOperation


class SavingsCreate(BaseModel):
    """Schema for opening a savings balance in a currency."""
    currency: str = Field(..., min_length=3, max_length=3)
    amount: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)  # initial balance, only used on creation


class SavingsUpdate(BaseModel):
    """Schema for adding to or subtracting from a savings balance."""
    savings_id: str
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    type: SavingsOperation
    description: Optional[str] = None


class SavingsTransactionResponse(BaseModel):
    """Schema for savings log entry response."""
    id: str
    amount: Decimal
    type: SavingsOperation
    description: Optional[str] = None
    created_at: datetime
    
    class Config:
        from_attributes = True


class SavingsResponse(BaseModel):
    """Schema for savings response."""
    id: str
    currency: str
    amount: Decimal
    transactions: List[SavingsTransactionResponse] = []
    created_at: datetime
    
    class Config:
        from_attributes = True


class SavingsEnvelope(BaseModel):
    """Single savings record result."""
    savings: SavingsResponse


class SavingsListResponse(BaseModel):
    """All savings balances of the current user."""
    savings: List[SavingsResponse] = []
