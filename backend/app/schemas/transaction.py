"""
Pydantic schemas for Transaction entity.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from app.core.money import MAX_AMOUNT
from app.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    """Schema for transaction creation."""
    category_id: Optional[str] = None
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    type: TransactionType
    description: Optional[str] = None
    date: Optional[datetime] = None  # defaults to now


class TransactionResponse(BaseModel):
    """Schema for transaction response."""
    id: str
    user_id: str
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    amount: Decimal
    type: TransactionType
    description: Optional[str] = None
    date: datetime
    
    class Config:
        from_attributes = True
