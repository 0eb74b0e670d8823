"""
Pydantic schemas for Budget and Category entities.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from app.core.money import MAX_AMOUNT


class CategoryBase(BaseModel):
    """Base category schema."""
    name: str = Field(..., min_length=1)
    icon: str
    color: str
    budget_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)


class CategoryCreate(CategoryBase):
    """Category supplied while setting up a budget."""
    pass


class CategoryAdd(CategoryBase):
    """Schema for adding a category to an existing budget."""
    budget_id: str


class CategoryUpdate(BaseModel):
    """Schema for changing a category's planned and/or spent amount."""
    category_id: str
    budget_amount: Optional[Decimal] = Field(None, gt=0, le=MAX_AMOUNT)
    spent: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)


class CategoryResponse(CategoryBase):
    """Schema for category response."""
    id: str
    budget_id: str
    created_at: datetime
    
    class Config:
        from_attributes = True


class CategoryWithSpent(CategoryResponse):
    """Category annotated with amounts derived from the ledger."""
    spent: Decimal  # never negative
    remaining: Decimal  # may be negative when overspent
    percentage: int  # spent as a share of budget_amount


class BudgetCreate(BaseModel):
    """Schema for budget creation; replaces any budget for the same month."""
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1970)
    total_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    categories: List[CategoryCreate] = []


class BudgetTotalUpdate(BaseModel):
    """Schema for changing a budget's total amount."""
    budget_id: str
    total_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)


class BudgetResponse(BaseModel):
    """Schema for budget response."""
    id: str
    user_id: str
    month: int
    year: int
    total_amount: Decimal
    categories: List[CategoryResponse] = []
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True


class BudgetDetail(BudgetResponse):
    """Budget with per-category spending and period totals."""
    categories: List[CategoryWithSpent] = []
    total_planned: Decimal  # sum of category budgets
    total_spent: Decimal
    remaining: Decimal  # total_amount - total_spent


class BudgetEnvelope(BaseModel):
    """Budget lookup result; budget is null when none is set for the period."""
    budget: Optional[BudgetDetail] = None


class CategoryEnvelope(BaseModel):
    """Category mutation result."""
    category: CategoryResponse
    success: bool = True
