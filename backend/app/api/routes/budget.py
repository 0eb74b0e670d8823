"""
Budget and category routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.budget import (
    BudgetCreate, BudgetResponse, BudgetTotalUpdate, BudgetEnvelope,
    CategoryAdd, CategoryUpdate, CategoryEnvelope
)
from app.api.dependencies import get_current_user
from app.services import budget_service, category_service

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("", response_model=BudgetEnvelope)
async def get_budget(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1970),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the budget for a month with spent amounts per category."""
    budget = budget_service.get_budget_for_period(db, current_user.id, month, year)
    return {"budget": budget}


@router.post("", response_model=BudgetResponse, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget_data: BudgetCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Set up the budget for a month, replacing an existing one."""
    return budget_service.create_budget(
        db,
        current_user.id,
        month=budget_data.month,
        year=budget_data.year,
        total_amount=budget_data.total_amount,
        categories=[category.model_dump() for category in budget_data.categories]
    )


@router.patch("/total", response_model=BudgetResponse)
async def update_total_budget(
    budget_data: BudgetTotalUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the total amount of a budget."""
    return budget_service.update_total_amount(
        db, current_user.id, budget_data.budget_id, budget_data.total_amount
    )


@router.patch("/category", response_model=CategoryEnvelope)
async def update_category(
    category_data: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change a category's planned amount and/or its spent amount."""
    category = category_service.update_category(
        db,
        current_user.id,
        category_data.category_id,
        budget_amount=category_data.budget_amount,
        spent=category_data.spent
    )
    return {"category": category, "success": True}


@router.post("/category/add", response_model=CategoryEnvelope, status_code=status.HTTP_201_CREATED)
async def add_category(
    category_data: CategoryAdd,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a category to an existing budget."""
    category = category_service.add_category(
        db,
        current_user.id,
        budget_id=category_data.budget_id,
        name=category_data.name,
        icon=category_data.icon,
        color=category_data.color,
        budget_amount=category_data.budget_amount
    )
    return {"category": category, "success": True}


@router.delete("/category/{category_id}")
async def delete_category(
    category_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a category; its transactions become uncategorized."""
    return {"success": category_service.delete_category(db, current_user.id, category_id)}
