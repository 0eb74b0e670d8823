"""
Monthly budget setup and lookup.
"""
import logging
from decimal import Decimal
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session, selectinload
from app.core.exceptions import ValidationError
from app.core.money import ZERO, to_money, parse_money
from app.db.session import atomic
from app.models.budget import Budget, Category
from app.services.ownership import get_owned
from app.services.spend_service import annotate_category

logger = logging.getLogger(__name__)


def _validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", field="month")
    if year < 1970:
        raise ValidationError("Invalid year", field="year")


def budget_detail(budget: Budget) -> Dict[str, Any]:
    """Budget fields with annotated categories and period totals."""
    categories = [annotate_category(category) for category in budget.categories]
    total_spent = sum((c["spent"] for c in categories), ZERO)
    total_planned = sum((c["budget_amount"] for c in categories), ZERO)
    total_amount = to_money(budget.total_amount)
    
    return {
        "id": budget.id,
        "user_id": budget.user_id,
        "month": budget.month,
        "year": budget.year,
        "total_amount": total_amount,
        "categories": categories,
        "created_at": budget.created_at,
        "updated_at": budget.updated_at,
        "total_planned": total_planned,
        "total_spent": total_spent,
        "remaining": total_amount - total_spent,
    }


def get_budget_for_period(db: Session, user_id: str, month: int, year: int) -> Optional[Dict[str, Any]]:
    """
    Get the user's budget for a month with spent recomputed per category.
    
    Returns None when no budget is set for the period.
    """
    _validate_period(month, year)
    
    budget = db.query(Budget).options(
        selectinload(Budget.categories).selectinload(Category.transactions)
    ).filter(
        Budget.user_id == user_id,
        Budget.month == month,
        Budget.year == year
    ).first()
    
    if not budget:
        return None
    return budget_detail(budget)


def create_budget(
    db: Session,
    user_id: str,
    month: int,
    year: int,
    total_amount: Decimal,
    categories: List[Dict[str, Any]]
) -> Budget:
    """
    Create the budget for a month, replacing any existing one.
    
    Categories of a replaced budget are removed; their transactions stay
    in the ledger uncategorized.
    """
    _validate_period(month, year)
    total_amount = parse_money(total_amount, field="total_amount")
    if total_amount <= 0:
        raise ValidationError("Total amount must be positive", field="total_amount")
    categories = [
        dict(item, budget_amount=parse_money(item.get("budget_amount"), field="categories"))
        for item in categories
    ]
    for item in categories:
        if item["budget_amount"] <= 0:
            raise ValidationError("Category budget amount must be positive", field="categories")
    
    with atomic(db):
        existing = db.query(Budget).filter(
            Budget.user_id == user_id,
            Budget.month == month,
            Budget.year == year
        ).with_for_update().first()
        if existing:
            db.delete(existing)
            # Free the (user, month, year) slot before inserting the replacement
            db.flush()
            logger.info("Replacing budget %s for %02d/%d", existing.id, month, year)
        
        budget = Budget(
            user_id=user_id,
            month=month,
            year=year,
            total_amount=total_amount,
            categories=[
                Category(
                    name=item["name"],
                    icon=item["icon"],
                    color=item["color"],
                    budget_amount=item["budget_amount"]
                )
                for item in categories
            ]
        )
        db.add(budget)
    
    db.refresh(budget)
    logger.info("Budget %s created for user %s (%02d/%d)", budget.id, user_id, month, year)
    return budget


def update_total_amount(db: Session, user_id: str, budget_id: str, total_amount: Decimal) -> Budget:
    """Change the total planned amount of a budget."""
    total_amount = parse_money(total_amount, field="total_amount")
    if total_amount <= 0:
        raise ValidationError("Total amount must be positive", field="total_amount")
    
    with atomic(db):
        budget = get_owned(db, Budget, budget_id, user_id, lock=True)
        budget.total_amount = total_amount
    
    db.refresh(budget)
    return budget
