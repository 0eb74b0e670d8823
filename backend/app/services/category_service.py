"""
Category mutations: planned amount edits, direct "spent so far" edits,
adding and removing categories.

Transactions are never edited in place. Setting the spent amount of a
category writes a corrective ledger entry for the difference instead.
"""
import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.money import parse_money
from app.db.base import utcnow
from app.db.session import atomic
from app.models.budget import Budget, Category
from app.models.transaction import Transaction, TransactionType
from app.services.ownership import get_owned
from app.services.spend_service import net_spent

logger = logging.getLogger(__name__)

SPEND_CORRECTION_NOTE = "📝 Spend correction"
SPEND_REDUCTION_NOTE = "📝 Spend correction (decrease)"


def update_category(
    db: Session,
    user_id: str,
    category_id: str,
    budget_amount: Optional[Decimal] = None,
    spent: Optional[Decimal] = None
) -> Category:
    """
    Change a category's planned amount and/or its effective spent amount.
    
    The spent amount is moved to the requested value by appending an
    EXPENSE (increase) or INCOME (decrease) transaction for the difference.
    Differences within SPEND_CORRECTION_THRESHOLD write nothing.
    """
    if budget_amount is not None:
        budget_amount = parse_money(budget_amount, field="budget_amount")
        if budget_amount <= 0:
            raise ValidationError("Budget amount must be positive", field="budget_amount")
    if spent is not None:
        spent = parse_money(spent, field="spent")
        if spent < 0:
            raise ValidationError("Spent amount cannot be negative", field="spent")
    
    with atomic(db):
        category = get_owned(db, Category, category_id, user_id, lock=True)
        
        if budget_amount is not None:
            category.budget_amount = budget_amount
        
        if spent is not None:
            # Signed value: the zero floor applies to display only
            current_spent = net_spent(category.transactions)
            difference = spent - current_spent
            
            if abs(difference) > settings.SPEND_CORRECTION_THRESHOLD:
                increase = difference > 0
                db.add(Transaction(
                    user_id=user_id,
                    category_id=category.id,
                    amount=abs(difference),
                    type=TransactionType.EXPENSE if increase else TransactionType.INCOME,
                    description=SPEND_CORRECTION_NOTE if increase else SPEND_REDUCTION_NOTE,
                    date=utcnow()
                ))
                logger.info(
                    "Category %s spent corrected from %s to %s by user %s",
                    category.id, current_spent, spent, user_id
                )
    
    db.refresh(category)
    return category


def add_category(
    db: Session,
    user_id: str,
    budget_id: str,
    name: str,
    icon: str,
    color: str,
    budget_amount: Decimal
) -> Category:
    """Add a category to an existing budget of the user."""
    budget_amount = parse_money(budget_amount, field="budget_amount")
    if budget_amount <= 0:
        raise ValidationError("Budget amount must be positive", field="budget_amount")
    if not name or not name.strip():
        raise ValidationError("Category name is required", field="name")
    
    with atomic(db):
        budget = get_owned(db, Budget, budget_id, user_id)
        category = Category(
            budget_id=budget.id,
            name=name.strip(),
            icon=icon,
            color=color,
            budget_amount=budget_amount
        )
        db.add(category)
    
    db.refresh(category)
    logger.info("Category %s added to budget %s", category.id, budget_id)
    return category


def delete_category(db: Session, user_id: str, category_id: str) -> bool:
    """Delete a category. Its transactions stay in the ledger, uncategorized."""
    with atomic(db):
        category = get_owned(db, Category, category_id, user_id)
        db.delete(category)
    
    logger.info("Category %s deleted by user %s", category_id, user_id)
    return True
