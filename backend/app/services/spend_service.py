"""
Spend reconciliation: a category's spent amount is always derived from
its ledger, never stored.

Expenses add to the total, income attached to a category subtracts from it
(this is how corrective entries lower the spent amount).
"""
from decimal import Decimal
from typing import Dict, Any, Iterable
from app.core.money import ZERO, to_money
from app.models.budget import Category
from app.models.transaction import Transaction, TransactionType


def net_spent(transactions: Iterable[Transaction]) -> Decimal:
    """Signed spend total: expenses minus income. May be negative."""
    total = ZERO
    for transaction in transactions:
        if transaction.type == TransactionType.EXPENSE:
            total += to_money(transaction.amount)
        elif transaction.type == TransactionType.INCOME:
            total -= to_money(transaction.amount)
    return total


def reconcile(category: Category, transactions: Iterable[Transaction]) -> Decimal:
    """Displayed spent amount for a category, floored at zero."""
    return max(ZERO, net_spent(transactions))


def annotate_category(category: Category) -> Dict[str, Any]:
    """Category fields plus spent, remaining and percentage for display."""
    spent = reconcile(category, category.transactions)
    budget_amount = to_money(category.budget_amount)
    percentage = int(round(spent / budget_amount * 100)) if budget_amount > 0 else 0
    
    return {
        "id": category.id,
        "budget_id": category.budget_id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
        "budget_amount": budget_amount,
        "created_at": category.created_at,
        "spent": spent,
        "remaining": budget_amount - spent,
        "percentage": percentage,
    }
