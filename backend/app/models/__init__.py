"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.budget import Budget, Category
from app.models.transaction import Transaction, TransactionType
from app.models.goal import Goal, GoalTransaction, GoalNotification, GoalStatus, GoalSource
from app.models.savings import Savings, SavingsTransaction, SavingsOperation

__all__ = [
    "User",
    "Budget",
    "Category",
    "Transaction",
    "TransactionType",
    "Goal",
    "GoalTransaction",
    "GoalNotification",
    "GoalStatus",
    "GoalSource",
    "Savings",
    "SavingsTransaction",
    "SavingsOperation",
]
