"""
Ledger transactions entered by the user.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import ValidationError, parse_enum
from app.core.money import parse_money
from app.db.base import utcnow
from app.db.session import atomic
from app.models.budget import Category
from app.models.transaction import Transaction, TransactionType
from app.services.ownership import get_owned

logger = logging.getLogger(__name__)


def month_bounds(month: int, year: int):
    """Return [start, end) datetimes covering a calendar month in UTC."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def create_transaction(
    db: Session,
    user_id: str,
    amount: Decimal,
    type: TransactionType,
    category_id: Optional[str] = None,
    description: Optional[str] = None,
    date: Optional[datetime] = None
) -> Transaction:
    """Record an expense or income, optionally against one of the user's categories."""
    amount = parse_money(amount)
    if amount <= 0:
        raise ValidationError("Amount must be positive", field="amount")
    type = parse_enum(TransactionType, type, "type")
    
    with atomic(db):
        if category_id:
            get_owned(db, Category, category_id, user_id)
        transaction = Transaction(
            user_id=user_id,
            category_id=category_id or None,
            amount=amount,
            type=type,
            description=description or None,
            date=date or utcnow()
        )
        db.add(transaction)
    
    db.refresh(transaction)
    logger.info("Transaction %s (%s %s) created by user %s", transaction.id, transaction.type.value, transaction.amount, user_id)
    return transaction


def list_transactions(
    db: Session,
    user_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
    type: Optional[TransactionType] = None
) -> List[Transaction]:
    """List the user's transactions, newest first, optionally for one month and type."""
    query = db.query(Transaction).options(
        joinedload(Transaction.category)
    ).filter(Transaction.user_id == user_id)
    
    if type:
        query = query.filter(Transaction.type == parse_enum(TransactionType, type, "type"))
    
    if month and year:
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12", field="month")
        start, end = month_bounds(month, year)
        query = query.filter(Transaction.date >= start, Transaction.date < end)
    
    return query.order_by(Transaction.date.desc()).all()


def delete_transaction(db: Session, user_id: str, transaction_id: str) -> bool:
    """Delete one of the user's transactions."""
    with atomic(db):
        transaction = get_owned(db, Transaction, transaction_id, user_id)
        db.delete(transaction)
    
    logger.info("Transaction %s deleted by user %s", transaction_id, user_id)
    return True
