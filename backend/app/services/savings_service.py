"""
Savings balances, one per user and currency, with an append-only log.
"""
import logging
from decimal import Decimal
from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from app.core.config import settings
from app.core.exceptions import ValidationError, parse_enum
from app.core.money import ZERO, MAX_AMOUNT, to_money, parse_money
from app.db.session import atomic
from app.models.savings import Savings, SavingsTransaction, SavingsOperation
from app.services.ownership import get_owned

logger = logging.getLogger(__name__)

TOP_UP_DESCRIPTION = "Top-up"
WITHDRAWAL_DESCRIPTION = "Withdrawal"


def _normalize_currency(currency: str) -> str:
    code = (currency or "").strip().upper()
    if code not in settings.SUPPORTED_CURRENCIES:
        raise ValidationError(f"Unsupported currency: {currency}", field="currency")
    return code


def _find_savings(db: Session, user_id: str, currency: str) -> Optional[Savings]:
    return db.query(Savings).filter(
        Savings.user_id == user_id,
        Savings.currency == currency
    ).first()


def get_or_create_savings(
    db: Session,
    user_id: str,
    currency: str,
    initial_amount: Optional[Decimal] = None
) -> Savings:
    """
    Return the user's savings record for a currency, creating it if absent.

    Requesting an existing currency again returns the existing record
    unchanged; initial_amount only applies on creation.
    """
    currency = _normalize_currency(currency)
    if initial_amount is not None:
        initial_amount = parse_money(initial_amount)
    if initial_amount is not None and initial_amount < 0:
        raise ValidationError("Initial amount cannot be negative", field="amount")

    savings = _find_savings(db, user_id, currency)
    if savings:
        return savings

    try:
        with atomic(db):
            savings = Savings(
                user_id=user_id,
                currency=currency,
                amount=initial_amount if initial_amount is not None else ZERO
            )
            db.add(savings)
    except IntegrityError:
        # Created concurrently by another request: the unique (user, currency) row wins
        logger.info("Savings %s for user %s already exists", currency, user_id)
        return _find_savings(db, user_id, currency)

    db.refresh(savings)
    logger.info("Savings %s (%s) created for user %s", savings.id, currency, user_id)
    return savings


def update_savings(
    db: Session,
    user_id: str,
    savings_id: str,
    amount: Decimal,
    type: SavingsOperation,
    description: Optional[str] = None
) -> Savings:
    """
    Add to or subtract from a savings balance.

    The balance change and its log row are committed together. A
    subtraction larger than the balance is rejected and writes nothing.
    """
    amount = parse_money(amount)
    if amount <= 0:
        raise ValidationError("Amount must be positive", field="amount")
    operation = parse_enum(SavingsOperation, type, "type")
    signed_amount = amount if operation == SavingsOperation.ADD else -amount

    with atomic(db):
        savings = get_owned(db, Savings, savings_id, user_id, lock=True)

        new_amount = to_money(savings.amount) + signed_amount
        if new_amount < 0:
            logger.warning(
                "Rejected %s of %s from savings %s holding %s",
                operation.value, amount, savings.id, savings.amount
            )
            raise ValidationError("Insufficient funds", field="amount")
        if new_amount > MAX_AMOUNT:
            raise ValidationError("Amount is too large", field="amount")

        savings.amount = new_amount
        db.add(SavingsTransaction(
            savings_id=savings.id,
            amount=signed_amount,
            type=operation,
            description=description or (
                TOP_UP_DESCRIPTION if operation == SavingsOperation.ADD else WITHDRAWAL_DESCRIPTION
            )
        ))

    db.refresh(savings)
    logger.info("Savings %s %s %s, balance %s", savings.id, operation.value, amount, savings.amount)
    return savings


def list_savings(db: Session, user_id: str) -> List[Savings]:
    """All savings records of the user, oldest first."""
    return db.query(Savings).options(
        selectinload(Savings.transactions)
    ).filter(
        Savings.user_id == user_id
    ).order_by(Savings.created_at.asc()).all()
