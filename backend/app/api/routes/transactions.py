"""
Transaction ledger routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.models.user import User
from app.models.transaction import Transaction, TransactionType
from app.schemas.transaction import TransactionCreate, TransactionResponse
from app.api.dependencies import get_current_user
from app.services import transaction_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _to_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        user_id=transaction.user_id,
        category_id=transaction.category_id,
        category_name=transaction.category.name if transaction.category else None,
        amount=transaction.amount,
        type=transaction.type,
        description=transaction.description,
        date=transaction.date
    )


@router.get("", response_model=List[TransactionResponse])
async def get_transactions(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970),
    type: Optional[TransactionType] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List transactions, newest first, optionally for a month and a type."""
    transactions = transaction_service.list_transactions(
        db, current_user.id, month=month, year=year, type=type
    )
    return [_to_response(t) for t in transactions]


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record an expense or an income."""
    transaction = transaction_service.create_transaction(
        db,
        current_user.id,
        amount=transaction_data.amount,
        type=transaction_data.type,
        category_id=transaction_data.category_id,
        description=transaction_data.description,
        date=transaction_data.date
    )
    return _to_response(transaction)


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a transaction."""
    return {"success": transaction_service.delete_transaction(db, current_user.id, transaction_id)}
