"""
Savings routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.savings import Savings
from app.schemas.savings import (
    SavingsCreate, SavingsUpdate, SavingsResponse, SavingsEnvelope, SavingsListResponse,
    SavingsTransactionResponse
)
from app.api.dependencies import get_current_user
from app.services import savings_service

router = APIRouter(prefix="/savings", tags=["savings"])

RECENT_TRANSACTIONS = 10


def _to_response(savings: Savings) -> SavingsResponse:
    return SavingsResponse(
        id=savings.id,
        currency=savings.currency,
        amount=savings.amount,
        transactions=[
            SavingsTransactionResponse.model_validate(t)
            for t in savings.transactions[:RECENT_TRANSACTIONS]
        ],
        created_at=savings.created_at
    )


@router.get("", response_model=SavingsListResponse)
async def get_savings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List savings balances with their latest operations."""
    return {"savings": [_to_response(s) for s in savings_service.list_savings(db, current_user.id)]}


@router.post("", response_model=SavingsEnvelope)
async def get_or_create_savings(
    savings_data: SavingsCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Open a savings balance in a currency, or return the existing one."""
    savings = savings_service.get_or_create_savings(
        db, current_user.id, savings_data.currency, initial_amount=savings_data.amount
    )
    return {"savings": _to_response(savings)}


@router.patch("", response_model=SavingsEnvelope)
async def update_savings(
    savings_data: SavingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add to or subtract from a savings balance."""
    savings = savings_service.update_savings(
        db,
        current_user.id,
        savings_data.savings_id,
        amount=savings_data.amount,
        type=savings_data.type,
        description=savings_data.description
    )
    return {"savings": _to_response(savings)}
