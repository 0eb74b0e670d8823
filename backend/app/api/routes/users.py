"""
User profile routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.config import settings
from app.db.session import get_db
from app.schemas.user import UserResponse, UserUpdate
from app.models.user import User
from app.api.dependencies import get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update name, default currency or the day a budget month starts."""
    if user_data.name is not None:
        current_user.name = user_data.name
    if user_data.currency is not None:
        currency = user_data.currency.upper()
        if currency not in settings.SUPPORTED_CURRENCIES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported currency: {user_data.currency}"
            )
        current_user.currency = currency
    if user_data.month_start_day is not None:
        current_user.month_start_day = user_data.month_start_day
    
    db.commit()
    db.refresh(current_user)
    return current_user
