"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    """Base user schema."""
    name: Optional[str] = None
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user registration."""
    name: str = Field(..., min_length=2)
    password: str = Field(..., min_length=6)
    currency: str = Field("BYN", min_length=3, max_length=3)


class UserUpdate(BaseModel):
    """Schema for profile update."""
    name: Optional[str] = Field(None, min_length=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    month_start_day: Optional[int] = Field(None, ge=1, le=28)


class UserResponse(UserBase):
    """Schema for user response."""
    id: str
    currency: str
    month_start_day: int
    is_active: bool
    created_at: datetime
    
    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
