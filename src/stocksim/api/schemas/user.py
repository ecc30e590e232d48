"""Pydantic schemas for user endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Request schema for registering a user."""

    username: str = Field(..., min_length=1, max_length=64, description="Unique username")
    password: str = Field(..., min_length=1, max_length=128)


class UserLogin(BaseModel):
    """Request schema for checking credentials."""

    username: str
    password: str


class PasswordChange(BaseModel):
    """Request schema for replacing a password."""

    new_password: str = Field(..., min_length=1, max_length=128)


class HoldingResponse(BaseModel):
    """A single holding."""

    symbol: str
    shares: float
    weighted_average_price: float
    total_cost: float
    acquired_at_est: Optional[datetime] = None


class UserResponse(BaseModel):
    """Response schema for a user (never includes the password hash)."""

    user_id: str
    username: str
    cash: float
    holdings: list[HoldingResponse]
    created_at_est: Optional[datetime] = None


class LoginResponse(BaseModel):
    """Response for a successful login."""

    authenticated: bool
    user_id: str
    username: str
