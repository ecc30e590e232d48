"""Pydantic schemas for trade endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from stocksim.api.schemas.user import HoldingResponse
from stocksim.domain.models import TradeSide


class TradeRequest(BaseModel):
    """Request schema for a market buy or sell."""

    symbol: str = Field(..., description="Ticker symbol (case-insensitive)")
    shares: Decimal = Field(..., description="Number of shares; fractional allowed")


class TradeResponse(BaseModel):
    """Outcome of an executed trade."""

    success: bool
    side: TradeSide
    symbol: str
    shares: float
    price: float
    amount: float
    cash_after: float
    holding: Optional[HoldingResponse] = None
    executed_at_est: Optional[datetime] = None
