"""Pydantic schemas for valuation and market data endpoints."""

from typing import Optional

from pydantic import BaseModel


class AccountValueResponse(BaseModel):
    """Total account value (cash plus market value of holdings)."""

    user_id: str
    account_value: float


class LeaderboardEntry(BaseModel):
    """One leaderboard row."""

    rank: int
    username: str
    account_value: float


class PortfolioRowResponse(BaseModel):
    """One portfolio report row; currency figures in cents precision."""

    symbol: str
    latest_price: float
    today_gain_loss: float
    total_gain_loss: float
    weighted_average_price: float
    current_value: float
    shares: float
    cost_basis: float


class PortfolioReportResponse(BaseModel):
    """Portfolio report for one user."""

    user_id: str
    cash: float
    rows: list[PortfolioRowResponse]


class QuoteResponse(BaseModel):
    """Full market quote."""

    symbol: str
    latest_price: float
    change: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    previous_close: Optional[float] = None
    volume: Optional[int] = None
    week52_high: Optional[float] = None
    week52_low: Optional[float] = None


class TopOfBookResponse(BaseModel):
    """Top-of-book snapshot."""

    symbol: str
    last_sale_price: float
    bid_price: Optional[float] = None
    ask_price: Optional[float] = None
    volume: Optional[int] = None
