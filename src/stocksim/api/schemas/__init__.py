"""Pydantic schemas for API request/response."""

from stocksim.api.schemas.user import (
    UserCreate,
    UserLogin,
    PasswordChange,
    HoldingResponse,
    UserResponse,
    LoginResponse,
)
from stocksim.api.schemas.trade import TradeRequest, TradeResponse
from stocksim.api.schemas.portfolio import (
    AccountValueResponse,
    LeaderboardEntry,
    PortfolioRowResponse,
    PortfolioReportResponse,
    QuoteResponse,
    TopOfBookResponse,
)

__all__ = [
    "UserCreate",
    "UserLogin",
    "PasswordChange",
    "HoldingResponse",
    "UserResponse",
    "LoginResponse",
    "TradeRequest",
    "TradeResponse",
    "AccountValueResponse",
    "LeaderboardEntry",
    "PortfolioRowResponse",
    "PortfolioReportResponse",
    "QuoteResponse",
    "TopOfBookResponse",
]
