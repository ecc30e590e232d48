"""View models for market data, trades and valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from stocksim.domain.models import Holding, TradeSide


@dataclass
class TopOfBook:
    """Last-sale snapshot for a symbol; used as the execution price source."""

    symbol: str
    last_sale_price: Decimal
    bid_price: Optional[Decimal] = None
    ask_price: Optional[Decimal] = None
    volume: Optional[int] = None
    last_updated: Optional[datetime] = None


@dataclass
class Quote:
    """Full market quote for a symbol."""

    symbol: str
    latest_price: Decimal
    change: Decimal = field(default_factory=lambda: Decimal("0"))
    open: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    volume: Optional[int] = None
    week52_high: Optional[Decimal] = None
    week52_low: Optional[Decimal] = None


@dataclass
class TradeResult:
    """Outcome of an executed buy or sell."""

    success: bool
    side: TradeSide
    symbol: str
    shares: Decimal
    price: Decimal
    amount: Decimal
    cash_after: Decimal
    holding: Optional[Holding] = None
    executed_at_est: Optional[datetime] = None


@dataclass
class AccountValue:
    """Leaderboard entry."""

    username: str
    account_value: Decimal


@dataclass
class PortfolioRow:
    """One line of the portfolio report; currency figures rounded to cents."""

    symbol: str
    latest_price: Decimal
    today_gain_loss: Decimal
    total_gain_loss: Decimal
    weighted_average_price: Decimal
    current_value: Decimal
    shares: Decimal
    cost_basis: Decimal
