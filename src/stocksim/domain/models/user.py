"""User and Holding domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Holding:
    """
    A user's position in one ticker symbol.

    total_cost is kept equal to shares * weighted_average_price.
    A holding with zero shares is removed, never stored.
    """

    symbol: str
    shares: Decimal
    weighted_average_price: Decimal
    total_cost: Decimal
    acquired_at_est: Optional[datetime] = field(default=None)


@dataclass
class User:
    """
    Simulated trading account.

    Cash and holdings are only mutated through PortfolioLedger.
    """

    user_id: str
    username: str
    password_hash: str = field(default="", repr=False)
    cash: Decimal = field(default_factory=lambda: Decimal("0"))
    holdings: list[Holding] = field(default_factory=list)
    created_at_est: Optional[datetime] = field(default=None)

    def get_holding(self, symbol: str) -> Optional[Holding]:
        """Return the holding for a symbol, or None if not owned."""
        for holding in self.holdings:
            if holding.symbol == symbol:
                return holding
        return None


@dataclass
class HoldingUpdate:
    """
    Single-symbol mutation applied atomically to one user record.

    holding=None removes the position for symbol. expected_shares is the
    share count the update was computed from (None when the symbol was not
    held); the store refuses the update if the stored position differs.
    """

    symbol: str
    cash_delta: Decimal
    holding: Optional[Holding] = None
    expected_shares: Optional[Decimal] = None

    @property
    def removed(self) -> bool:
        return self.holding is None
