"""View models for service outputs."""

from stocksim.domain.views.portfolio import (
    TopOfBook,
    Quote,
    TradeResult,
    AccountValue,
    PortfolioRow,
)

__all__ = [
    "TopOfBook",
    "Quote",
    "TradeResult",
    "AccountValue",
    "PortfolioRow",
]
