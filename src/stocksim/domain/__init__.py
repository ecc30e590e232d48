"""Domain layer - pure business models with no external dependencies."""

from stocksim.domain.models import (
    TradeSide,
    User,
    Holding,
    HoldingUpdate,
)

__all__ = [
    "TradeSide",
    "User",
    "Holding",
    "HoldingUpdate",
]
