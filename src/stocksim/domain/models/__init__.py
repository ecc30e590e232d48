"""Domain models package."""

from stocksim.domain.models.enums import TradeSide
from stocksim.domain.models.user import User, Holding, HoldingUpdate

__all__ = [
    "TradeSide",
    "User",
    "Holding",
    "HoldingUpdate",
]
