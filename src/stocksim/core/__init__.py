"""Core utilities and shared functionality."""

from stocksim.core.timezone import (
    now_eastern,
    to_eastern,
    EASTERN_TZ,
)
from stocksim.core.exceptions import (
    ErrorKind,
    AppError,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    SymbolNotFoundError,
    UpstreamUnavailableError,
    InsufficientFundsError,
    InsufficientSharesError,
    NoSuchHoldingError,
    PersistenceFailureError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "EASTERN_TZ",
    "ErrorKind",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "AuthenticationError",
    "SymbolNotFoundError",
    "UpstreamUnavailableError",
    "InsufficientFundsError",
    "InsufficientSharesError",
    "NoSuchHoldingError",
    "PersistenceFailureError",
]
