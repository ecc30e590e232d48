"""Application-level exceptions."""

from decimal import Decimal
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Distinguishable failure kinds surfaced to callers."""

    APP_ERROR = "APP_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    SYMBOL_NOT_FOUND = "SYMBOL_NOT_FOUND"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INSUFFICIENT_SHARES = "INSUFFICIENT_SHARES"
    NO_SUCH_HOLDING = "NO_SUCH_HOLDING"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: ErrorKind = ErrorKind.APP_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorKind.VALIDATION_ERROR)


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code=ErrorKind.NOT_FOUND)


class AuthenticationError(AppError):
    """Raised when a username/password pair does not match."""

    def __init__(self):
        super().__init__(
            "Either the username or password is invalid",
            code=ErrorKind.AUTHENTICATION_FAILED,
        )


class SymbolNotFoundError(AppError):
    """Raised when the market data provider has no record for a symbol."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(
            f"Could not find stock with symbol {symbol}",
            code=ErrorKind.SYMBOL_NOT_FOUND,
        )


class UpstreamUnavailableError(AppError):
    """Raised when the market data provider cannot be reached or answers badly."""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorKind.UPSTREAM_UNAVAILABLE)


class InsufficientFundsError(AppError):
    """Raised when a purchase costs more than the available cash."""

    def __init__(self, symbol: str, shares: str, cost: Decimal, available: Decimal):
        self.symbol = symbol
        self.cost = cost
        self.available = available
        super().__init__(
            f"Cannot buy {shares} shares of '{symbol}' worth ${cost:.2f}. "
            f"You only have ${available:.2f}",
            code=ErrorKind.INSUFFICIENT_FUNDS,
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(
        self,
        symbol: str,
        requested: Decimal,
        available: Decimal,
        message: Optional[str] = None,
    ):
        self.symbol = symbol
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            message
            or (
                f"Insufficient shares of {symbol}: requested {requested}, "
                f"available {available}, short by {self.shortfall}"
            ),
            code=ErrorKind.INSUFFICIENT_SHARES,
        )


class NoSuchHoldingError(AppError):
    """Raised when selling a symbol the user does not own."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(
            f"User does not own any shares of {symbol}",
            code=ErrorKind.NO_SUCH_HOLDING,
        )


class PersistenceFailureError(AppError):
    """Raised when the store reports that an update touched no records."""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorKind.PERSISTENCE_FAILURE)
