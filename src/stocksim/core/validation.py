"""Input validation and normalization helpers.

All checks run before any I/O and raise ValidationError on bad input.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from stocksim.core.exceptions import ValidationError

_SYMBOL_RE = re.compile(r"^[A-Z0-9][A-Z0-9.\-]{0,9}$")
_USERNAME_RE = re.compile(r"^[a-z0-9_]{3,32}$")
MAX_PASSWORD_BYTES = 72


def normalize_symbol(symbol: Any) -> str:
    """Strip and upper-case a ticker symbol, rejecting malformed input."""
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("Symbol must be a non-empty string")
    normalized = symbol.strip().upper()
    if not _SYMBOL_RE.match(normalized):
        raise ValidationError(f"Invalid symbol: {symbol.strip()}")
    return normalized


def check_shares(shares: Any) -> Decimal:
    """Return shares as a Decimal; must be a finite number greater than zero."""
    if isinstance(shares, bool) or shares is None:
        raise ValidationError("Shares must be a number")
    try:
        value = shares if isinstance(shares, Decimal) else Decimal(str(shares).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Shares must be a number, got {shares!r}")
    if not value.is_finite():
        raise ValidationError("Shares must be a finite number")
    if value <= 0:
        raise ValidationError("Shares must be greater than 0")
    return value


def check_price(price: Any) -> Decimal:
    """Return a price as a Decimal; must be greater than zero."""
    if isinstance(price, bool) or price is None:
        raise ValidationError("Price must be a number")
    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Price must be a number, got {price!r}")
    if not value.is_finite() or value <= 0:
        raise ValidationError("Price must be greater than 0")
    return value


def check_user_id(user_id: Any) -> str:
    """Return a stripped user id; must be a non-empty string."""
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("User id must be a non-empty string")
    return user_id.strip()


def normalize_username(username: Any) -> str:
    """Strip and lower-case a username (3-32 letters, digits or underscores)."""
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username must be a non-empty string")
    normalized = username.strip().lower()
    if not _USERNAME_RE.match(normalized):
        raise ValidationError(
            "Username must be 3-32 characters of letters, digits or underscores"
        )
    return normalized


def check_password(password: Any) -> str:
    """Return a stripped password: 6+ characters, at most 72 UTF-8 bytes, no spaces."""
    if not isinstance(password, str) or not password.strip():
        raise ValidationError("Password must be a non-empty string")
    password = password.strip()
    if any(ch.isspace() for ch in password):
        raise ValidationError("Password cannot contain spaces")
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")
    # bcrypt only accepts up to 72 bytes
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return password


def format_shares(shares: Decimal) -> str:
    """Render a share count without trailing zeros (10, 2.5)."""
    if shares == shares.to_integral_value():
        return str(shares.quantize(Decimal("1")))
    return format(shares.normalize(), "f")


def pluralize_shares(shares: Decimal) -> str:
    """Render '1 share' or 'N shares'."""
    noun = "share" if shares == 1 else "shares"
    return f"{format_shares(shares)} {noun}"
