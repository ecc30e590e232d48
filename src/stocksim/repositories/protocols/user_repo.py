"""User repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from stocksim.domain.models import User, Holding, HoldingUpdate


class UserRepository(Protocol):
    """
    Interface for user record access.

    Every mutating call is atomic for a single user record and returns
    the number of records it affected (0 means nothing was changed).

    update_cash, upsert_holding and remove_holding are single-step store
    primitives for maintenance and seeding; they apply no stale-read check.
    Trades always go through apply_holding_update, which writes cash and
    the holding together and refuses updates computed from a stale read.
    """

    def create(self, user: User) -> User:
        """Persist a new user with its holdings."""
        ...

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve user (with holdings) by ID."""
        ...

    def find_by_username(self, username: str) -> Optional[User]:
        """Retrieve user (with holdings) by normalized username."""
        ...

    def list_all(self) -> list[User]:
        """List all users in insertion order."""
        ...

    def update_cash(self, user_id: str, delta: Decimal) -> int:
        """Atomically add delta to the user's cash."""
        ...

    def upsert_holding(self, user_id: str, holding: Holding) -> int:
        """Insert or replace the holding keyed by its symbol."""
        ...

    def remove_holding(self, user_id: str, symbol: str) -> int:
        """Remove the holding for symbol."""
        ...

    def apply_holding_update(self, user_id: str, update: HoldingUpdate) -> int:
        """
        Apply a cash delta and a holding upsert/removal as one transaction.

        Returns 0 unless the stored share count matches update.expected_shares.
        """
        ...

    def update_password(self, user_id: str, password_hash: str) -> int:
        """Replace the stored password hash."""
        ...
