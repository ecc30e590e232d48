"""User registration, lookup and authentication."""

import logging
import uuid
from decimal import Decimal

import bcrypt

from stocksim.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    PersistenceFailureError,
    ValidationError,
)
from stocksim.core.timezone import now_eastern
from stocksim.core.validation import check_password, check_user_id, normalize_username
from stocksim.domain.models import Holding, User
from stocksim.repositories.protocols import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for managing users.

    New users start with a fixed cash balance and no holdings.
    Passwords are stored as bcrypt hashes only.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        starting_cash: Decimal = Decimal("10000"),
        bcrypt_rounds: int = 12,
    ):
        self._user_repo = user_repo
        self._starting_cash = starting_cash
        self._bcrypt_rounds = bcrypt_rounds

    def register(self, username: str, password: str) -> User:
        """Create a user with the starting cash balance."""
        username = normalize_username(username)
        password = check_password(password)

        if self._user_repo.find_by_username(username):
            raise ValidationError("There is already a user with the given username")

        user = User(
            user_id=str(uuid.uuid4()),
            username=username,
            password_hash=self._hash(password),
            cash=self._starting_cash,
            holdings=[],
            created_at_est=now_eastern(),
        )
        created = self._user_repo.create(user)
        logger.info("Registered user %s", created.username)
        return created

    def authenticate(self, username: str, password: str) -> User:
        """Return the user if the password matches; one message for every failure."""
        try:
            username = normalize_username(username)
            password = check_password(password)
        except ValidationError:
            raise AuthenticationError() from None

        user = self._user_repo.find_by_username(username)
        if user is None or not bcrypt.checkpw(
            password.encode("utf-8"), user.password_hash.encode("utf-8")
        ):
            raise AuthenticationError()
        return user

    def change_password(self, username: str, new_password: str) -> None:
        """Replace a user's password."""
        user = self.get_user_by_username(username)
        new_password = check_password(new_password)
        if not self._user_repo.update_password(user.user_id, self._hash(new_password)):
            raise PersistenceFailureError("Failed to update user")

    def get_user(self, user_id: str) -> User:
        """Get user by ID."""
        user_id = check_user_id(user_id)
        user = self._user_repo.find_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def get_user_by_username(self, username: str) -> User:
        """Get user by username (case-insensitive)."""
        username = normalize_username(username)
        user = self._user_repo.find_by_username(username)
        if not user:
            raise NotFoundError("User", username)
        return user

    def get_holdings(self, user_id: str) -> list[Holding]:
        """Return the user's holdings."""
        return self.get_user(user_id).holdings

    def list_users(self) -> list[User]:
        """List all users."""
        return self._user_repo.list_all()

    def _hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
