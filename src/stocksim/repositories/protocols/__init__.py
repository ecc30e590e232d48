"""Repository protocol definitions (interfaces)."""

from stocksim.repositories.protocols.user_repo import UserRepository

__all__ = [
    "UserRepository",
]
