"""Repository layer - data access abstractions and implementations."""

from stocksim.repositories.protocols import UserRepository

__all__ = [
    "UserRepository",
]
