"""SQLAlchemy repository implementations."""

from stocksim.repositories.sqlalchemy.database import (
    create_db_engine,
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    reset_database,
    Base,
)
from stocksim.repositories.sqlalchemy.user_repo import SqlAlchemyUserRepository

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyUserRepository",
]
