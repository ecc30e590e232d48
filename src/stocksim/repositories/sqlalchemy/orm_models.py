"""SQLAlchemy ORM model definitions."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from stocksim.repositories.sqlalchemy.database import Base


class UserORM(Base):
    """SQLAlchemy model for User."""

    __tablename__ = "users"

    # Surrogate key keeps list_all in insertion order
    seq = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), unique=True, nullable=False, index=True)
    username = Column(String(64), unique=True, nullable=False)
    password_hash = Column(String(128), nullable=False, default="")
    cash = Column(Numeric(precision=24, scale=10), nullable=False, default=Decimal("0"))
    created_at_est = Column(DateTime, nullable=False, default=datetime.utcnow)

    holdings = relationship(
        "HoldingORM",
        back_populates="user",
        order_by="HoldingORM.seq",
        cascade="all, delete-orphan",
    )


class HoldingORM(Base):
    """SQLAlchemy model for Holding (one row per user/symbol)."""

    __tablename__ = "holdings"
    __table_args__ = (UniqueConstraint("user_id", "symbol", name="uq_holdings_user_symbol"),)

    seq = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    symbol = Column(String(20), nullable=False)
    shares = Column(Numeric(precision=24, scale=10), nullable=False)
    weighted_average_price = Column(Numeric(precision=24, scale=10), nullable=False)
    total_cost = Column(Numeric(precision=24, scale=10), nullable=False)
    acquired_at_est = Column(DateTime, nullable=True)

    user = relationship("UserORM", back_populates="holdings")
