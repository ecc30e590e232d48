"""SQLAlchemy implementation of UserRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stocksim.core.timezone import to_eastern
from stocksim.domain.models import User, Holding, HoldingUpdate
from stocksim.repositories.sqlalchemy.orm_models import UserORM, HoldingORM


class SqlAlchemyUserRepository:
    """SQLAlchemy-backed user repository; holdings live in their own table."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, user: User) -> User:
        """Persist a new user with its holdings."""
        orm_user = UserORM(
            user_id=user.user_id,
            username=user.username,
            password_hash=user.password_hash,
            cash=user.cash,
            created_at_est=user.created_at_est,
        )
        for holding in user.holdings:
            orm_user.holdings.append(self._holding_to_orm(user.user_id, holding))
        self._db.add(orm_user)
        self._db.commit()
        self._db.refresh(orm_user)
        return self._to_domain(orm_user)

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve user by ID."""
        orm_user = self._db.query(UserORM).filter(UserORM.user_id == user_id).first()
        return self._to_domain(orm_user) if orm_user else None

    def find_by_username(self, username: str) -> Optional[User]:
        """Retrieve user by username."""
        orm_user = self._db.query(UserORM).filter(UserORM.username == username).first()
        return self._to_domain(orm_user) if orm_user else None

    def list_all(self) -> list[User]:
        """List all users in insertion order."""
        orm_users = self._db.query(UserORM).order_by(UserORM.seq).all()
        return [self._to_domain(u) for u in orm_users]

    def update_cash(self, user_id: str, delta: Decimal) -> int:
        """Atomically add delta to the user's cash."""
        affected = self._increment_cash(user_id, delta)
        self._finish(affected)
        return affected

    def upsert_holding(self, user_id: str, holding: Holding) -> int:
        """Insert or replace the holding keyed by its symbol."""
        if not self._user_exists(user_id):
            return 0
        self._write_holding(user_id, holding)
        self._db.commit()
        return 1

    def remove_holding(self, user_id: str, symbol: str) -> int:
        """Remove the holding for symbol."""
        affected = self._delete_holding(user_id, symbol)
        self._finish(affected)
        return affected

    def apply_holding_update(self, user_id: str, update: HoldingUpdate) -> int:
        """
        Apply a cash delta and a holding upsert/removal as one transaction.

        The holding write only matches a stored position whose share count
        equals update.expected_shares (or no stored position when it is None),
        so an update computed from a stale read changes nothing. Returns 0
        (and rolls back) if the user is missing or the position has moved.
        """
        affected = self._increment_cash(user_id, update.cash_delta)
        if affected:
            affected = self._write_checked(user_id, update)
        self._finish(affected)
        return affected

    def update_password(self, user_id: str, password_hash: str) -> int:
        """Replace the stored password hash."""
        result = self._db.execute(
            update(UserORM)
            .where(UserORM.user_id == user_id)
            .values(password_hash=password_hash)
        )
        self._finish(result.rowcount)
        return result.rowcount

    # Internal helpers (no commit)

    def _increment_cash(self, user_id: str, delta: Decimal) -> int:
        result = self._db.execute(
            update(UserORM)
            .where(UserORM.user_id == user_id)
            .values(cash=UserORM.cash + delta)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _delete_holding(self, user_id: str, symbol: str) -> int:
        result = self._db.execute(
            delete(HoldingORM)
            .where(HoldingORM.user_id == user_id, HoldingORM.symbol == symbol)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _write_holding(self, user_id: str, holding: Holding) -> None:
        orm_holding = self._find_holding(user_id, holding.symbol)
        if orm_holding:
            orm_holding.shares = holding.shares
            orm_holding.weighted_average_price = holding.weighted_average_price
            orm_holding.total_cost = holding.total_cost
        else:
            self._db.add(self._holding_to_orm(user_id, holding))
        self._db.flush()

    def _write_checked(self, user_id: str, change: HoldingUpdate) -> int:
        if change.expected_shares is None:
            if change.removed or self._find_holding(user_id, change.symbol) is not None:
                return 0
            self._db.add(self._holding_to_orm(user_id, change.holding))
            try:
                self._db.flush()
            except IntegrityError:
                # Another writer opened the same position first
                return 0
            return 1

        position = (
            HoldingORM.user_id == user_id,
            HoldingORM.symbol == change.symbol,
            HoldingORM.shares == change.expected_shares,
        )
        if change.removed:
            statement = delete(HoldingORM).where(*position)
        else:
            statement = (
                update(HoldingORM)
                .where(*position)
                .values(
                    shares=change.holding.shares,
                    weighted_average_price=change.holding.weighted_average_price,
                    total_cost=change.holding.total_cost,
                )
            )
        result = self._db.execute(statement.execution_options(synchronize_session=False))
        return result.rowcount

    def _find_holding(self, user_id: str, symbol: str) -> Optional[HoldingORM]:
        return (
            self._db.query(HoldingORM)
            .filter(HoldingORM.user_id == user_id, HoldingORM.symbol == symbol)
            .first()
        )

    def _user_exists(self, user_id: str) -> bool:
        return (
            self._db.query(UserORM.user_id).filter(UserORM.user_id == user_id).first()
            is not None
        )

    def _finish(self, affected: int) -> None:
        if affected:
            self._db.commit()
        else:
            self._db.rollback()
        # Bulk statements bypass the identity map
        self._db.expire_all()

    @staticmethod
    def _holding_to_orm(user_id: str, holding: Holding) -> HoldingORM:
        return HoldingORM(
            user_id=user_id,
            symbol=holding.symbol,
            shares=holding.shares,
            weighted_average_price=holding.weighted_average_price,
            total_cost=holding.total_cost,
            acquired_at_est=holding.acquired_at_est,
        )

    @staticmethod
    def _holding_to_domain(orm: HoldingORM) -> Holding:
        """Convert ORM holding to domain model."""
        return Holding(
            symbol=orm.symbol,
            shares=Decimal(str(orm.shares)),
            weighted_average_price=Decimal(str(orm.weighted_average_price)),
            total_cost=Decimal(str(orm.total_cost)),
            acquired_at_est=to_eastern(orm.acquired_at_est) if orm.acquired_at_est else None,
        )

    def _to_domain(self, orm: UserORM) -> User:
        """Convert ORM model to domain model."""
        return User(
            user_id=orm.user_id,
            username=orm.username,
            password_hash=orm.password_hash,
            cash=Decimal(str(orm.cash)) if orm.cash is not None else Decimal("0"),
            holdings=[self._holding_to_domain(h) for h in orm.holdings],
            created_at_est=to_eastern(orm.created_at_est) if orm.created_at_est else None,
        )
