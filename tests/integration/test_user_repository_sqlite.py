"""
Integration tests for SqlAlchemyUserRepository against SQLite.

Tests cover:
- Create / find / list round trips including holdings
- Atomic cash increments and holding upserts/removals
- Zero-row results for unknown users and missing holdings
- Updates computed from a stale read are refused
- Persistence across sessions on a file database
"""

from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from stocksim.core.exceptions import PersistenceFailureError
from stocksim.domain.models import HoldingUpdate, User
from stocksim.repositories.sqlalchemy import (
    Base,
    SqlAlchemyUserRepository,
    create_db_engine,
)
from stocksim.repositories.sqlalchemy import orm_models  # noqa: F401
from stocksim.services import PortfolioLedger

from tests.conftest import eastern_datetime, make_holding


# =============================================================================
# CRUD TESTS
# =============================================================================


class TestCrud:
    """Create, find and list users."""

    def test_create_and_find(self, user_repo, sample_user_with_holdings):
        found = user_repo.find_by_id(sample_user_with_holdings.user_id)

        assert found.username == "bob"
        assert found.cash == Decimal("6275.00")
        assert [h.symbol for h in found.holdings] == ["AAPL", "MSFT"]
        assert found.get_holding("MSFT").total_cost == Decimal("1875.00")
        assert found.created_at_est.tzinfo is not None

    def test_find_by_username(self, user_repo, sample_user):
        assert user_repo.find_by_username("alice").user_id == sample_user.user_id
        assert user_repo.find_by_username("nobody") is None

    def test_find_missing(self, user_repo):
        assert user_repo.find_by_id("missing") is None

    def test_list_all_in_insertion_order(self, user_repo, user_factory):
        for name in ["zed", "amy", "max"]:
            user_factory(username=name)

        assert [u.username for u in user_repo.list_all()] == ["zed", "amy", "max"]


# =============================================================================
# MUTATION TESTS
# =============================================================================


class TestMutations:
    """Atomic cash and holding updates."""

    def test_update_cash_increments(self, user_repo, sample_user):
        assert user_repo.update_cash(sample_user.user_id, Decimal("-250.50")) == 1
        assert user_repo.update_cash(sample_user.user_id, Decimal("50.50")) == 1

        assert user_repo.find_by_id(sample_user.user_id).cash == Decimal("9800")

    def test_update_cash_unknown_user(self, user_repo):
        assert user_repo.update_cash("missing", Decimal("1")) == 0

    def test_upsert_holding_inserts_then_replaces(self, user_repo, sample_user):
        acquired = eastern_datetime(2024, 3, 1)
        assert user_repo.upsert_holding(
            sample_user.user_id, make_holding("AAPL", Decimal("2"), Decimal("100"), acquired)
        ) == 1
        assert user_repo.upsert_holding(
            sample_user.user_id, make_holding("AAPL", Decimal("5"), Decimal("120"))
        ) == 1

        holding = user_repo.find_by_id(sample_user.user_id).get_holding("AAPL")
        assert holding.shares == Decimal("5")
        assert holding.total_cost == Decimal("600")
        # The first acquisition time is kept
        assert holding.acquired_at_est == acquired

    def test_upsert_holding_unknown_user(self, user_repo):
        assert user_repo.upsert_holding("missing", make_holding("AAPL", Decimal("1"), Decimal("1"))) == 0

    def test_remove_holding(self, user_repo, sample_user_with_holdings):
        user_id = sample_user_with_holdings.user_id

        assert user_repo.remove_holding(user_id, "AAPL") == 1
        assert user_repo.remove_holding(user_id, "AAPL") == 0
        assert [h.symbol for h in user_repo.find_by_id(user_id).holdings] == ["MSFT"]

    def test_apply_holding_update_is_atomic(self, user_repo, sample_user):
        """
        GIVEN a removal of a holding the user does not have
        WHEN the update is applied
        THEN nothing changes, including the cash delta
        """
        update = HoldingUpdate(symbol="AAPL", cash_delta=Decimal("100"), holding=None)

        assert user_repo.apply_holding_update(sample_user.user_id, update) == 0
        assert user_repo.find_by_id(sample_user.user_id).cash == Decimal("10000")

    def test_apply_holding_update_writes_both(self, user_repo, sample_user):
        update = HoldingUpdate(
            symbol="TSLA",
            cash_delta=Decimal("-497.50"),
            holding=make_holding("TSLA", Decimal("2"), Decimal("248.75")),
        )

        assert user_repo.apply_holding_update(sample_user.user_id, update) == 1

        stored = user_repo.find_by_id(sample_user.user_id)
        assert stored.cash == Decimal("9502.50")
        assert stored.get_holding("TSLA").shares == Decimal("2")

    def test_apply_holding_update_refuses_moved_position(self, user_repo, sample_user_with_holdings):
        """
        GIVEN an update computed from 8 AAPL while 10 are stored
        WHEN it is applied
        THEN nothing changes, including the cash delta
        """
        update = HoldingUpdate(
            symbol="AAPL",
            cash_delta=Decimal("-100"),
            holding=make_holding("AAPL", Decimal("9"), Decimal("180")),
            expected_shares=Decimal("8"),
        )

        assert user_repo.apply_holding_update(sample_user_with_holdings.user_id, update) == 0

        stored = user_repo.find_by_id(sample_user_with_holdings.user_id)
        assert stored.cash == Decimal("6275.00")
        assert stored.get_holding("AAPL").shares == Decimal("10")

    def test_apply_holding_update_refuses_duplicate_open(self, user_repo, sample_user_with_holdings):
        """Opening a position that already exists is refused."""
        update = HoldingUpdate(
            symbol="AAPL",
            cash_delta=Decimal("-100"),
            holding=make_holding("AAPL", Decimal("1"), Decimal("100")),
            expected_shares=None,
        )

        assert user_repo.apply_holding_update(sample_user_with_holdings.user_id, update) == 0
        assert user_repo.find_by_id(sample_user_with_holdings.user_id).cash == Decimal("6275.00")

    def test_update_password(self, user_repo, sample_user):
        assert user_repo.update_password(sample_user.user_id, "new-hash") == 1
        assert user_repo.update_password("missing", "new-hash") == 0
        assert user_repo.find_by_id(sample_user.user_id).password_hash == "new-hash"


# =============================================================================
# FILE DATABASE TESTS
# =============================================================================


class TestFileDatabase:
    """State survives across sessions on an on-disk database."""

    def test_state_visible_from_new_session(self, tmp_path):
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        first = Session()
        SqlAlchemyUserRepository(first).create(
            User(user_id="u1", username="alice", cash=Decimal("10000"))
        )
        SqlAlchemyUserRepository(first).update_cash("u1", Decimal("-1000"))
        first.close()

        second = Session()
        try:
            stored = SqlAlchemyUserRepository(second).find_by_id("u1")
            assert stored.cash == Decimal("9000")
        finally:
            second.close()
            engine.dispose()

    def test_overlapping_trades_from_two_sessions(self, tmp_path):
        """
        GIVEN two sessions that each loaded alice before trading
        WHEN both buy 10 AAPL at $100
        THEN the second buy fails and cash matches the shares held
        """
        engine = create_db_engine(f"sqlite:///{tmp_path / 'race.db'}")
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        first, second = Session(), Session()
        try:
            SqlAlchemyUserRepository(first).create(
                User(user_id="u1", username="alice", cash=Decimal("10000"))
            )
            first_repo = SqlAlchemyUserRepository(first)
            second_repo = SqlAlchemyUserRepository(second)
            alice_a = first_repo.find_by_id("u1")
            alice_b = second_repo.find_by_id("u1")

            PortfolioLedger(first_repo).apply_buy(alice_a, "AAPL", Decimal("10"), Decimal("100"))
            with pytest.raises(PersistenceFailureError):
                PortfolioLedger(second_repo).apply_buy(
                    alice_b, "AAPL", Decimal("10"), Decimal("100")
                )

            stored = second_repo.find_by_id("u1")
            assert stored.cash == Decimal("9000")
            assert stored.get_holding("AAPL").shares == Decimal("10")

            # A fresh read trades normally
            PortfolioLedger(second_repo).apply_buy(stored, "AAPL", Decimal("10"), Decimal("100"))
            reloaded = first_repo.find_by_id("u1")
            assert reloaded.cash == Decimal("8000")
            assert reloaded.get_holding("AAPL").shares == Decimal("20")
        finally:
            first.close()
            second.close()
            engine.dispose()
