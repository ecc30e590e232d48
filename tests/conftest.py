"""
Pytest configuration and fixtures for the trading simulator tests.

This module provides:
- In-memory SQLite database fixtures
- Deterministic and failing market data providers
- Service and repository fixtures
- Factory helpers for users and holdings
- FastAPI test client wired to the test database
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from stocksim.main import app
from stocksim.api.deps import get_market_provider
from stocksim.config.settings import Settings, set_settings, reset_settings
from stocksim.core.exceptions import UpstreamUnavailableError
from stocksim.core.timezone import EASTERN_TZ
from stocksim.domain.models import User, Holding
from stocksim.domain.views import Quote, TopOfBook
from stocksim.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from stocksim.repositories.sqlalchemy import orm_models  # noqa: F401
from stocksim.repositories.sqlalchemy import SqlAlchemyUserRepository
from stocksim.services import (
    MarketDataService,
    PortfolioLedger,
    TradeExecutor,
    UserService,
    ValuationService,
)

# bcrypt's minimum cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_repo(test_session) -> SqlAlchemyUserRepository:
    """Provide test UserRepository."""
    return SqlAlchemyUserRepository(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Prices can be moved with set_price(); symbols without a price are
    reported as unknown. Every call is counted.
    """

    FIXED_PRICES = {
        "AAPL": (Decimal("185.50"), Decimal("184.25")),  # +1.25
        "GOOGL": (Decimal("142.75"), Decimal("141.50")),  # +1.25
        "MSFT": (Decimal("378.25"), Decimal("376.80")),  # +1.45
        "TSLA": (Decimal("248.75"), Decimal("250.10")),  # -1.35 (down)
        "SPY": (Decimal("485.25"), Decimal("484.10")),  # +1.15
    }

    def __init__(self):
        self._prices = dict(self.FIXED_PRICES)
        self.tops_calls: list[list[str]] = []
        self.quote_calls: list[str] = []
        self.closed = False

    def set_price(self, symbol: str, last_price: Decimal, prev_close: Optional[Decimal] = None) -> None:
        self._prices[symbol] = (last_price, prev_close if prev_close is not None else last_price)

    def delist(self, symbol: str) -> None:
        self._prices.pop(symbol, None)

    def get_tops(self, symbols: list[str]) -> list[TopOfBook]:
        self.tops_calls.append(list(symbols))
        return [
            TopOfBook(symbol=s, last_sale_price=self._prices[s][0])
            for s in symbols
            if s in self._prices
        ]

    def get_quote(self, symbol: str) -> Optional[Quote]:
        self.quote_calls.append(symbol)
        if symbol not in self._prices:
            return None
        last_price, prev_close = self._prices[symbol]
        return Quote(
            symbol=symbol,
            latest_price=last_price,
            change=last_price - prev_close,
            previous_close=prev_close,
        )

    def close(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.tops_calls) + len(self.quote_calls)


class FailingMarketProvider:
    """Market provider that always reports the upstream as unavailable."""

    def get_tops(self, symbols: list[str]) -> list[TopOfBook]:
        raise UpstreamUnavailableError("Market data provider unavailable: network down")

    def get_quote(self, symbol: str) -> Optional[Quote]:
        raise UpstreamUnavailableError("Market data provider unavailable: network down")

    def close(self) -> None:
        pass


@pytest.fixture
def deterministic_provider() -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def market_data_service(deterministic_provider) -> MarketDataService:
    """Provide MarketDataService with deterministic provider."""
    return MarketDataService(provider=deterministic_provider)


@pytest.fixture
def ledger(user_repo) -> PortfolioLedger:
    """Provide PortfolioLedger."""
    return PortfolioLedger(user_repo=user_repo)


@pytest.fixture
def trade_executor(user_repo, market_data_service, ledger) -> TradeExecutor:
    """Provide TradeExecutor."""
    return TradeExecutor(
        user_repo=user_repo,
        market_data_service=market_data_service,
        ledger=ledger,
    )


@pytest.fixture
def valuation_service(user_repo, market_data_service) -> ValuationService:
    """Provide ValuationService."""
    return ValuationService(
        user_repo=user_repo,
        market_data_service=market_data_service,
    )


@pytest.fixture
def user_service(user_repo) -> UserService:
    """Provide UserService with fast hashing."""
    return UserService(
        user_repo=user_repo,
        starting_cash=Decimal("10000"),
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


def make_holding(
    symbol: str,
    shares: Decimal,
    weighted_average_price: Decimal,
    acquired_at_est: Optional[datetime] = None,
) -> Holding:
    """Build a consistent Holding (total_cost = shares * average)."""
    return Holding(
        symbol=symbol,
        shares=shares,
        weighted_average_price=weighted_average_price,
        total_cost=shares * weighted_average_price,
        acquired_at_est=acquired_at_est or eastern_datetime(2024, 1, 15),
    )


@pytest.fixture
def user_factory(user_repo) -> Callable[..., User]:
    """Factory for persisting users directly (no password hashing)."""

    def _create_user(
        username: Optional[str] = None,
        cash: Decimal = Decimal("10000"),
        holdings: Optional[list[Holding]] = None,
    ) -> User:
        user = User(
            user_id=str(uuid.uuid4()),
            username=username or f"user_{uuid.uuid4().hex[:8]}",
            password_hash="",
            cash=cash,
            holdings=holdings or [],
            created_at_est=eastern_datetime(2024, 1, 1),
        )
        return user_repo.create(user)

    return _create_user


@pytest.fixture
def sample_user(user_factory) -> User:
    """A user with the starting $10,000 and no holdings."""
    return user_factory(username="alice")


@pytest.fixture
def sample_user_with_holdings(user_factory) -> User:
    """A user holding 10 AAPL @ $180 and 5 MSFT @ $375 with $6,275 cash."""
    return user_factory(
        username="bob",
        cash=Decimal("6275.00"),
        holdings=[
            make_holding("AAPL", Decimal("10"), Decimal("180.00")),
            make_holding("MSFT", Decimal("5"), Decimal("375.00")),
        ],
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, deterministic_provider) -> TestClient:
    """Provide FastAPI test client with test database and deterministic prices."""
    reset_database()
    set_settings(
        Settings(
            _env_file=None,
            database_url="sqlite://",
            bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        )
    )
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_provider] = lambda: deterministic_provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def assert_holdings_consistent(user: User, tolerance: Decimal = Decimal("0.0001")) -> None:
    """Assert shares * average equals total cost for every holding."""
    for holding in user.holdings:
        assert holding.shares > 0
        assert_decimal_equal(
            holding.shares * holding.weighted_average_price,
            holding.total_cost,
            tolerance,
        )


def register_user(client: TestClient, username: str = "alice", password: str = "secret123") -> dict:
    """Register a user through the API and return the response body."""
    response = client.post("/users", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()
