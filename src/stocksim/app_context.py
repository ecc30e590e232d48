"""Application context for in-process service management.

Builds every collaborator explicitly (engine, session, store, market data
provider, services) so scripts and tests can use the core without HTTP.
"""

from typing import Optional

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from stocksim.config.settings import Settings, get_settings
from stocksim.providers import MarketDataProvider, build_market_data_provider
from stocksim.repositories.sqlalchemy import Base, SqlAlchemyUserRepository, create_db_engine
from stocksim.services import (
    MarketDataService,
    PortfolioLedger,
    TradeExecutor,
    UserService,
    ValuationService,
)


class AppContext:
    """
    Explicitly wired application context with connect/close lifecycle.

    Usage:
        with AppContext() as ctx:
            ctx.trades.buy(user_id, "AAPL", 10)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[MarketDataProvider] = None,
        engine: Optional[Engine] = None,
    ):
        """
        Args:
            settings: Settings to use; defaults to the global settings.
            provider: Market data provider; built from settings if omitted.
            engine: SQLAlchemy engine; built from settings if omitted.
        """
        self._settings = settings or get_settings()
        self._provider = provider
        self._owns_provider = provider is None
        self._engine = engine
        self._owns_engine = engine is None
        self._session: Optional[Session] = None

        self._user_repo: Optional[SqlAlchemyUserRepository] = None
        self._market_data_service: Optional[MarketDataService] = None
        self._ledger: Optional[PortfolioLedger] = None
        self._trade_executor: Optional[TradeExecutor] = None
        self._valuation_service: Optional[ValuationService] = None
        self._user_service: Optional[UserService] = None

    def connect(self) -> "AppContext":
        """Open the database session and create tables if needed."""
        if self._session is not None:
            return self
        if self._engine is None:
            self._engine = create_db_engine(self._settings.get_database_url())
        from stocksim.repositories.sqlalchemy import orm_models  # noqa: F401
        Base.metadata.create_all(bind=self._engine)

        self._session = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)()
        if self._provider is None:
            self._provider = build_market_data_provider(self._settings)
        return self

    @property
    def is_connected(self) -> bool:
        """Check if the context holds an open session."""
        return self._session is not None

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("AppContext is not connected; call connect() first")
        return self._session

    @property
    def user_repo(self) -> SqlAlchemyUserRepository:
        """Get the user store."""
        if self._user_repo is None:
            self._user_repo = SqlAlchemyUserRepository(self._require_session())
        return self._user_repo

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            self._require_session()
            self._market_data_service = MarketDataService(
                provider=self._provider,
                max_workers=self._settings.market_data_max_workers,
            )
        return self._market_data_service

    @property
    def ledger(self) -> PortfolioLedger:
        """Get the PortfolioLedger instance."""
        if self._ledger is None:
            self._ledger = PortfolioLedger(user_repo=self.user_repo)
        return self._ledger

    @property
    def trades(self) -> TradeExecutor:
        """Get the TradeExecutor instance."""
        if self._trade_executor is None:
            self._trade_executor = TradeExecutor(
                user_repo=self.user_repo,
                market_data_service=self.market_data,
                ledger=self.ledger,
            )
        return self._trade_executor

    @property
    def valuation(self) -> ValuationService:
        """Get the ValuationService instance."""
        if self._valuation_service is None:
            self._valuation_service = ValuationService(
                user_repo=self.user_repo,
                market_data_service=self.market_data,
            )
        return self._valuation_service

    @property
    def users(self) -> UserService:
        """Get the UserService instance."""
        if self._user_service is None:
            self._user_service = UserService(
                user_repo=self.user_repo,
                starting_cash=self._settings.starting_cash,
                bcrypt_rounds=self._settings.bcrypt_rounds,
            )
        return self._user_service

    def close(self) -> None:
        """Release the session and any provider or engine this context created."""
        if self._session is not None:
            self._session.close()
            self._session = None
        if self._owns_provider and self._provider is not None:
            self._provider.close()
            self._provider = None
        if self._owns_engine and self._engine is not None:
            self._engine.dispose()
            self._engine = None

        self._user_repo = None
        self._market_data_service = None
        self._ledger = None
        self._trade_executor = None
        self._valuation_service = None
        self._user_service = None

    def __enter__(self) -> "AppContext":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
