"""
Pytest configuration and fixtures for the paper-trading ledger tests.

This module provides:
- In-memory SQLite database fixtures
- Deterministic, failing and scripted market data providers
- A controllable clock in US/Eastern time
- Service and repository fixtures
- An API test client bound to the test database
"""

import itertools
import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

# Keep the app lifespan away from the real data directory
os.environ.setdefault("PAPERTRADE_DATABASE_URL", "sqlite:///:memory:")

from papertrade.main import app
from papertrade.api import deps
from papertrade.repositories.sqlalchemy.database import Base, get_db
# Import ORM models to register them with Base before creating tables
from papertrade.repositories.sqlalchemy import orm_models  # noqa: F401
from papertrade.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyLotRepository,
    SqlAlchemyTransactionLogRepository,
    SqlAlchemyUnitOfWork,
)
from papertrade.services import (
    AccountService,
    PositionAggregator,
    PriceOracle,
    TradeExecutor,
    TransactionLog,
    UserLockRegistry,
)
from papertrade.domain.models import Account
from papertrade.domain.views import Quote
from papertrade.core.timezone import EASTERN_TZ
from papertrade.config.settings import reset_settings


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


class SteppingClock:
    """Clock that advances one minute per reading unless moved explicitly."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current

    def set(self, value: datetime) -> None:
        self.now = value


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> SteppingClock:
    """Deterministic clock starting at fixed_now."""
    return SteppingClock(fixed_now)


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


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def account_repo(test_session) -> SqlAlchemyAccountRepository:
    """Provide test AccountRepository."""
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def lot_repo(test_session) -> SqlAlchemyLotRepository:
    """Provide test LotRepository."""
    return SqlAlchemyLotRepository(test_session)


@pytest.fixture
def log_repo(test_session) -> SqlAlchemyTransactionLogRepository:
    """Provide test TransactionLogRepository."""
    return SqlAlchemyTransactionLogRepository(test_session)


@pytest.fixture
def unit_of_work(test_session) -> SqlAlchemyUnitOfWork:
    """Provide test UnitOfWork."""
    return SqlAlchemyUnitOfWork(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Prices can be changed between calls with ``set_price``; every call is
    counted so tests can check that no price is reused.
    """

    def __init__(self, prices: Optional[dict[str, Decimal]] = None, as_of: Optional[datetime] = None):
        self.prices = dict(prices or {
            "AAPL": Decimal("150.00"),
            "MSFT": Decimal("375.00"),
            "GOOGL": Decimal("140.00"),
            "TSLA": Decimal("250.00"),
        })
        self._as_of = as_of or eastern_datetime(2024, 6, 15, 16, 0, 0)
        self.calls: list[str] = []

    def set_price(self, symbol: str, price: Decimal) -> None:
        self.prices[symbol] = price

    def get_quote(self, symbol: str) -> Optional[Quote]:
        self.calls.append(symbol)
        price = self.prices.get(symbol)
        if price is None:
            return None
        return Quote(symbol=symbol, price=price, as_of=self._as_of)


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    def get_quote(self, symbol: str) -> Optional[Quote]:
        raise ConnectionError("Network unavailable")


class PartiallyFailingProvider(DeterministicMarketProvider):
    """Provider that fails for a chosen set of symbols."""

    def __init__(self, failing: set[str], **kwargs):
        super().__init__(**kwargs)
        self._failing = failing

    def get_quote(self, symbol: str) -> Optional[Quote]:
        if symbol in self._failing:
            self.calls.append(symbol)
            raise ConnectionError(f"{symbol} unavailable")
        return super().get_quote(symbol)


@pytest.fixture
def market_provider(fixed_now) -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider(as_of=fixed_now)


@pytest.fixture
def price_oracle(market_provider) -> PriceOracle:
    """Provide PriceOracle over the deterministic provider."""
    oracle = PriceOracle(provider=market_provider, timeout_seconds=2.0)
    yield oracle
    oracle.close()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def lock_registry() -> UserLockRegistry:
    """Provide a fresh per-user lock registry."""
    return UserLockRegistry()


@pytest.fixture
def transaction_log(log_repo, account_repo) -> TransactionLog:
    """Provide TransactionLog with no real sleeping between retries."""
    return TransactionLog(
        log_repo=log_repo,
        account_repo=account_repo,
        retries=3,
        backoff_seconds=0,
        sleep=lambda _: None,
    )


@pytest.fixture
def position_aggregator(lot_repo, price_oracle) -> PositionAggregator:
    """Provide PositionAggregator."""
    return PositionAggregator(lot_repo=lot_repo, price_oracle=price_oracle, max_workers=4)


@pytest.fixture
def account_service(account_repo, position_aggregator, clock) -> AccountService:
    """Provide AccountService with the default 100,000 starting balance."""
    return AccountService(
        account_repo=account_repo,
        position_aggregator=position_aggregator,
        clock=clock,
    )


@pytest.fixture
def trade_executor(
    account_repo,
    lot_repo,
    unit_of_work,
    price_oracle,
    transaction_log,
    lock_registry,
    clock,
) -> TradeExecutor:
    """Provide TradeExecutor wired to the test database."""
    return TradeExecutor(
        account_repo=account_repo,
        lot_repo=lot_repo,
        unit_of_work=unit_of_work,
        price_oracle=price_oracle,
        transaction_log=transaction_log,
        lock_registry=lock_registry,
        clock=clock,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


_user_ids = itertools.count(1)


@pytest.fixture
def account_factory(account_service) -> Callable[..., Account]:
    """Factory for opening test accounts."""

    def _open_account(
        user_id: Optional[str] = None,
        starting_balance: Optional[Decimal] = None,
    ) -> Account:
        if user_id is None:
            user_id = f"user-{next(_user_ids)}"
        return account_service.open_account(user_id, starting_balance=starting_balance)

    return _open_account


@pytest.fixture
def sample_account(account_factory) -> Account:
    """Account with the default 100,000.00 starting cash."""
    return account_factory(user_id="trader-1")


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def api_provider(fixed_now) -> DeterministicMarketProvider:
    """Provider used by the API under test."""
    return DeterministicMarketProvider(as_of=fixed_now)


@pytest.fixture
def client(test_engine, api_provider) -> TestClient:
    """Provide FastAPI test client with test database and deterministic prices."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_market_provider] = lambda: api_provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user_id: str = "trader-1") -> dict[str, str]:
    """Identity header the API expects on every user-scoped call."""
    return {"X-User-Id": user_id}


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.0001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
