"""Dependency injection for FastAPI."""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from papertrade.config.settings import get_settings
from papertrade.core.exceptions import UnauthorizedError, ValidationError
from papertrade.providers import StubMarketDataProvider, YahooFinanceProvider
from papertrade.providers.market_data_provider import MarketDataProvider
from papertrade.repositories.sqlalchemy.database import get_db
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
from papertrade.services.account_service import normalize_user_id

# One registry per process so every request for a user shares its lock
_lock_registry = UserLockRegistry()

# Provider calls from every request share one bounded pool
_quote_executor: Optional[ThreadPoolExecutor] = None
_quote_executor_lock = threading.Lock()


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Resolve the caller's identity once per request.

    Authentication happens upstream; this layer only trusts the forwarded
    X-User-Id header and hands the identity explicitly to every service call.
    """
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError()
    try:
        return normalize_user_id(x_user_id)
    except ValidationError as exc:
        raise UnauthorizedError(exc.message) from exc


def get_account_repo(db: Session = Depends(get_db)) -> SqlAlchemyAccountRepository:
    """Provide AccountRepository instance."""
    return SqlAlchemyAccountRepository(db)


def get_lot_repo(db: Session = Depends(get_db)) -> SqlAlchemyLotRepository:
    """Provide LotRepository instance."""
    return SqlAlchemyLotRepository(db)


def get_transaction_log_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionLogRepository:
    """Provide TransactionLogRepository instance."""
    return SqlAlchemyTransactionLogRepository(db)


def get_unit_of_work(db: Session = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    """Provide UnitOfWork bound to the request's session."""
    return SqlAlchemyUnitOfWork(db)


def get_market_provider() -> MarketDataProvider:
    """Provide the configured MarketDataProvider."""
    if get_settings().quote_provider == "yahoo":
        return YahooFinanceProvider()
    return StubMarketDataProvider()


def get_lock_registry() -> UserLockRegistry:
    """Provide the process-wide per-user lock registry."""
    return _lock_registry


def get_quote_executor() -> ThreadPoolExecutor:
    """Provide the process-wide pool that runs market data provider calls."""
    global _quote_executor
    with _quote_executor_lock:
        if _quote_executor is None:
            _quote_executor = ThreadPoolExecutor(
                max_workers=get_settings().quote_fetch_workers,
                thread_name_prefix="quote",
            )
        return _quote_executor


def shutdown_quote_executor() -> None:
    """Stop the shared quote pool without waiting on hung provider calls."""
    global _quote_executor
    with _quote_executor_lock:
        if _quote_executor is not None:
            _quote_executor.shutdown(wait=False)
            _quote_executor = None


def get_price_oracle(
    provider: MarketDataProvider = Depends(get_market_provider),
) -> PriceOracle:
    """Provide PriceOracle instance."""
    return PriceOracle(
        provider=provider,
        timeout_seconds=get_settings().quote_timeout_seconds,
        executor=get_quote_executor(),
    )


def get_transaction_log(
    log_repo: SqlAlchemyTransactionLogRepository = Depends(get_transaction_log_repo),
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
) -> TransactionLog:
    """Provide TransactionLog instance."""
    settings = get_settings()
    return TransactionLog(
        log_repo=log_repo,
        account_repo=account_repo,
        retries=settings.log_append_retries,
        backoff_seconds=settings.log_append_backoff_seconds,
    )


def get_position_aggregator(
    lot_repo: SqlAlchemyLotRepository = Depends(get_lot_repo),
    price_oracle: PriceOracle = Depends(get_price_oracle),
) -> PositionAggregator:
    """Provide PositionAggregator instance."""
    return PositionAggregator(
        lot_repo=lot_repo,
        price_oracle=price_oracle,
        max_workers=get_settings().quote_fanout_workers,
    )


def get_account_service(
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    position_aggregator: PositionAggregator = Depends(get_position_aggregator),
) -> AccountService:
    """Provide AccountService instance."""
    return AccountService(
        account_repo=account_repo,
        position_aggregator=position_aggregator,
        starting_balance=get_settings().starting_cash_balance,
    )


def get_trade_executor(
    account_repo: SqlAlchemyAccountRepository = Depends(get_account_repo),
    lot_repo: SqlAlchemyLotRepository = Depends(get_lot_repo),
    unit_of_work: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    price_oracle: PriceOracle = Depends(get_price_oracle),
    transaction_log: TransactionLog = Depends(get_transaction_log),
    lock_registry: UserLockRegistry = Depends(get_lock_registry),
) -> TradeExecutor:
    """Provide TradeExecutor instance."""
    return TradeExecutor(
        account_repo=account_repo,
        lot_repo=lot_repo,
        unit_of_work=unit_of_work,
        price_oracle=price_oracle,
        transaction_log=transaction_log,
        lock_registry=lock_registry,
    )
