"""Transaction log: best-effort audit trail and cash balance history."""

import logging
import time
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

from papertrade.core.exceptions import LogAppendError, NotFoundError
from papertrade.core.timezone import market_date, now_eastern
from papertrade.domain.models import TransactionLogEntry
from papertrade.domain.views import BalanceHistory, BalancePoint
from papertrade.repositories.protocols import AccountRepository, TransactionLogRepository

logger = logging.getLogger(__name__)


def replay_cash_balance(
    initial_balance: Decimal,
    entries: list[TransactionLogEntry],
) -> list[tuple[date, Decimal]]:
    """
    Fold trade cash deltas over an opening balance.

    Returns one ``(date, end_of_day_cash)`` pair per calendar day that saw a
    trade, in chronological order. ``entries`` must already be sorted by
    execution time.
    """
    cash = initial_balance
    by_day: dict[date, Decimal] = {}
    for entry in entries:
        cash += entry.net_cash_impact
        by_day[market_date(entry.executed_at_est)] = cash
    return sorted(by_day.items())


class TransactionLog:
    """
    Append-only ledger of executed trades.

    The ledger is an audit trail, not the source of truth for balances:
    ``append`` retries with exponential backoff and reports failure through
    its return value instead of raising, so a committed trade is never
    undone by a ledger problem.
    """

    def __init__(
        self,
        log_repo: TransactionLogRepository,
        account_repo: AccountRepository,
        retries: int = 3,
        backoff_seconds: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._log_repo = log_repo
        self._account_repo = account_repo
        self._retries = retries
        self._backoff = backoff_seconds
        self._sleep = sleep

    def append(self, entry: TransactionLogEntry) -> bool:
        """Record ``entry``. Returns False when every attempt failed."""
        delay = self._backoff
        for attempt in range(1, self._retries + 1):
            try:
                self._log_repo.append(entry)
                return True
            except LogAppendError as exc:
                if attempt == self._retries:
                    logger.error(
                        "Dropping transaction log entry after %d attempts: %s",
                        attempt,
                        exc.message,
                    )
                    return False
                logger.warning(
                    "Transaction log append attempt %d/%d failed: %s",
                    attempt,
                    self._retries,
                    exc.message,
                )
                self._sleep(delay)
                delay *= 2
        return False

    def list_by_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        symbol: Optional[str] = None,
    ) -> list[TransactionLogEntry]:
        """List a user's trades oldest first, optionally filtered."""
        return self._log_repo.list_by_user(
            user_id,
            start=start,
            end=end,
            symbol=symbol.strip().upper() if symbol else None,
        )

    def balance_history(
        self,
        user_id: str,
        current_portfolio_value: Optional[Decimal] = None,
        today: Optional[date] = None,
    ) -> BalanceHistory:
        """
        Cash balance over time for the balance chart.

        Historical points carry portfolio value equal to cash, since no
        point-in-time prices are kept. Today's point uses the live cash
        balance and, when given, the current portfolio value.
        """
        account = self._account_repo.get_by_id(user_id)
        if not account:
            raise NotFoundError("Account", user_id)

        today = today or market_date(now_eastern())
        points: dict[date, BalancePoint] = {}

        if account.created_at_est is not None:
            opened = market_date(account.created_at_est)
            points[opened] = BalancePoint(
                date=opened,
                cash_balance=account.initial_balance,
                portfolio_value=account.initial_balance,
            )

        entries = self._log_repo.list_by_user(user_id)
        for day, cash in replay_cash_balance(account.initial_balance, entries):
            points[day] = BalancePoint(date=day, cash_balance=cash, portfolio_value=cash)

        points[today] = BalancePoint(
            date=today,
            cash_balance=account.cash_balance,
            portfolio_value=(
                current_portfolio_value
                if current_portfolio_value is not None
                else account.cash_balance
            ),
        )

        return BalanceHistory(
            points=[points[d] for d in sorted(points)],
            initial_balance=account.initial_balance,
            current_balance=account.cash_balance,
            current_portfolio_value=current_portfolio_value,
        )
