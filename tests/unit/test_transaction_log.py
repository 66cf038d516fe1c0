"""
Unit tests for TransactionLog.

Tests cover:
- Append with retry and exponential backoff
- Giving up after the configured attempts without raising
- Listing with date and symbol filters
- Cash balance replay and balance history
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from papertrade.core.exceptions import LogAppendError, NotFoundError
from papertrade.domain.models import Account, TradeSide, TransactionLogEntry
from papertrade.services import TransactionLog, replay_cash_balance

from tests.conftest import eastern_datetime


def make_entry(
    side: TradeSide,
    total: str,
    when,
    symbol: str = "AAPL",
    user_id: str = "trader-1",
    quantity: str = "1",
) -> TransactionLogEntry:
    return TransactionLogEntry(
        user_id=user_id,
        symbol=symbol,
        side=side,
        quantity=Decimal(quantity),
        price=Decimal(total) / Decimal(quantity),
        total_amount=Decimal(total),
        executed_at_est=when,
    )


# =============================================================================
# APPEND TESTS
# =============================================================================


class TestAppend:
    """Tests for TransactionLog.append retry policy."""

    def _log(self, log_repo, retries: int = 3, backoff: float = 0.1):
        sleeps: list[float] = []
        log = TransactionLog(
            log_repo=log_repo,
            account_repo=MagicMock(),
            retries=retries,
            backoff_seconds=backoff,
            sleep=sleeps.append,
        )
        return log, sleeps

    def test_append_writes_entry(
        self,
        transaction_log: TransactionLog,
        sample_account: Account,
        fixed_now,
    ):
        entry = make_entry(TradeSide.BUY, "1500", fixed_now, quantity="10")

        assert transaction_log.append(entry) is True

        entries = transaction_log.list_by_user(sample_account.user_id)
        assert len(entries) == 1
        assert entries[0].side == TradeSide.BUY
        assert entries[0].total_amount == Decimal("1500")
        assert entries[0].entry_id is not None

    def test_retries_then_succeeds(self, fixed_now):
        """
        GIVEN a store that fails twice then succeeds
        WHEN an entry is appended
        THEN it is written on the third attempt after backoffs of 0.1 and 0.2
        """
        log_repo = MagicMock()
        log_repo.append.side_effect = [LogAppendError("down"), LogAppendError("down"), None]
        log, sleeps = self._log(log_repo)

        assert log.append(make_entry(TradeSide.BUY, "10", fixed_now)) is True

        assert log_repo.append.call_count == 3
        assert sleeps == [0.1, 0.2]

    def test_gives_up_after_retries(self, fixed_now, caplog):
        """
        GIVEN a store that always fails
        WHEN an entry is appended
        THEN append returns False after the configured attempts and logs an error
        """
        log_repo = MagicMock()
        log_repo.append.side_effect = LogAppendError("disk full")
        log, sleeps = self._log(log_repo, retries=4, backoff=0.5)

        with caplog.at_level("ERROR"):
            assert log.append(make_entry(TradeSide.SELL, "10", fixed_now)) is False

        assert log_repo.append.call_count == 4
        assert sleeps == [0.5, 1.0, 2.0]
        assert "Dropping transaction log entry" in caplog.text

    def test_single_attempt_does_not_sleep(self, fixed_now):
        log_repo = MagicMock()
        log_repo.append.side_effect = LogAppendError("down")
        log, sleeps = self._log(log_repo, retries=1)

        assert log.append(make_entry(TradeSide.BUY, "10", fixed_now)) is False
        assert sleeps == []

    def test_unexpected_errors_propagate(self, fixed_now):
        log_repo = MagicMock()
        log_repo.append.side_effect = RuntimeError("bug")
        log, _ = self._log(log_repo)

        with pytest.raises(RuntimeError):
            log.append(make_entry(TradeSide.BUY, "10", fixed_now))


# =============================================================================
# LISTING TESTS
# =============================================================================


class TestListByUser:
    """Tests for TransactionLog.list_by_user filters."""

    @pytest.fixture
    def seeded(self, transaction_log: TransactionLog, sample_account: Account):
        transaction_log.append(make_entry(TradeSide.BUY, "100", eastern_datetime(2024, 3, 1), "AAPL"))
        transaction_log.append(make_entry(TradeSide.BUY, "300", eastern_datetime(2024, 3, 5), "MSFT"))
        transaction_log.append(make_entry(TradeSide.SELL, "120", eastern_datetime(2024, 3, 9), "AAPL"))
        return transaction_log

    def test_oldest_first(self, seeded: TransactionLog):
        entries = seeded.list_by_user("trader-1")

        assert [e.symbol for e in entries] == ["AAPL", "MSFT", "AAPL"]
        assert [e.side for e in entries] == [TradeSide.BUY, TradeSide.BUY, TradeSide.SELL]

    def test_symbol_filter_is_case_insensitive(self, seeded: TransactionLog):
        entries = seeded.list_by_user("trader-1", symbol=" aapl ")

        assert len(entries) == 2
        assert all(e.symbol == "AAPL" for e in entries)

    def test_date_range_is_inclusive(self, seeded: TransactionLog):
        entries = seeded.list_by_user(
            "trader-1",
            start=eastern_datetime(2024, 3, 5),
            end=eastern_datetime(2024, 3, 9),
        )

        assert [e.symbol for e in entries] == ["MSFT", "AAPL"]

    def test_other_users_entries_hidden(self, seeded: TransactionLog):
        assert seeded.list_by_user("someone-else") == []


# =============================================================================
# BALANCE HISTORY TESTS
# =============================================================================


class TestReplayCashBalance:
    """Tests for replay_cash_balance."""

    def test_folds_deltas_per_day(self):
        """
        GIVEN 10,000 opening cash, two buys on day 1 and a sell on day 3
        WHEN the log is replayed
        THEN each trading day reports its closing cash
        """
        entries = [
            make_entry(TradeSide.BUY, "1000", eastern_datetime(2024, 3, 1, 10)),
            make_entry(TradeSide.BUY, "500", eastern_datetime(2024, 3, 1, 15)),
            make_entry(TradeSide.SELL, "1200", eastern_datetime(2024, 3, 3, 11)),
        ]

        history = replay_cash_balance(Decimal("10000"), entries)

        assert history == [
            (date(2024, 3, 1), Decimal("8500")),
            (date(2024, 3, 3), Decimal("9700")),
        ]

    def test_no_entries(self):
        assert replay_cash_balance(Decimal("100"), []) == []

    def test_day_boundary_uses_eastern_time(self):
        # 23:30 Eastern is already the next day in UTC
        entries = [make_entry(TradeSide.BUY, "10", eastern_datetime(2024, 3, 1, 23, 30))]

        history = replay_cash_balance(Decimal("100"), entries)

        assert history == [(date(2024, 3, 1), Decimal("90"))]


class TestBalanceHistory:
    """Tests for TransactionLog.balance_history."""

    def test_new_account(self, transaction_log: TransactionLog, sample_account: Account):
        """
        GIVEN an account opened today with no trades
        WHEN balance history is requested
        THEN a single point shows the opening balance
        """
        history = transaction_log.balance_history(
            sample_account.user_id,
            today=date(2024, 6, 15),
        )

        assert len(history.points) == 1
        point = history.points[0]
        assert point.date == date(2024, 6, 15)
        assert point.cash_balance == Decimal("100000.00")
        assert point.portfolio_value == Decimal("100000.00")
        assert history.initial_balance == Decimal("100000.00")
        assert history.current_portfolio_value is None

    def test_replays_trades_and_appends_today(
        self,
        transaction_log: TransactionLog,
        sample_account: Account,
        account_repo,
        test_session,
    ):
        """
        GIVEN trades on two earlier days
        WHEN balance history is requested with a current portfolio value
        THEN it shows opening, each trading day, and today with live values
        """
        transaction_log.append(make_entry(TradeSide.BUY, "1500", eastern_datetime(2024, 6, 17)))
        transaction_log.append(make_entry(TradeSide.SELL, "400", eastern_datetime(2024, 6, 18)))
        account_repo.update_cash_balance(sample_account.user_id, Decimal("98900"))
        test_session.commit()

        history = transaction_log.balance_history(
            sample_account.user_id,
            current_portfolio_value=Decimal("100250"),
            today=date(2024, 6, 20),
        )

        assert [p.date for p in history.points] == [
            date(2024, 6, 15),
            date(2024, 6, 17),
            date(2024, 6, 18),
            date(2024, 6, 20),
        ]
        assert [p.cash_balance for p in history.points] == [
            Decimal("100000"),
            Decimal("98500"),
            Decimal("98900"),
            Decimal("98900"),
        ]
        assert history.points[1].portfolio_value == Decimal("98500")
        assert history.points[-1].portfolio_value == Decimal("100250")
        assert history.current_balance == Decimal("98900")

    def test_unknown_account(self, transaction_log: TransactionLog):
        with pytest.raises(NotFoundError):
            transaction_log.balance_history("ghost")
