"""Account service: signup, lookup and mark-to-market summary."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from papertrade.core.exceptions import NotFoundError, ValidationError
from papertrade.core.money import ZERO, quantize_cash
from papertrade.core.timezone import now_eastern
from papertrade.domain.models import Account
from papertrade.domain.views import AccountSummary
from papertrade.repositories.protocols import AccountRepository
from papertrade.services.position_aggregator import PositionAggregator

logger = logging.getLogger(__name__)

DEFAULT_STARTING_BALANCE = Decimal("100000.00")
MAX_USER_ID_LENGTH = 64


def normalize_user_id(user_id: Optional[str]) -> str:
    """Strip ``user_id`` and check it is usable as an account key."""
    cleaned = (user_id or "").strip()
    if not cleaned:
        raise ValidationError("User ID is required")
    if len(cleaned) > MAX_USER_ID_LENGTH:
        raise ValidationError(f"User ID must be at most {MAX_USER_ID_LENGTH} characters")
    return cleaned


class AccountService:
    """Opens accounts and reports their value."""

    def __init__(
        self,
        account_repo: AccountRepository,
        position_aggregator: PositionAggregator,
        starting_balance: Decimal = DEFAULT_STARTING_BALANCE,
        clock: Callable[[], datetime] = now_eastern,
    ):
        self._account_repo = account_repo
        self._positions = position_aggregator
        self._starting_balance = starting_balance
        self._clock = clock

    def open_account(
        self,
        user_id: str,
        starting_balance: Optional[Decimal] = None,
    ) -> Account:
        """
        Create the cash account for a new user.

        Args:
            user_id: Identity of the account holder
            starting_balance: Opening cash; defaults to the configured amount

        Returns:
            Created Account instance
        """
        user_id = normalize_user_id(user_id)
        balance = self._starting_balance if starting_balance is None else starting_balance
        if balance < 0:
            raise ValidationError("Starting balance cannot be negative")
        if self._account_repo.get_by_id(user_id):
            raise ValidationError(f"Account for '{user_id}' already exists")

        balance = quantize_cash(balance)
        account = self._account_repo.create(
            Account(
                user_id=user_id,
                cash_balance=balance,
                initial_balance=balance,
                created_at_est=self._clock(),
            )
        )
        logger.info("Opened account %s with %s", user_id, balance)
        return account

    def get_account(self, user_id: str) -> Account:
        """Get account by user ID."""
        account = self._account_repo.get_by_id(user_id)
        if not account:
            raise NotFoundError("Account", user_id)
        return account

    def get_summary(self, user_id: str) -> AccountSummary:
        """
        Cash, holdings and total value, recomputed from open lots now.

        Total value is always cash plus the market value of every open
        position; it is never stored, so it cannot drift.
        """
        account = self.get_account(user_id)
        positions = self._positions.list_positions(user_id)
        holdings_value = sum((p.market_value for p in positions), ZERO)

        return AccountSummary(
            user_id=account.user_id,
            cash_balance=account.cash_balance,
            holdings_value=holdings_value,
            total_value=account.cash_balance + holdings_value,
            initial_balance=account.initial_balance,
            positions=positions,
        )
