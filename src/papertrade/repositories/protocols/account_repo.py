"""Account repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from papertrade.domain.models import Account


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, user_id: str) -> Optional[Account]:
        """Retrieve account by user ID."""
        ...

    def get_for_update(self, user_id: str) -> Optional[Account]:
        """Retrieve account by user ID, locking the row for the current transaction."""
        ...

    def update_cash_balance(self, user_id: str, new_cash: Decimal) -> None:
        """Stage a new cash balance; written when the unit of work commits."""
        ...
