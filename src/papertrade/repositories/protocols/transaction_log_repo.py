"""Transaction log repository protocol."""

from datetime import datetime
from typing import Protocol, Optional

from papertrade.domain.models import TransactionLogEntry


class TransactionLogRepository(Protocol):
    """Interface for the append-only trade ledger."""

    def append(self, entry: TransactionLogEntry) -> TransactionLogEntry:
        """Write an entry in its own transaction. Raises LogAppendError on failure."""
        ...

    def list_by_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        symbol: Optional[str] = None,
    ) -> list[TransactionLogEntry]:
        """List entries for a user ordered by executed_at_est, then insertion."""
        ...
