"""Account domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Account:
    """
    Paper-trading cash account, one per user.

    Only ``cash_balance`` changes after signup, and only through trades.
    Total account value is never stored; it is derived from cash plus the
    market value of open lots whenever it is read.
    """

    user_id: str
    cash_balance: Decimal
    initial_balance: Decimal
    created_at_est: Optional[datetime] = field(default=None)
