"""View models for positions, quotes and account summaries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Quote:
    """Point-in-time market price for a symbol."""

    symbol: str
    price: Decimal
    as_of: datetime


@dataclass
class Position:
    """Aggregated view of all open lots of one symbol for one user."""

    symbol: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Decimal
    market_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    price_available: bool = True
    acquired_dates: list[datetime] = field(default_factory=list)


@dataclass
class AccountSummary:
    """Cash plus mark-to-market holdings, recomputed on every read."""

    user_id: str
    cash_balance: Decimal
    holdings_value: Decimal
    total_value: Decimal
    initial_balance: Decimal
    positions: list[Position] = field(default_factory=list)


@dataclass
class BalancePoint:
    """End-of-day cash balance for the balance history chart."""

    date: date
    cash_balance: Decimal
    portfolio_value: Decimal


@dataclass
class BalanceHistory:
    """Cash balance over time, replayed from the transaction log."""

    points: list[BalancePoint] = field(default_factory=list)
    initial_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    current_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    current_portfolio_value: Optional[Decimal] = None
