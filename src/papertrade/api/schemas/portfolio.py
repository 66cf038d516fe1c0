"""Pydantic schemas for portfolio endpoints."""

from datetime import date as calendar_date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from papertrade.domain.models.enums import TradeSide


class PositionResponse(BaseModel):
    """Response schema for a single position."""

    model_config = {"from_attributes": True}

    symbol: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Decimal
    market_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    price_available: bool
    acquired_dates: list[datetime]


class PositionsResponse(BaseModel):
    """Response schema for positions listing."""

    positions: list[PositionResponse]
    count: int


class TransactionLogEntryResponse(BaseModel):
    """Response schema for a single executed trade."""

    model_config = {"from_attributes": True}

    entry_id: Optional[int] = None
    symbol: str
    side: TradeSide
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    executed_at_est: datetime


class TransactionLogResponse(BaseModel):
    """Response schema for listing executed trades."""

    transactions: list[TransactionLogEntryResponse]
    count: int


class BalancePointResponse(BaseModel):
    """Response schema for one day of the balance history."""

    model_config = {"from_attributes": True}

    date: calendar_date
    cash_balance: Decimal
    portfolio_value: Decimal


class BalanceHistoryResponse(BaseModel):
    """Response schema for the cash balance history."""

    model_config = {"from_attributes": True}

    points: list[BalancePointResponse]
    initial_balance: Decimal
    current_balance: Decimal
    current_portfolio_value: Optional[Decimal] = None


class QuoteResponse(BaseModel):
    """Response schema for a market quote."""

    model_config = {"from_attributes": True}

    symbol: str
    price: Decimal
    as_of: datetime
