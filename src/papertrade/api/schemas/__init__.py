"""Pydantic schemas for API request/response."""

from papertrade.api.schemas.account import (
    AccountOpenRequest,
    AccountResponse,
    AccountSummaryResponse,
)
from papertrade.api.schemas.trade import (
    TradeRequest,
    BuyResponse,
    SellResponse,
    LotConsumptionResponse,
)
from papertrade.api.schemas.portfolio import (
    PositionResponse,
    PositionsResponse,
    TransactionLogEntryResponse,
    TransactionLogResponse,
    BalancePointResponse,
    BalanceHistoryResponse,
    QuoteResponse,
)

__all__ = [
    "AccountOpenRequest",
    "AccountResponse",
    "AccountSummaryResponse",
    "TradeRequest",
    "BuyResponse",
    "SellResponse",
    "LotConsumptionResponse",
    "PositionResponse",
    "PositionsResponse",
    "TransactionLogEntryResponse",
    "TransactionLogResponse",
    "BalancePointResponse",
    "BalanceHistoryResponse",
    "QuoteResponse",
]
