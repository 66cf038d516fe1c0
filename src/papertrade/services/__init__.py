"""Service layer - business logic orchestration."""

from papertrade.services.price_oracle import PriceOracle
from papertrade.services.locks import UserLockRegistry
from papertrade.services.transaction_log import TransactionLog, replay_cash_balance
from papertrade.services.position_aggregator import PositionAggregator
from papertrade.services.account_service import AccountService
from papertrade.services.trade_executor import TradeExecutor, plan_fifo_sale

__all__ = [
    "PriceOracle",
    "UserLockRegistry",
    "TransactionLog",
    "replay_cash_balance",
    "PositionAggregator",
    "AccountService",
    "TradeExecutor",
    "plan_fifo_sale",
]
