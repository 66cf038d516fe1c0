"""Portfolio endpoints: positions, trade history and balance history."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from papertrade.api.deps import (
    get_account_service,
    get_current_user_id,
    get_position_aggregator,
    get_transaction_log,
)
from papertrade.api.schemas import (
    BalanceHistoryResponse,
    PositionResponse,
    PositionsResponse,
    TransactionLogEntryResponse,
    TransactionLogResponse,
)
from papertrade.core.exceptions import ValidationError
from papertrade.core.timezone import parse_datetime_eastern
from papertrade.services import AccountService, PositionAggregator, TransactionLog

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


def _parse_bound(value: Optional[str], name: str, end_of_day: bool = False):
    if not value:
        return None
    try:
        return parse_datetime_eastern(value, end_of_day=end_of_day)
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid {name} datetime: {value}") from None


@router.get("/positions", response_model=PositionsResponse)
def list_positions(
    user_id: str = Depends(get_current_user_id),
    aggregator: PositionAggregator = Depends(get_position_aggregator),
) -> PositionsResponse:
    """Open positions valued at current prices."""
    positions = aggregator.list_positions(user_id)
    return PositionsResponse(
        positions=[PositionResponse.model_validate(p) for p in positions],
        count=len(positions),
    )


@router.get("/positions/{symbol}", response_model=PositionResponse)
def get_position(
    symbol: str,
    user_id: str = Depends(get_current_user_id),
    aggregator: PositionAggregator = Depends(get_position_aggregator),
) -> PositionResponse:
    """The open position in one symbol."""
    return PositionResponse.model_validate(aggregator.get_position(user_id, symbol))


@router.get("/transactions", response_model=TransactionLogResponse)
def list_transactions(
    start: Optional[str] = Query(None, description="Earliest execution time (US/Eastern if no zone)"),
    end: Optional[str] = Query(None, description="Latest execution time (US/Eastern if no zone)"),
    symbol: Optional[str] = Query(None, max_length=20),
    user_id: str = Depends(get_current_user_id),
    transaction_log: TransactionLog = Depends(get_transaction_log),
) -> TransactionLogResponse:
    """Executed trades, oldest first."""
    entries = transaction_log.list_by_user(
        user_id,
        start=_parse_bound(start, "start"),
        end=_parse_bound(end, "end", end_of_day=True),
        symbol=symbol,
    )
    return TransactionLogResponse(
        transactions=[TransactionLogEntryResponse.model_validate(e) for e in entries],
        count=len(entries),
    )


@router.get("/balance-history", response_model=BalanceHistoryResponse)
def balance_history(
    user_id: str = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
    transaction_log: TransactionLog = Depends(get_transaction_log),
) -> BalanceHistoryResponse:
    """Daily cash balance replayed from the trade log."""
    summary = accounts.get_summary(user_id)
    history = transaction_log.balance_history(
        user_id,
        current_portfolio_value=summary.total_value,
    )
    return BalanceHistoryResponse.model_validate(history)
