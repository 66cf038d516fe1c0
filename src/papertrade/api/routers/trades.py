"""Trade execution endpoints."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_current_user_id, get_trade_executor
from papertrade.api.schemas import (
    BuyResponse,
    LotConsumptionResponse,
    SellResponse,
    TradeRequest,
)
from papertrade.services import TradeExecutor

router = APIRouter(prefix="/trades", tags=["trades"])


@router.post("/buy", response_model=BuyResponse)
def buy(
    data: TradeRequest,
    user_id: str = Depends(get_current_user_id),
    executor: TradeExecutor = Depends(get_trade_executor),
) -> BuyResponse:
    """Buy shares at the current market price."""
    result = executor.buy(user_id, data.symbol, data.quantity)
    return BuyResponse(
        symbol=result.symbol,
        quantity=result.quantity,
        price=result.price,
        total_cost=result.total_cost,
        new_balance=result.new_balance,
        lot_id=result.lot_id,
        executed_at=result.executed_at,
        message=(
            f"Successfully purchased {result.quantity} shares of {result.symbol} "
            f"at ${result.price:,.2f} per share"
        ),
    )


@router.post("/sell", response_model=SellResponse)
def sell(
    data: TradeRequest,
    user_id: str = Depends(get_current_user_id),
    executor: TradeExecutor = Depends(get_trade_executor),
) -> SellResponse:
    """Sell shares at the current market price, oldest lots first."""
    result = executor.sell(user_id, data.symbol, data.quantity)
    return SellResponse(
        symbol=result.symbol,
        quantity=result.quantity,
        price=result.price,
        total_value=result.total_value,
        average_cost=result.average_cost,
        profit_loss=result.profit_loss,
        new_balance=result.new_balance,
        lots_consumed=[
            LotConsumptionResponse.model_validate(c) for c in result.lots_consumed
        ],
        executed_at=result.executed_at,
        message=(
            f"Successfully sold {result.quantity} shares of {result.symbol} "
            f"at ${result.price:,.2f} per share"
        ),
    )
