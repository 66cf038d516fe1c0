"""Quote endpoint."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_price_oracle
from papertrade.api.schemas import QuoteResponse
from papertrade.services import PriceOracle
from papertrade.services.trade_executor import normalize_symbol

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.get("/{symbol}", response_model=QuoteResponse)
def get_quote(
    symbol: str,
    oracle: PriceOracle = Depends(get_price_oracle),
) -> QuoteResponse:
    """Current market price for a symbol."""
    return QuoteResponse.model_validate(oracle.quote(normalize_symbol(symbol)))
