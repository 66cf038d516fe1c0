"""Account endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_account_service, get_current_user_id
from papertrade.api.schemas import (
    AccountOpenRequest,
    AccountResponse,
    AccountSummaryResponse,
)
from papertrade.services import AccountService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def open_account(
    data: Optional[AccountOpenRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Open the caller's paper-trading account."""
    starting_balance = data.starting_balance if data else None
    account = service.open_account(user_id, starting_balance=starting_balance)
    return AccountResponse.model_validate(account)


@router.get("/me", response_model=AccountSummaryResponse)
def get_my_account(
    user_id: str = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> AccountSummaryResponse:
    """Cash, holdings and total value at current prices."""
    return AccountSummaryResponse.model_validate(service.get_summary(user_id))
