"""Pydantic schemas for account endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from papertrade.api.schemas.portfolio import PositionResponse


class AccountOpenRequest(BaseModel):
    """Request schema for opening an account."""

    starting_balance: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Opening cash; defaults to the configured starting balance",
    )


class AccountResponse(BaseModel):
    """Response schema for a single account."""

    model_config = {"from_attributes": True}

    user_id: str
    cash_balance: Decimal
    initial_balance: Decimal
    created_at_est: Optional[datetime] = None


class AccountSummaryResponse(BaseModel):
    """Response schema for an account valued at current prices."""

    model_config = {"from_attributes": True}

    user_id: str
    cash_balance: Decimal
    holdings_value: Decimal
    total_value: Decimal
    initial_balance: Decimal
    positions: list[PositionResponse]
