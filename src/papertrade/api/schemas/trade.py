"""Pydantic schemas for trade endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TradeRequest(BaseModel):
    """Request schema for a market buy or sell."""

    symbol: str = Field(..., max_length=20, description="Stock symbol")
    quantity: Decimal = Field(..., gt=0, allow_inf_nan=False, description="Number of shares")

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.strip().upper()


class BuyResponse(BaseModel):
    """Response schema for an executed buy."""

    model_config = {"from_attributes": True}

    symbol: str
    quantity: Decimal
    price: Decimal
    total_cost: Decimal
    new_balance: Decimal
    lot_id: Optional[int] = None
    executed_at: Optional[datetime] = None
    message: str


class LotConsumptionResponse(BaseModel):
    """Shares taken from one lot by a sale."""

    model_config = {"from_attributes": True}

    lot_id: int
    quantity: Decimal
    unit_cost: Decimal
    remaining: Decimal


class SellResponse(BaseModel):
    """Response schema for an executed sell."""

    model_config = {"from_attributes": True}

    symbol: str
    quantity: Decimal
    price: Decimal
    total_value: Decimal
    average_cost: Decimal
    profit_loss: Decimal
    new_balance: Decimal
    lots_consumed: list[LotConsumptionResponse]
    executed_at: Optional[datetime] = None
    message: str
