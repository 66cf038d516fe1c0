"""Enumerations for domain models."""

from enum import Enum


class TradeSide(str, Enum):
    """Direction of an executed trade."""

    BUY = "BUY"
    SELL = "SELL"
