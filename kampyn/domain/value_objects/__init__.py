"""
Domain value objects package

Contains immutable value objects that represent concepts in the ordering domain.
"""

from .money import Money
from .order_enums import (
    ALLOWED_ADVANCES,
    TERMINAL_STATUSES,
    ItemKind,
    OrderStatus,
    OrderType,
)
from .phone_number import PhoneNumber
from .price_breakdown import PriceBreakdown

__all__ = [
    "ALLOWED_ADVANCES",
    "TERMINAL_STATUSES",
    "ItemKind",
    "Money",
    "OrderStatus",
    "OrderType",
    "PhoneNumber",
    "PriceBreakdown",
]
