"""
Application DTOs
"""

from .order_dtos import OrderState, Page
from .payment_dtos import (
    CheckoutRequest,
    CheckoutResult,
    PaymentMethod,
    PaymentSession,
    PaymentState,
    WidgetOutcome,
)

__all__ = [
    "CheckoutRequest",
    "CheckoutResult",
    "OrderState",
    "Page",
    "PaymentMethod",
    "PaymentSession",
    "PaymentState",
    "WidgetOutcome",
]
