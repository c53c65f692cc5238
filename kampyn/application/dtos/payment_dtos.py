"""
Payment DTOs

Data Transfer Objects for the checkout flow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from kampyn.domain.value_objects.order_enums import OrderType
from kampyn.domain.value_objects.price_breakdown import PriceBreakdown


class PaymentState(str, Enum):
    """Checkout state machine states"""

    IDLE = "idle"
    CREATING = "creating"
    AWAITING_USER_ACTION = "awaitingUserAction"
    VERIFYING = "verifying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    UPI = "upi"
    CASH = "cash"


@dataclass
class CheckoutRequest:
    """Collector details entered at the vendor counter"""

    collector_name: str
    collector_phone: str
    order_type: OrderType = OrderType.TAKEAWAY
    address: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.UPI


@dataclass(frozen=True)
class PaymentSession:
    """Provider order for one checkout attempt"""

    provider_order_id: str
    amount_minor_units: int
    currency: str
    key: str


@dataclass(frozen=True)
class WidgetOutcome:
    """What the payment widget reported back"""

    dismissed: bool
    provider_order_id: Optional[str] = None
    provider_payment_id: Optional[str] = None
    provider_signature: Optional[str] = None

    @classmethod
    def success(cls, provider_order_id: str, provider_payment_id: str, provider_signature: str) -> "WidgetOutcome":
        return cls(False, provider_order_id, provider_payment_id, provider_signature)

    @classmethod
    def dismissed_by_user(cls) -> "WidgetOutcome":
        return cls(True)


@dataclass
class CheckoutResult:
    """Final outcome of a checkout attempt"""

    state: PaymentState
    breakdown: Optional[PriceBreakdown] = None
    order_id: Optional[str] = None
    order_number: Optional[str] = None
    error_message: Optional[str] = None
    transitions: List[PaymentState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is PaymentState.SUCCEEDED
