"""
Item kind, order type and order status enumerations

Values match the strings exchanged with the backend.
"""

from enum import Enum
from typing import Optional


class ItemKind(str, Enum):
    """Item category discriminator"""

    RETAIL = "Retail"
    PRODUCE = "Produce"

    @classmethod
    def infer(cls, kind: Optional[str], item_type: Optional[str] = None) -> "ItemKind":
        """Resolve a kind, inferring it from the item type when missing"""
        if isinstance(kind, cls):
            return kind
        if kind:
            for member in cls:
                if member.value.lower() == str(kind).lower():
                    return member
        if item_type and "produce" in item_type.lower():
            return cls.PRODUCE
        return cls.RETAIL

    @property
    def incurs_packing_charge(self) -> bool:
        return self is ItemKind.PRODUCE


class OrderType(str, Enum):
    """How the order reaches the collector"""

    DINE_IN = "dinein"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"
    CASH = "cash"


class OrderStatus(str, Enum):
    """Server-driven order lifecycle states"""

    PENDING_PAYMENT = "pendingPayment"
    IN_PROGRESS = "inProgress"
    READY = "ready"
    ON_THE_WAY = "onTheWay"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Optional[str]) -> "OrderStatus":
        """Map a backend status string; unknown values display as in progress"""
        for member in cls:
            if member.value == value:
                return member
        return cls.IN_PROGRESS

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {
        OrderStatus.DELIVERED,
        OrderStatus.COMPLETED,
        OrderStatus.FAILED,
        OrderStatus.CANCELLED,
    }
)

# Status triggers the vendor may issue, per order type
ALLOWED_ADVANCES = {
    OrderType.DELIVERY: (OrderStatus.READY, OrderStatus.ON_THE_WAY, OrderStatus.DELIVERED),
    OrderType.TAKEAWAY: (OrderStatus.READY, OrderStatus.COMPLETED, OrderStatus.DELIVERED),
    OrderType.DINE_IN: (OrderStatus.READY, OrderStatus.COMPLETED, OrderStatus.DELIVERED),
    OrderType.CASH: (OrderStatus.READY, OrderStatus.COMPLETED, OrderStatus.DELIVERED),
}
