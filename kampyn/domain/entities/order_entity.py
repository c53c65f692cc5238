"""
Order Entity - read-only projection of a server-owned order
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from kampyn.domain.value_objects.order_enums import (
    ALLOWED_ADVANCES,
    ItemKind,
    OrderStatus,
    OrderType,
)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class OrderItem:
    """Line of a placed order"""

    name: str
    price: float
    quantity: int
    kind: ItemKind = ItemKind.RETAIL
    item_id: Optional[str] = None
    unit: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(
            name=data.get("name", ""),
            price=float(data.get("price", 0)),
            quantity=int(data.get("quantity", 0)),
            kind=ItemKind.infer(data.get("kind"), data.get("type")),
            item_id=data.get("itemId"),
            unit=data.get("unit"),
        )


@dataclass(frozen=True)
class Order:
    """Order as the backend last reported it; the client never computes transitions"""

    order_id: str
    order_number: str
    order_type: OrderType
    status: OrderStatus
    collector_name: str
    collector_phone: str
    total: float
    items: List[OrderItem] = field(default_factory=list)
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def can_advance_to(self, next_status: OrderStatus) -> bool:
        """Whether the vendor may trigger ``next_status`` for this order"""
        if self.is_terminal or next_status == self.status:
            return False
        return next_status in ALLOWED_ADVANCES.get(self.order_type, ())

    def with_status(self, status: OrderStatus) -> "Order":
        return replace(self, status=status)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        try:
            order_type = OrderType(data.get("orderType"))
        except ValueError:
            order_type = OrderType.TAKEAWAY
        return cls(
            order_id=str(data["orderId"]),
            order_number=str(data.get("orderNumber", "")),
            order_type=order_type,
            status=OrderStatus.parse(data.get("status")),
            collector_name=data.get("collectorName", ""),
            collector_phone=data.get("collectorPhone", ""),
            total=float(data.get("total", 0)),
            items=[OrderItem.from_dict(item) for item in data.get("items") or []],
            address=data.get("address"),
            created_at=_parse_timestamp(data.get("createdAt")),
        )
