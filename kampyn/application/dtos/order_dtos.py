"""
Order DTOs

Data Transfer Objects for the vendor order list views.
"""

from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

from kampyn.domain.entities.order_entity import Order
from kampyn.domain.value_objects.order_enums import OrderStatus

T = TypeVar("T")


@dataclass
class OrderState:
    """An order as displayed, with its local status and update flag"""

    order: Order
    local_status: OrderStatus
    is_updating: bool = False

    @property
    def order_id(self) -> str:
        return self.order.order_id

    @classmethod
    def from_order(cls, order: Order) -> "OrderState":
        return cls(order=order, local_status=order.status)


@dataclass
class Page(Generic[T]):
    """One page of a paginated list"""

    items: List[T] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total_items: int = 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1
