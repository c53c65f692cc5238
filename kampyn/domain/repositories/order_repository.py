"""
Order repository interface

Defines the contract for order data access operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..entities.order_entity import Order
from ..value_objects.order_enums import OrderStatus, OrderType


class OrderRepository(ABC):
    """Repository interface for vendor order operations"""

    @abstractmethod
    async def get_active_orders(self, vendor_id: str, order_type: OrderType) -> List[Order]:
        """Get active orders of one type for a vendor"""
        pass

    @abstractmethod
    async def get_delivery_orders(self, vendor_id: str) -> List[Order]:
        """Get delivery orders that are on the way"""
        pass

    @abstractmethod
    async def get_past_orders(self, vendor_id: str) -> List[Order]:
        """Get finished orders for a vendor"""
        pass

    @abstractmethod
    async def advance_status(self, order_id: str, next_status: OrderStatus) -> None:
        """Ask the backend to move an order to ``next_status``"""
        pass

    @abstractmethod
    async def create_guest_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Place a cash order for a walk-in customer"""
        pass

    @abstractmethod
    async def save_billing_info(self, payload: Dict[str, Any]) -> None:
        """Store billing information for a placed order"""
        pass
