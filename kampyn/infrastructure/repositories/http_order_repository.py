"""
HTTP Order Repository

Concrete implementation of OrderRepository over the vendor order endpoints.
"""

import logging
from typing import Any, Dict, List

from kampyn.domain.entities.order_entity import Order
from kampyn.domain.repositories.order_repository import OrderRepository
from kampyn.domain.value_objects.order_enums import OrderStatus, OrderType
from kampyn.infrastructure.http.backend_client import BackendClient

# PATCH action segment per target status
STATUS_ACTIONS = {
    OrderStatus.READY: "ready",
    OrderStatus.ON_THE_WAY: "onTheWay",
    OrderStatus.COMPLETED: "complete",
    OrderStatus.DELIVERED: "deliver",
}


class HttpOrderRepository(OrderRepository):
    """Orders owned by the backend"""

    def __init__(self, client: BackendClient):
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_active_orders(self, vendor_id: str, order_type: OrderType) -> List[Order]:
        payload = await self._client.get(f"/order/active/{vendor_id}/{order_type.value}")
        return self._parse_orders(payload)

    async def get_delivery_orders(self, vendor_id: str) -> List[Order]:
        payload = await self._client.get(f"/order/delivery/{vendor_id}")
        return self._parse_orders(payload)

    async def get_past_orders(self, vendor_id: str) -> List[Order]:
        payload = await self._client.get(f"/order/vendor-past/{vendor_id}")
        return self._parse_orders(payload)

    async def advance_status(self, order_id: str, next_status: OrderStatus) -> None:
        action = STATUS_ACTIONS.get(next_status)
        if action is None:
            raise ValueError(f"No backend action moves an order to {next_status.value}")
        self._logger.info("📝 STATUS PATCH: order %s -> %s", order_id, action)
        await self._client.patch(f"/order/{order_id}/{action}")

    async def create_guest_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._logger.info("💵 GUEST ORDER: vendor %s, total %s", payload.get("vendorId"), payload.get("total"))
        return await self._client.post("/order/guest", json=payload)

    async def save_billing_info(self, payload: Dict[str, Any]) -> None:
        await self._client.post("/billinginfo", json=payload)

    def _parse_orders(self, payload: Dict[str, Any]) -> List[Order]:
        orders = []
        for raw in payload.get("orders") or []:
            try:
                orders.append(Order.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                self._logger.warning("⚠️ SKIPPING MALFORMED ORDER: %s (%s)", raw.get("orderId"), e)
        return orders
