"""
HTTP Cart Repository

Concrete implementation of CartRepository over the vendor cart endpoints.
"""

import logging

from kampyn.domain.entities.cart_entity import Cart, CartLine
from kampyn.domain.repositories.cart_repository import CartRepository
from kampyn.infrastructure.http.backend_client import BackendClient


class HttpCartRepository(CartRepository):
    """Vendor cart stored by the backend"""

    def __init__(self, client: BackendClient):
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_cart(self, vendor_id: str) -> Cart:
        payload = await self._client.get(f"/vendorcart/{vendor_id}")
        cart = Cart.from_dict(vendor_id, payload.get("data") or {})
        self._logger.debug("🛒 CART: vendor %s has %d lines", vendor_id, len(cart.lines))
        return cart

    async def add_item(self, vendor_id: str, line: CartLine) -> None:
        self._logger.info("➕ ADD ITEM: %s (%s) to vendor %s", line.item_id, line.kind.value, vendor_id)
        await self._client.post(f"/vendorcart/{vendor_id}/items", json={"item": line.to_dict()})

    async def update_quantity(self, vendor_id: str, item_id: str, quantity: int) -> None:
        self._logger.info("🔢 SET QUANTITY: %s -> %d", item_id, quantity)
        await self._client.put(
            f"/vendorcart/{vendor_id}/items/{item_id}", json={"quantity": quantity}
        )

    async def remove_item(self, vendor_id: str, item_id: str) -> None:
        self._logger.info("🗑️ REMOVE ITEM: %s from vendor %s", item_id, vendor_id)
        await self._client.delete(f"/vendorcart/{vendor_id}/items/{item_id}")

    async def clear_cart(self, vendor_id: str) -> None:
        self._logger.info("🧹 CLEAR CART: vendor %s", vendor_id)
        await self._client.delete(f"/vendorcart/{vendor_id}")
