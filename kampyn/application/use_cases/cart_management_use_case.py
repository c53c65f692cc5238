"""
Cart management use case

Handles vendor counter cart operations. The backend owns the cart: every
mutation is sent first and the authoritative cart is fetched afterwards.
"""

import logging
from typing import Optional, Union

from kampyn.domain.entities.cart_entity import Cart, CartLine, CatalogItem, LineKey
from kampyn.domain.repositories.cart_repository import CartRepository
from kampyn.domain.value_objects.order_enums import OrderType
from kampyn.domain.value_objects.price_breakdown import Amount, PriceBreakdown
from kampyn.infrastructure.utilities.exceptions import ValidationError


class CartManagementUseCase:
    """
    Use case for cart management operations

    Handles:
    1. Adding items to the cart
    2. Increasing and decreasing quantities
    3. Removing lines and clearing the cart
    4. Price breakdown of the current lines
    """

    def __init__(self, cart_repository: CartRepository, vendor_id: str):
        self._cart_repository = cart_repository
        self._cart = Cart(vendor_id)
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def vendor_id(self) -> str:
        return self._cart.vendor_id

    @property
    def cart(self) -> Cart:
        """Last cart confirmed by the backend"""
        return self._cart

    async def refresh(self) -> Cart:
        """Replace local state with the backend's cart"""
        self._cart = await self._cart_repository.get_cart(self.vendor_id)
        self._logger.debug(
            "📊 CART REFRESHED: %d lines, %d units", len(self._cart.lines), self._cart.item_count
        )
        return self._cart

    async def add_item(self, item: CatalogItem) -> Cart:
        """Add ``item`` with quantity 1; a line already in the cart is left alone"""
        if not item.in_stock:
            raise ValidationError(f"{item.name} is out of stock", field="item")

        preview = self._cart.snapshot()
        if not preview.add(item):
            self._logger.info("ℹ️ ALREADY IN CART: %s (%s)", item.item_id, item.kind.value)
            return self._cart

        self._logger.info("🛒 ADD TO CART: %s (%s)", item.item_id, item.kind.value)
        await self._cart_repository.add_item(self.vendor_id, CartLine.from_catalog_item(item))
        return await self.refresh()

    async def increase(self, item: Union[CatalogItem, CartLine, LineKey]) -> Cart:
        key = self._key_of(item)
        preview = self._cart.snapshot()
        line = preview.increase(self._require(preview, key))
        await self._cart_repository.update_quantity(self.vendor_id, line.item_id, line.quantity)
        return await self.refresh()

    async def decrease(self, item: Union[CatalogItem, CartLine, LineKey]) -> Cart:
        """Decrement; a line reaching zero is deleted instead of updated"""
        key = self._key_of(item)
        preview = self._cart.snapshot()
        line = preview.decrease(self._require(preview, key))
        if line is None:
            await self._cart_repository.remove_item(self.vendor_id, key[0])
        else:
            await self._cart_repository.update_quantity(self.vendor_id, line.item_id, line.quantity)
        return await self.refresh()

    async def remove(self, item: Union[CatalogItem, CartLine, LineKey]) -> Cart:
        key = self._key_of(item)
        self._require(self._cart, key)
        await self._cart_repository.remove_item(self.vendor_id, key[0])
        return await self.refresh()

    async def clear(self) -> Cart:
        await self._cart_repository.clear_cart(self.vendor_id)
        return await self.refresh()

    def price_breakdown(
        self,
        packing_charge: Amount,
        delivery_charge: Amount,
        order_type: OrderType,
        currency: str = "INR",
    ) -> PriceBreakdown:
        return PriceBreakdown.calculate(
            self._cart.lines, packing_charge, delivery_charge, order_type, currency
        )

    @staticmethod
    def _key_of(item: Union[CatalogItem, CartLine, LineKey]) -> LineKey:
        if isinstance(item, tuple):
            return item
        return item.key

    @staticmethod
    def _require(cart: Cart, key: LineKey) -> LineKey:
        line: Optional[CartLine] = cart.find(key)
        if line is None:
            raise ValidationError(f"Item {key[0]} is not in the cart", field="item")
        return key
