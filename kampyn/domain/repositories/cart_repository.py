"""
Cart repository interface

Defines the contract for vendor cart data access operations.
"""

from abc import ABC, abstractmethod

from ..entities.cart_entity import Cart, CartLine


class CartRepository(ABC):
    """Repository interface for the server-side vendor cart"""

    @abstractmethod
    async def get_cart(self, vendor_id: str) -> Cart:
        """Fetch the authoritative cart for a vendor counter"""
        pass

    @abstractmethod
    async def add_item(self, vendor_id: str, line: CartLine) -> None:
        """Add a new line to the cart"""
        pass

    @abstractmethod
    async def update_quantity(self, vendor_id: str, item_id: str, quantity: int) -> None:
        """Set the quantity of an existing line"""
        pass

    @abstractmethod
    async def remove_item(self, vendor_id: str, item_id: str) -> None:
        """Remove a line from the cart"""
        pass

    @abstractmethod
    async def clear_cart(self, vendor_id: str) -> None:
        """Remove every line from the cart"""
        pass
