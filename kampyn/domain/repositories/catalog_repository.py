"""
Catalog repository interface

Defines the contract for vendor items, university charges and favourites.
"""

from abc import ABC, abstractmethod
from typing import List

from ..entities.cart_entity import CatalogItem
from ..entities.vendor_entity import UniversityCharges
from ..value_objects.order_enums import ItemKind


class CatalogRepository(ABC):
    """Repository interface for catalog operations"""

    @abstractmethod
    async def get_vendor_items(self, vendor_id: str, kind: ItemKind) -> List[CatalogItem]:
        """Get the retail or produce items of a vendor"""
        pass

    @abstractmethod
    async def get_university_charges(self, vendor_id: str) -> UniversityCharges:
        """Get the packing and delivery charges for a vendor"""
        pass

    @abstractmethod
    async def get_favourites(self, user_id: str, university_id: str) -> List[CatalogItem]:
        """Get a user's favourite items at a university"""
        pass

    @abstractmethod
    async def toggle_favourite(
        self, user_id: str, item_id: str, kind: ItemKind, vendor_id: str
    ) -> None:
        """Add or remove an item from a user's favourites"""
        pass
