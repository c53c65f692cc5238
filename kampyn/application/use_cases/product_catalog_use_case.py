"""
Product Catalog Use Case

Vendor items, university charges and user favourites.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from kampyn.domain.entities.cart_entity import CatalogItem
from kampyn.domain.entities.vendor_entity import UniversityCharges
from kampyn.domain.repositories.catalog_repository import CatalogRepository
from kampyn.domain.value_objects.order_enums import ItemKind
from kampyn.infrastructure.utilities.constants import BusinessSettings
from kampyn.infrastructure.utilities.exceptions import KampynError


@dataclass
class VendorCatalog:
    """Everything a vendor offers, split by kind"""

    vendor_id: str
    retail_items: List[CatalogItem] = field(default_factory=list)
    produce_items: List[CatalogItem] = field(default_factory=list)

    @property
    def items(self) -> List[CatalogItem]:
        return self.retail_items + self.produce_items

    def find(self, item_id: str, kind: Optional[ItemKind] = None) -> Optional[CatalogItem]:
        for item in self.items:
            if item.item_id == item_id and (kind is None or item.kind is kind):
                return item
        return None


class ProductCatalogUseCase:
    """Use case for browsing a vendor's catalog"""

    def __init__(
        self,
        catalog_repository: CatalogRepository,
        default_packing_charge: float = BusinessSettings.DEFAULT_PACKING_CHARGE,
        default_delivery_charge: float = BusinessSettings.DEFAULT_DELIVERY_CHARGE,
    ):
        self._catalog_repository = catalog_repository
        self._default_packing_charge = default_packing_charge
        self._default_delivery_charge = default_delivery_charge
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_vendor_catalog(self, vendor_id: str) -> VendorCatalog:
        """
        Load retail and produce items together.

        A failing half is logged and left empty; only when both fail is the
        error raised.
        """
        retail, produce = await asyncio.gather(
            self._catalog_repository.get_vendor_items(vendor_id, ItemKind.RETAIL),
            self._catalog_repository.get_vendor_items(vendor_id, ItemKind.PRODUCE),
            return_exceptions=True,
        )
        for result in (retail, produce):
            if isinstance(result, BaseException) and not isinstance(result, KampynError):
                raise result
        if isinstance(retail, KampynError) and isinstance(produce, KampynError):
            raise retail

        catalog = VendorCatalog(vendor_id)
        if isinstance(retail, KampynError):
            self._logger.warning("⚠️ RETAIL ITEMS UNAVAILABLE for vendor %s: %s", vendor_id, retail)
        else:
            catalog.retail_items = retail
        if isinstance(produce, KampynError):
            self._logger.warning("⚠️ PRODUCE ITEMS UNAVAILABLE for vendor %s: %s", vendor_id, produce)
        else:
            catalog.produce_items = produce

        self._logger.info(
            "📋 CATALOG: vendor %s, %d retail, %d produce",
            vendor_id,
            len(catalog.retail_items),
            len(catalog.produce_items),
        )
        return catalog

    async def get_university_charges(self, vendor_id: str) -> UniversityCharges:
        """Charges for the vendor's university, or the defaults when unavailable"""
        try:
            return await self._catalog_repository.get_university_charges(vendor_id)
        except KampynError as e:
            self._logger.warning(
                "⚠️ UNIVERSITY CHARGES UNAVAILABLE for vendor %s, using defaults: %s", vendor_id, e
            )
            return UniversityCharges.defaults(
                self._default_packing_charge, self._default_delivery_charge
            )

    async def get_favourites(self, user_id: str, university_id: str) -> List[CatalogItem]:
        return await self._catalog_repository.get_favourites(user_id, university_id)

    async def toggle_favourite(self, user_id: str, item: CatalogItem, vendor_id: str):
        await self._catalog_repository.toggle_favourite(user_id, item.item_id, item.kind, vendor_id)
