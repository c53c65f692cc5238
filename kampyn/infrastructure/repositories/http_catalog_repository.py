"""
HTTP Catalog Repository

Concrete implementation of CatalogRepository over the item, vendor and
favourites endpoints.
"""

import logging
from typing import List

from kampyn.domain.entities.cart_entity import CatalogItem
from kampyn.domain.entities.vendor_entity import UniversityCharges
from kampyn.domain.repositories.catalog_repository import CatalogRepository
from kampyn.domain.value_objects.order_enums import ItemKind
from kampyn.infrastructure.http.backend_client import BackendClient

_ITEM_SEGMENTS = {ItemKind.RETAIL: ("retail", "retailItems"), ItemKind.PRODUCE: ("produce", "produceItems")}


class HttpCatalogRepository(CatalogRepository):
    """Vendor catalog served by the backend"""

    def __init__(self, client: BackendClient):
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_vendor_items(self, vendor_id: str, kind: ItemKind) -> List[CatalogItem]:
        segment, field = _ITEM_SEGMENTS[kind]
        payload = await self._client.get(f"/api/item/getvendors/{vendor_id}/{segment}")
        raw_items = (payload.get("data") or {}).get(field) or []
        items = [CatalogItem.from_dict(raw, kind) for raw in raw_items]
        self._logger.debug("📋 %d %s items for vendor %s", len(items), segment, vendor_id)
        return items

    async def get_university_charges(self, vendor_id: str) -> UniversityCharges:
        payload = await self._client.get(f"/api/vendor/{vendor_id}/university-charges")
        return UniversityCharges.from_dict(payload.get("data") or {})

    async def get_favourites(self, user_id: str, university_id: str) -> List[CatalogItem]:
        payload = await self._client.get(f"/fav/{user_id}/{university_id}")
        return [CatalogItem.from_dict(raw) for raw in payload.get("favourites") or []]

    async def toggle_favourite(
        self, user_id: str, item_id: str, kind: ItemKind, vendor_id: str
    ) -> None:
        self._logger.info("⭐ TOGGLE FAVOURITE: user %s item %s", user_id, item_id)
        await self._client.patch(f"/fav/{user_id}/{item_id}/{kind.value}/{vendor_id}")
