"""
HTTP Admin Repositories

Concrete implementations of InvoiceRepository and RateLimitRepository.
"""

import logging
from typing import Any, Dict, List
from urllib.parse import quote

from kampyn.domain.entities.admin_entity import BlockedIp, Invoice, InvoicePage, InvoiceStats
from kampyn.domain.repositories.admin_repository import InvoiceRepository, RateLimitRepository
from kampyn.infrastructure.http.backend_client import BackendClient


def _clean(filters: Dict[str, Any]) -> Dict[str, Any]:
    """Drop empty filter values so they are not sent as blank query parameters"""
    return {key: value for key, value in filters.items() if value not in (None, "", "all")}


class HttpInvoiceRepository(InvoiceRepository):
    """Invoices served by ``/api/invoices``"""

    def __init__(self, client: BackendClient):
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_invoices(self, filters: Dict[str, Any]) -> InvoicePage:
        payload = await self._client.get("/api/invoices/admin", params=_clean(filters))
        return InvoicePage.from_dict(payload.get("data") or {})

    async def get_stats(self, filters: Dict[str, Any]) -> InvoiceStats:
        payload = await self._client.get("/api/invoices/stats", params=_clean(filters))
        return InvoiceStats.from_dict(payload.get("data") or {})

    async def bulk_download(self, filters: Dict[str, Any]) -> bytes:
        self._logger.info("📦 BULK INVOICE DOWNLOAD: %s", _clean(filters))
        return await self._client.post(
            "/api/invoices/bulk-zip-download", json=_clean(filters), raw=True
        )

    async def get_order_invoices(self, order_id: str) -> List[Invoice]:
        payload = await self._client.get(f"/api/invoices/order/{order_id}")
        return [Invoice.from_dict(raw) for raw in payload.get("data") or []]

    def download_url(self, invoice_id: str) -> str:
        return self._client.url_for(f"/api/invoices/{invoice_id}/download")


class HttpRateLimitRepository(RateLimitRepository):
    """Rate-limit administration under ``/admin/rate-limits``"""

    def __init__(self, client: BackendClient):
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_blocked_ips(self) -> List[BlockedIp]:
        payload = await self._client.get("/admin/rate-limits/blocked-ips")
        return [BlockedIp.from_dict(raw) for raw in payload.get("data") or []]

    async def release_ip(self, ip: str) -> None:
        self._logger.info("🔓 RELEASE IP: %s", ip)
        await self._client.post(f"/admin/rate-limits/release/{quote(ip, safe='')}")

    async def clear_all(self) -> None:
        self._logger.info("🔓 CLEAR ALL RATE LIMITS")
        await self._client.post("/admin/rate-limits/clear-all")
