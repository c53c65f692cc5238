"""
Admin Monitoring Use Cases

Invoice reporting and rate-limit administration for the admin dashboard.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from kampyn.domain.entities.admin_entity import BlockedIp, InvoicePage, InvoiceStats
from kampyn.domain.repositories.admin_repository import InvoiceRepository, RateLimitRepository
from kampyn.infrastructure.scheduling.periodic_task import PeriodicTask
from kampyn.infrastructure.services.notification_service import Notifier
from kampyn.infrastructure.utilities.constants import SyncSettings
from kampyn.infrastructure.utilities.exceptions import KampynError, ValidationError


@dataclass
class InvoiceFilters:
    """Query filters accepted by the invoice endpoints"""

    page: int = 1
    limit: int = 20
    invoice_type: Optional[str] = None
    recipient_type: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "invoiceType": self.invoice_type,
            "recipientType": self.recipient_type,
            "status": self.status,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "search": self.search,
        }


class InvoiceReportingUseCase:
    """Use case for browsing and downloading invoices"""

    def __init__(self, invoice_repository: InvoiceRepository):
        self._invoice_repository = invoice_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_invoices(self, filters: Optional[InvoiceFilters] = None) -> InvoicePage:
        return await self._invoice_repository.list_invoices((filters or InvoiceFilters()).to_params())

    async def get_stats(self, filters: Optional[InvoiceFilters] = None) -> InvoiceStats:
        params = (filters or InvoiceFilters()).to_params()
        return await self._invoice_repository.get_stats(
            {"startDate": params["startDate"], "endDate": params["endDate"]}
        )

    async def bulk_download(self, filters: InvoiceFilters) -> bytes:
        """ZIP archive of the invoices in a date range"""
        if not filters.start_date or not filters.end_date:
            raise ValidationError("Please select both start and end dates", field="date_range")
        if filters.start_date > filters.end_date:
            raise ValidationError("Start date must be before end date", field="date_range")
        params = filters.to_params()
        params.pop("page")
        params.pop("limit")
        archive = await self._invoice_repository.bulk_download(params)
        self._logger.info("📦 BULK DOWNLOAD: %d bytes", len(archive))
        return archive

    async def invoice_download_url(self, order_id: str) -> Optional[str]:
        """Download link for an order's invoice, preferring the vendor copy"""
        invoices = await self._invoice_repository.get_order_invoices(order_id)
        if not invoices:
            return None
        selected = next((inv for inv in invoices if inv.recipient_type == "vendor"), invoices[0])
        if selected.invoice_id:
            return self._invoice_repository.download_url(selected.invoice_id)
        return selected.pdf_url


class RateLimitMonitoringUseCase:
    """Use case for inspecting and releasing rate-limit blocks"""

    def __init__(
        self,
        rate_limit_repository: RateLimitRepository,
        notifier: Optional[Notifier] = None,
        refresh_seconds: float = SyncSettings.RATE_LIMIT_REFRESH_SECONDS,
    ):
        self._rate_limit_repository = rate_limit_repository
        self._notifier = notifier or Notifier()
        self._blocked: List[BlockedIp] = []
        self._poller = PeriodicTask(self.refresh, refresh_seconds, name="rate-limits")
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def blocked_ips(self) -> List[BlockedIp]:
        return list(self._blocked)

    async def start(self):
        await self.refresh()
        self._poller.start()

    async def stop(self):
        await self._poller.stop()

    async def refresh(self) -> bool:
        try:
            self._blocked = await self._rate_limit_repository.get_blocked_ips()
        except KampynError as e:
            self._notifier.notify_error(e, "load blocked IPs")
            return False
        self._logger.debug("🚧 %d IPs blocked", len(self._blocked))
        return True

    async def release(self, ip: str) -> bool:
        try:
            await self._rate_limit_repository.release_ip(ip)
        except KampynError as e:
            self._notifier.notify_error(e, "release IP")
            return False
        self._notifier.success(f"Released rate limit for {ip}")
        await self.refresh()
        return True

    async def clear_all(self) -> bool:
        try:
            await self._rate_limit_repository.clear_all()
        except KampynError as e:
            self._notifier.notify_error(e, "clear rate limits")
            return False
        self._notifier.success("Cleared all rate limits")
        await self.refresh()
        return True
