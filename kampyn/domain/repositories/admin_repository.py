"""
Admin repository interfaces

Define the contracts for invoice reporting and rate-limit administration.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..entities.admin_entity import BlockedIp, Invoice, InvoicePage, InvoiceStats


class InvoiceRepository(ABC):
    """Repository interface for invoice operations"""

    @abstractmethod
    async def list_invoices(self, filters: Dict[str, Any]) -> InvoicePage:
        """Get a filtered, paginated list of invoices"""
        pass

    @abstractmethod
    async def get_stats(self, filters: Dict[str, Any]) -> InvoiceStats:
        """Get platform invoice statistics"""
        pass

    @abstractmethod
    async def bulk_download(self, filters: Dict[str, Any]) -> bytes:
        """Download the invoices of a date range as a ZIP archive"""
        pass

    @abstractmethod
    async def get_order_invoices(self, order_id: str) -> List[Invoice]:
        """Get every invoice issued for an order"""
        pass

    @abstractmethod
    def download_url(self, invoice_id: str) -> str:
        """Backend URL that serves an invoice PDF"""
        pass


class RateLimitRepository(ABC):
    """Repository interface for rate-limit administration"""

    @abstractmethod
    async def get_blocked_ips(self) -> List[BlockedIp]:
        """Get the IPs currently blocked by the rate limiter"""
        pass

    @abstractmethod
    async def release_ip(self, ip: str) -> None:
        """Lift the block on a single IP"""
        pass

    @abstractmethod
    async def clear_all(self) -> None:
        """Lift every block"""
        pass
