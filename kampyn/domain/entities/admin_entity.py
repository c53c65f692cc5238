"""
Admin back-office entities: rate-limit blocks and invoices
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class BlockedIp:
    """An IP currently blocked by the backend rate limiter"""

    key: str
    ip: str
    endpoint: str
    hit_count: int
    reset_time: Optional[datetime]
    blocked_until: Optional[datetime]

    def time_remaining(self, now: Optional[datetime] = None) -> str:
        """Human readable time until the limit resets, e.g. ``4m 5s``"""
        if self.reset_time is None:
            return "Expired"
        now = now or datetime.now(timezone.utc)
        remaining = (self.reset_time - now).total_seconds()
        if remaining <= 0:
            return "Expired"
        minutes, seconds = divmod(int(remaining), 60)
        return f"{minutes}m {seconds}s"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlockedIp":
        return cls(
            key=data.get("key", ""),
            ip=data.get("ip", ""),
            endpoint=data.get("endpoint", ""),
            hit_count=int(data.get("hitCount", 0)),
            reset_time=_parse_timestamp(data.get("resetTime")),
            blocked_until=_parse_timestamp(data.get("blockedUntil")),
        )


@dataclass(frozen=True)
class Invoice:
    """Invoice summary as listed for admins and vendors"""

    invoice_id: str
    invoice_number: str
    order_id: str
    order_number: str
    invoice_type: str
    recipient_type: str
    vendor_name: str
    total_amount: float
    status: str
    pdf_url: Optional[str] = None
    razorpay_invoice_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
        return cls(
            invoice_id=str(data.get("_id", "")),
            invoice_number=data.get("invoiceNumber", ""),
            order_id=str(data.get("orderId", "")),
            order_number=data.get("orderNumber", ""),
            invoice_type=data.get("invoiceType", ""),
            recipient_type=data.get("recipientType", ""),
            vendor_name=data.get("vendorName", ""),
            total_amount=float(data.get("totalAmount", 0)),
            status=data.get("status", ""),
            pdf_url=data.get("pdfUrl"),
            razorpay_invoice_url=data.get("razorpayInvoiceUrl"),
            created_at=_parse_timestamp(data.get("createdAt")),
        )


@dataclass(frozen=True)
class InvoicePage:
    """One page of invoices plus the backend's pagination block"""

    invoices: List[Invoice] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoicePage":
        pagination = data.get("pagination") or {}
        invoices = [Invoice.from_dict(item) for item in data.get("invoices") or []]
        return cls(
            invoices=invoices,
            page=int(pagination.get("currentPage", pagination.get("page", 1))),
            total_pages=int(pagination.get("totalPages", 1)),
            total=int(pagination.get("totalInvoices", pagination.get("total", len(invoices)))),
        )


@dataclass(frozen=True)
class InvoiceStats:
    """Platform invoice count and fee amount for a date range"""

    platform_invoices: int = 0
    platform_fee_amount: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceStats":
        counts = data.get("counts") or {}
        amounts = data.get("amounts") or {}
        return cls(
            platform_invoices=int(counts.get("platform") or 0),
            platform_fee_amount=float(amounts.get("platform") or 0),
        )
