"""
Repository implementations backed by the KAMPYN HTTP API
"""

from .http_account_repository import HttpAccountRepository
from .http_admin_repository import HttpInvoiceRepository, HttpRateLimitRepository
from .http_cart_repository import HttpCartRepository
from .http_catalog_repository import HttpCatalogRepository
from .http_order_repository import HttpOrderRepository
from .http_payment_repository import HttpPaymentRepository
from .session_stores import InMemorySessionStore, JsonFileSessionStore

__all__ = [
    "HttpAccountRepository",
    "HttpCartRepository",
    "HttpCatalogRepository",
    "HttpInvoiceRepository",
    "HttpOrderRepository",
    "HttpPaymentRepository",
    "HttpRateLimitRepository",
    "InMemorySessionStore",
    "JsonFileSessionStore",
]
