"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .account_repository import AccountRepository
from .admin_repository import InvoiceRepository, RateLimitRepository
from .cart_repository import CartRepository
from .catalog_repository import CatalogRepository
from .order_repository import OrderRepository
from .payment_repository import PaymentRepository
from .session_store import SessionStore

__all__ = [
    'AccountRepository',
    'CartRepository',
    'CatalogRepository',
    'InvoiceRepository',
    'OrderRepository',
    'PaymentRepository',
    'RateLimitRepository',
    'SessionStore',
]
