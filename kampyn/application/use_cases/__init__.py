"""
Use Cases

Contains the business use cases of the application.
Each use case represents a single business operation.
"""

from .account_use_case import AccountUseCase, SignupRequest
from .admin_monitoring_use_case import (
    InvoiceFilters,
    InvoiceReportingUseCase,
    RateLimitMonitoringUseCase,
)
from .cart_management_use_case import CartManagementUseCase
from .order_status_management_use_case import (
    OrderListKind,
    OrderListView,
    OrderStatusManagementUseCase,
)
from .payment_checkout_use_case import PaymentCheckoutUseCase
from .product_catalog_use_case import ProductCatalogUseCase, VendorCatalog

__all__ = [
    'AccountUseCase',
    'CartManagementUseCase',
    'InvoiceFilters',
    'InvoiceReportingUseCase',
    'OrderListKind',
    'OrderListView',
    'OrderStatusManagementUseCase',
    'PaymentCheckoutUseCase',
    'ProductCatalogUseCase',
    'RateLimitMonitoringUseCase',
    'SignupRequest',
    'VendorCatalog',
]
