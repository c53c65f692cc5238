"""
Domain entities package

Contains the core entities of the KAMPYN ordering client.
"""

from .admin_entity import BlockedIp, Invoice, InvoicePage, InvoiceStats
from .cart_entity import Cart, CartLine, CatalogItem
from .order_entity import Order, OrderItem
from .vendor_entity import College, UniversityCharges, generate_slug

__all__ = [
    "BlockedIp",
    "Cart",
    "CartLine",
    "CatalogItem",
    "College",
    "Invoice",
    "InvoicePage",
    "InvoiceStats",
    "Order",
    "OrderItem",
    "UniversityCharges",
    "generate_slug",
]
