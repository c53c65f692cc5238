"""
Client-side services
"""

from .notification_service import Notification, NotificationLevel, Notifier
from .payment_widget import PaymentWidget, build_checkout_options

__all__ = [
    "Notification",
    "NotificationLevel",
    "Notifier",
    "PaymentWidget",
    "build_checkout_options",
]
