"""
Payment Widget

Interface to the provider's checkout widget, plus the options it is opened with.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict

from kampyn.application.dtos.payment_dtos import PaymentSession, WidgetOutcome
from kampyn.infrastructure.utilities.constants import PaymentSettings

PAYMENT_BLOCKS = {
    "banks": {"name": "Pay using UPI", "instruments": [{"method": "upi"}]},
    "cards": {"name": "Pay using Card", "instruments": [{"method": "card"}]},
    "netbanking": {"name": "Pay using Netbanking", "instruments": [{"method": "netbanking"}]},
    "other": {
        "name": "Other Payment Methods",
        "instruments": [{"method": "wallet"}, {"method": "paylater"}],
    },
}


class PaymentWidget(ABC):
    """Opens the provider widget and waits for the user to finish or dismiss it"""

    @abstractmethod
    async def open(self, options: Dict[str, Any]) -> WidgetOutcome:
        """Show the widget; resolves on the success callback or on dismissal"""
        pass


def build_checkout_options(
    session: PaymentSession, collector_name: str, collector_phone: str
) -> Dict[str, Any]:
    """Widget options for ``session``; the amount is taken from the session unchanged"""
    return {
        "key": session.key,
        "amount": session.amount_minor_units,
        "currency": session.currency,
        "order_id": session.provider_order_id,
        "name": PaymentSettings.MERCHANT_NAME,
        "description": PaymentSettings.DESCRIPTION,
        "prefill": {
            "name": collector_name,
            "contact": collector_phone,
            "email": PaymentSettings.PREFILL_EMAIL,
        },
        "theme": {"color": PaymentSettings.THEME_COLOR},
        "config": {
            "display": {
                "blocks": PAYMENT_BLOCKS,
                "sequence": [f"block.{name}" for name in PAYMENT_BLOCKS],
                "preferences": {"show_default_blocks": False},
            }
        },
        "notes": {
            "address": PaymentSettings.NOTES_ADDRESS,
            "merchant_order_id": f"vendor-{int(time.time() * 1000)}",
        },
        "retry": {
            "enabled": PaymentSettings.WIDGET_RETRY_ENABLED,
            "max_count": PaymentSettings.WIDGET_RETRY_MAX_COUNT,
        },
    }
