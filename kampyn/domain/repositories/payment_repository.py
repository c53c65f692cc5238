"""
Payment repository interface

Defines the contract for payment-provider order creation and verification.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class PaymentRepository(ABC):
    """Repository interface for vendor payment operations"""

    @abstractmethod
    async def create_provider_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a provider order; the result carries ``id`` and ``amount``"""
        pass

    @abstractmethod
    async def get_public_key(self) -> str:
        """Get the provider key used to open the payment widget"""
        pass

    @abstractmethod
    async def verify_payment(
        self, provider_order_id: str, provider_payment_id: str, provider_signature: str
    ) -> Dict[str, Any]:
        """Verify a completed payment; returns the backend verdict"""
        pass
