"""
HTTP Payment Repository

Concrete implementation of PaymentRepository over the vendor payment endpoints.
"""

import logging
from typing import Any, Dict

from kampyn.domain.repositories.payment_repository import PaymentRepository
from kampyn.infrastructure.http.backend_client import BackendClient
from kampyn.infrastructure.utilities.exceptions import KampynError, PaymentError


class HttpPaymentRepository(PaymentRepository):
    """Provider orders are created and verified by the backend"""

    def __init__(self, client: BackendClient, fallback_key: str = ""):
        self._client = client
        self._fallback_key = fallback_key
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_provider_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        provider_order = await self._client.post("/vendor-payment/create-order", json=payload)
        if not provider_order.get("id"):
            raise PaymentError("Provider order response carries no id")
        self._logger.info(
            "💳 PROVIDER ORDER: %s for %s minor units",
            provider_order["id"],
            provider_order.get("amount"),
        )
        return provider_order

    async def get_public_key(self) -> str:
        try:
            payload = await self._client.get("/vendor-payment/key")
        except KampynError as e:
            if not self._fallback_key:
                raise
            self._logger.warning("⚠️ KEY LOOKUP FAILED, using configured key: %s", e)
            return self._fallback_key
        key = payload.get("key") or self._fallback_key
        if not key:
            raise PaymentError("Payment key unavailable")
        return key

    async def verify_payment(
        self, provider_order_id: str, provider_payment_id: str, provider_signature: str
    ) -> Dict[str, Any]:
        return await self._client.post(
            "/vendor-payment/verify",
            json={
                "razorpay_order_id": provider_order_id,
                "razorpay_payment_id": provider_payment_id,
                "razorpay_signature": provider_signature,
            },
        )
