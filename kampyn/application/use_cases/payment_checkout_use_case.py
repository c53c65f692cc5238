"""
Payment Checkout Use Case

Drives a vendor counter checkout from the cart to a placed order: provider
order creation, the payment widget, backend verification and the follow-up
bookkeeping. Cash orders skip the widget.
"""

import logging
from typing import Any, Dict, List, Optional

from kampyn.application.dtos.payment_dtos import (
    CheckoutRequest,
    CheckoutResult,
    PaymentMethod,
    PaymentSession,
    PaymentState,
    WidgetOutcome,
)
from kampyn.application.use_cases.cart_management_use_case import CartManagementUseCase
from kampyn.domain.entities.cart_entity import Cart
from kampyn.domain.entities.vendor_entity import UniversityCharges
from kampyn.domain.repositories.order_repository import OrderRepository
from kampyn.domain.repositories.payment_repository import PaymentRepository
from kampyn.domain.value_objects.order_enums import OrderType
from kampyn.domain.value_objects.phone_number import PhoneNumber
from kampyn.domain.value_objects.price_breakdown import PriceBreakdown
from kampyn.infrastructure.services.notification_service import Notifier
from kampyn.infrastructure.services.payment_widget import (
    PaymentWidget,
    build_checkout_options,
)
from kampyn.infrastructure.utilities.constants import BusinessSettings, ValidationSettings
from kampyn.infrastructure.utilities.exceptions import (
    AmountMismatchError,
    BackendError,
    CheckoutInProgressError,
    KampynError,
    PaymentError,
    PaymentVerificationError,
    ValidationError,
)


class PaymentCheckoutUseCase:
    """Use case for checking out the vendor cart"""

    # Valid state transitions
    STATE_TRANSITIONS = {
        PaymentState.IDLE: [PaymentState.CREATING],
        PaymentState.CREATING: [
            PaymentState.AWAITING_USER_ACTION,
            PaymentState.SUCCEEDED,  # cash orders
            PaymentState.FAILED,
        ],
        PaymentState.AWAITING_USER_ACTION: [
            PaymentState.VERIFYING,
            PaymentState.CANCELLED,
            PaymentState.FAILED,
        ],
        PaymentState.VERIFYING: [PaymentState.SUCCEEDED, PaymentState.FAILED],
        PaymentState.SUCCEEDED: [PaymentState.IDLE],
        PaymentState.FAILED: [PaymentState.IDLE],
        PaymentState.CANCELLED: [PaymentState.IDLE],
    }

    TERMINAL_STATES = (PaymentState.SUCCEEDED, PaymentState.FAILED, PaymentState.CANCELLED)

    def __init__(
        self,
        payment_repository: PaymentRepository,
        order_repository: OrderRepository,
        cart_management: CartManagementUseCase,
        widget: PaymentWidget,
        notifier: Optional[Notifier] = None,
        currency: str = BusinessSettings.DEFAULT_CURRENCY,
    ):
        self._payment_repository = payment_repository
        self._order_repository = order_repository
        self._cart_management = cart_management
        self._widget = widget
        self._notifier = notifier
        self._currency = currency
        self._state = PaymentState.IDLE
        self._history: List[PaymentState] = [PaymentState.IDLE]
        self._session: Optional[PaymentSession] = None
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def state(self) -> PaymentState:
        return self._state

    @property
    def history(self) -> List[PaymentState]:
        """Transitions of the current or most recent attempt"""
        return list(self._history)

    @property
    def session(self) -> Optional[PaymentSession]:
        return self._session

    async def checkout(
        self, request: CheckoutRequest, charges: UniversityCharges
    ) -> CheckoutResult:
        """
        Run one checkout attempt for the current cart.

        Failures and dismissals are reported in the returned result and leave
        the cart untouched; the machine is back at ``IDLE`` when this returns.

        Raises:
            CheckoutInProgressError: a previous attempt has not finished
        """
        if self._state is not PaymentState.IDLE:
            raise CheckoutInProgressError(self._state.value)

        self._history = [PaymentState.IDLE]
        self._session = None
        self._logger.info(
            "💳 CHECKOUT STARTED: vendor %s, %s, %s",
            self._cart_management.vendor_id,
            request.order_type.value,
            request.payment_method.value,
        )
        try:
            result = await self._run(request, charges)
        except Exception:
            if self._state not in self.TERMINAL_STATES:
                self._transition(PaymentState.FAILED)
            raise
        finally:
            if self._state is not PaymentState.IDLE:
                self._transition(PaymentState.IDLE)

        result.transitions = self.history
        return result

    async def _run(self, request: CheckoutRequest, charges: UniversityCharges) -> CheckoutResult:
        self._transition(PaymentState.CREATING)
        cart = self._cart_management.cart.snapshot()
        breakdown = None
        try:
            phone = self._validate(cart, request)
            breakdown = PriceBreakdown.calculate(
                cart.lines,
                charges.packing_charge,
                charges.delivery_charge,
                request.order_type,
                self._currency,
            )
            payload = self._order_payload(cart, request, phone, breakdown)

            if request.payment_method is PaymentMethod.CASH:
                placed = await self._order_repository.create_guest_order(
                    {**payload, "paymentMethod": PaymentMethod.CASH.value, "isGuest": True}
                )
                return await self._succeed(
                    cart, request, phone, breakdown, placed.get("orderId"), placed.get("orderNumber")
                )

            session = await self._create_session(payload, breakdown)
        except KampynError as e:
            return self._fail(e, breakdown)

        self._transition(PaymentState.AWAITING_USER_ACTION)
        try:
            outcome = await self._widget.open(
                build_checkout_options(session, request.collector_name.strip(), phone.national_number)
            )
        except KampynError as e:
            return self._fail(e, breakdown)

        if outcome.dismissed:
            return self._cancel(breakdown)

        try:
            verdict = await self._verify(session, outcome)
        except KampynError as e:
            return self._fail(e, breakdown)

        return await self._succeed(
            cart, request, phone, breakdown, verdict.get("orderId"), verdict.get("orderNumber")
        )

    def _validate(self, cart: Cart, request: CheckoutRequest) -> PhoneNumber:
        if cart.is_empty():
            raise ValidationError("Cart is empty", field="cart")

        name = (request.collector_name or "").strip()
        if not (
            ValidationSettings.MIN_COLLECTOR_NAME_LENGTH
            <= len(name)
            <= ValidationSettings.MAX_COLLECTOR_NAME_LENGTH
        ):
            raise ValidationError(
                f"Name must be between {ValidationSettings.MIN_COLLECTOR_NAME_LENGTH} and "
                f"{ValidationSettings.MAX_COLLECTOR_NAME_LENGTH} characters",
                field="collector_name",
            )

        try:
            phone = PhoneNumber(request.collector_phone)
        except ValueError as e:
            raise ValidationError("Please enter a valid mobile number", field="collector_phone") from e

        if request.order_type is OrderType.DELIVERY and not (request.address or "").strip():
            raise ValidationError("Delivery address is required", field="address")
        return phone

    def _order_payload(
        self, cart: Cart, request: CheckoutRequest, phone: PhoneNumber, breakdown: PriceBreakdown
    ) -> Dict[str, Any]:
        payload = {
            "vendorId": cart.vendor_id,
            "items": [line.to_dict() for line in cart.lines],
            "total": float(breakdown.grand_total.amount),
            "collectorName": request.collector_name.strip(),
            "collectorPhone": phone.national_number,
            "orderType": request.order_type.value,
        }
        if request.order_type is OrderType.DELIVERY:
            payload["address"] = request.address.strip()
        return payload

    async def _create_session(
        self, payload: Dict[str, Any], breakdown: PriceBreakdown
    ) -> PaymentSession:
        provider_order = await self._payment_repository.create_provider_order(payload)

        expected = breakdown.amount_minor_units
        provider_amount = provider_order.get("amount")
        if (
            not isinstance(provider_amount, int)
            or isinstance(provider_amount, bool)
            or provider_amount != expected
        ):
            self._logger.error(
                "💥 AMOUNT MISMATCH: computed %s, provider order %s",
                expected,
                provider_amount,
            )
            raise AmountMismatchError(expected, provider_amount)

        key = await self._payment_repository.get_public_key()
        self._session = PaymentSession(
            provider_order_id=str(provider_order["id"]),
            amount_minor_units=expected,
            currency=provider_order.get("currency") or self._currency,
            key=key,
        )
        return self._session

    async def _verify(self, session: PaymentSession, outcome: WidgetOutcome) -> Dict[str, Any]:
        if outcome.provider_order_id != session.provider_order_id:
            raise PaymentVerificationError("Payment does not belong to this checkout")

        self._transition(PaymentState.VERIFYING)
        try:
            verdict = await self._payment_repository.verify_payment(
                outcome.provider_order_id,
                outcome.provider_payment_id,
                outcome.provider_signature,
            )
        except BackendError as e:
            raise PaymentVerificationError(e.user_message) from e

        if not verdict.get("success"):
            raise PaymentVerificationError(verdict.get("message"))
        return verdict

    async def _succeed(
        self,
        cart: Cart,
        request: CheckoutRequest,
        phone: PhoneNumber,
        breakdown: PriceBreakdown,
        order_id: Optional[str],
        order_number: Optional[str],
    ) -> CheckoutResult:
        self._transition(PaymentState.SUCCEEDED)
        self._logger.info("✅ ORDER PLACED: #%s (%s)", order_number, order_id)

        await self._complete_order(cart, request, phone, breakdown, order_id, order_number)

        if self._notifier:
            self._notifier.success(f"Order #{order_number} placed successfully")
        return CheckoutResult(
            state=PaymentState.SUCCEEDED,
            breakdown=breakdown,
            order_id=order_id,
            order_number=order_number,
        )

    async def _complete_order(
        self,
        cart: Cart,
        request: CheckoutRequest,
        phone: PhoneNumber,
        breakdown: PriceBreakdown,
        order_id: Optional[str],
        order_number: Optional[str],
    ):
        """Billing info and cart cleanup; failures here do not undo the order"""
        try:
            await self._order_repository.save_billing_info(
                {
                    "vendorId": cart.vendor_id,
                    "customerName": request.collector_name.strip(),
                    "phoneNumber": phone.national_number,
                    "paymentMethod": request.payment_method.value,
                    "totalAmount": float(breakdown.grand_total.amount),
                    "orderNumber": order_number,
                    "orderId": order_id,
                    "items": [line.to_dict() for line in cart.lines],
                    "isGuest": True,
                }
            )
        except KampynError as e:
            self._logger.error("💥 BILLING INFO NOT SAVED for order %s: %s", order_id, e)

        try:
            await self._cart_management.clear()
        except KampynError as e:
            self._logger.error("💥 CART NOT CLEARED after order %s: %s", order_id, e)

    def _fail(self, error: KampynError, breakdown: Optional[PriceBreakdown]) -> CheckoutResult:
        self._transition(PaymentState.FAILED)
        self._logger.warning("❌ CHECKOUT FAILED: %s", error)
        if self._notifier:
            self._notifier.notify_error(error, "checkout")
        return CheckoutResult(
            state=PaymentState.FAILED,
            breakdown=breakdown,
            error_message=error.user_message,
        )

    def _cancel(self, breakdown: PriceBreakdown) -> CheckoutResult:
        self._transition(PaymentState.CANCELLED)
        self._logger.info("🚫 PAYMENT CANCELLED by user")
        if self._notifier:
            self._notifier.info("Payment cancelled")
        return CheckoutResult(state=PaymentState.CANCELLED, breakdown=breakdown)

    def _transition(self, new_state: PaymentState):
        if new_state not in self.STATE_TRANSITIONS[self._state]:
            raise PaymentError(
                f"Invalid checkout transition: {self._state.value} → {new_state.value}"
            )
        self._logger.debug("🔁 CHECKOUT STATE: %s → %s", self._state.value, new_state.value)
        self._state = new_state
        self._history.append(new_state)
