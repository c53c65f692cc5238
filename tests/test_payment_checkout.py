"""
Tests for the payment checkout use case
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from kampyn.application.dtos.payment_dtos import (
    CheckoutRequest,
    PaymentMethod,
    PaymentState,
    WidgetOutcome,
)
from kampyn.application.use_cases.cart_management_use_case import CartManagementUseCase
from kampyn.application.use_cases.payment_checkout_use_case import PaymentCheckoutUseCase
from kampyn.domain.entities.cart_entity import Cart
from kampyn.domain.entities.vendor_entity import UniversityCharges
from kampyn.domain.value_objects.order_enums import OrderType
from kampyn.infrastructure.services.notification_service import NotificationLevel, Notifier
from kampyn.infrastructure.utilities.exceptions import (
    BackendError,
    CheckoutInProgressError,
    NetworkError,
)

from .factories import samosa

CHARGES = UniversityCharges(packing_charge=5, delivery_charge=10)


class FakeWidget:
    """Widget double that answers with a fixed outcome, optionally after a gate opens"""

    def __init__(self, outcome: WidgetOutcome, gate: asyncio.Event = None):
        self.outcome = outcome
        self.gate = gate
        self.opened_with = []
        self.opened = asyncio.Event()

    async def open(self, options):
        self.opened_with.append(options)
        self.opened.set()
        if self.gate is not None:
            await self.gate.wait()
        return self.outcome


def paid(provider_order_id: str = "order_P1") -> WidgetOutcome:
    return WidgetOutcome.success(provider_order_id, "pay_1", "sig_1")


async def build_checkout(cart_lines=None, widget=None, amount=7500):
    """Checkout wired to mock repositories around a cart holding ``cart_lines``"""
    cart_repository = MagicMock()
    cart_repository.get_cart = AsyncMock(
        side_effect=[Cart("vendor_1", cart_lines if cart_lines is not None else [samosa(3)]), Cart("vendor_1")]
    )
    cart_repository.clear_cart = AsyncMock()
    cart_management = CartManagementUseCase(cart_repository, "vendor_1")
    await cart_management.refresh()

    payment_repository = MagicMock()
    payment_repository.create_provider_order = AsyncMock(
        return_value={"id": "order_P1", "amount": amount, "currency": "INR"}
    )
    payment_repository.get_public_key = AsyncMock(return_value="rzp_test_key")
    payment_repository.verify_payment = AsyncMock(
        return_value={"success": True, "orderId": "ord_42", "orderNumber": "42"}
    )

    order_repository = MagicMock()
    order_repository.create_guest_order = AsyncMock(
        return_value={"success": True, "orderId": "ord_7", "orderNumber": "7"}
    )
    order_repository.save_billing_info = AsyncMock()

    notifier = Notifier()
    use_case = PaymentCheckoutUseCase(
        payment_repository,
        order_repository,
        cart_management,
        widget or FakeWidget(paid()),
        notifier=notifier,
    )
    mocks = MagicMock(
        cart=cart_repository,
        cart_management=cart_management,
        payment=payment_repository,
        order=order_repository,
        notifier=notifier,
    )
    return use_case, mocks


def request(**overrides) -> CheckoutRequest:
    values = dict(collector_name="Asha Rao", collector_phone="+91 98765 43210")
    values.update(overrides)
    return CheckoutRequest(**values)


class TestPaymentCheckoutUseCase:
    """Test the checkout state machine"""

    @pytest.mark.asyncio
    async def test_successful_upi_checkout(self):
        widget = FakeWidget(paid())
        use_case, mocks = await build_checkout(widget=widget)

        result = await use_case.checkout(request(), CHARGES)

        assert result.succeeded
        assert (result.order_id, result.order_number) == ("ord_42", "42")
        assert result.transitions == [
            PaymentState.IDLE,
            PaymentState.CREATING,
            PaymentState.AWAITING_USER_ACTION,
            PaymentState.VERIFYING,
            PaymentState.SUCCEEDED,
            PaymentState.IDLE,
        ]
        assert use_case.state is PaymentState.IDLE

        payload = mocks.payment.create_provider_order.call_args.args[0]
        assert payload["total"] == 75.0
        assert payload["collectorPhone"] == "9876543210"
        assert payload["orderType"] == "takeaway"
        assert "address" not in payload

        options = widget.opened_with[0]
        assert options["amount"] == 7500
        assert options["order_id"] == "order_P1"
        assert options["key"] == "rzp_test_key"

        mocks.payment.verify_payment.assert_awaited_once_with("order_P1", "pay_1", "sig_1")
        mocks.order.save_billing_info.assert_awaited_once()
        mocks.cart.clear_cart.assert_awaited_once_with("vendor_1")
        assert mocks.notifier.last.message == "Order #42 placed successfully"

    @pytest.mark.asyncio
    async def test_delivery_amount_includes_delivery_charge(self):
        widget = FakeWidget(paid())
        use_case, mocks = await build_checkout(widget=widget, amount=8500)

        result = await use_case.checkout(
            request(order_type=OrderType.DELIVERY, address="Hostel 5, Room 12"), CHARGES
        )

        assert result.succeeded
        assert result.breakdown.amount_minor_units == 8500
        assert mocks.payment.create_provider_order.call_args.args[0]["address"] == "Hostel 5, Room 12"

    @pytest.mark.asyncio
    async def test_amount_mismatch_aborts_before_widget(self):
        widget = FakeWidget(paid())
        use_case, mocks = await build_checkout(widget=widget, amount=7000)

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.FAILED
        assert widget.opened_with == []
        mocks.payment.get_public_key.assert_not_awaited()
        mocks.payment.verify_payment.assert_not_awaited()
        mocks.cart.clear_cart.assert_not_awaited()
        assert result.transitions == [
            PaymentState.IDLE,
            PaymentState.CREATING,
            PaymentState.FAILED,
            PaymentState.IDLE,
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider_amount", [7500.4, 7500.0, "75.00", "7500", None, True])
    async def test_non_integer_provider_amount_fails_before_widget(self, provider_amount):
        widget = FakeWidget(paid())
        use_case, mocks = await build_checkout(widget=widget, amount=provider_amount)

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.FAILED
        assert use_case.state is PaymentState.IDLE
        assert widget.opened_with == []
        mocks.payment.verify_payment.assert_not_awaited()
        mocks.cart.clear_cart.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dismissed_widget_cancels_and_keeps_cart(self):
        use_case, mocks = await build_checkout(widget=FakeWidget(WidgetOutcome.dismissed_by_user()))

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.CANCELLED
        assert use_case.state is PaymentState.IDLE
        mocks.payment.verify_payment.assert_not_awaited()
        mocks.cart.clear_cart.assert_not_awaited()
        assert mocks.cart_management.cart.item_count == 3
        assert mocks.notifier.last.level is NotificationLevel.INFO

    @pytest.mark.asyncio
    async def test_rejected_verification_never_succeeds(self):
        use_case, mocks = await build_checkout()
        mocks.payment.verify_payment.side_effect = BackendError("Invalid payment signature", 400)

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.FAILED
        assert PaymentState.SUCCEEDED not in result.transitions
        assert result.error_message == "Invalid payment signature"
        mocks.order.save_billing_info.assert_not_awaited()
        mocks.cart.clear_cart.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsuccessful_verdict_fails(self):
        use_case, mocks = await build_checkout()
        mocks.payment.verify_payment.return_value = {"success": False}

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.FAILED
        mocks.cart.clear_cart.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_widget_reporting_other_order_fails(self):
        use_case, mocks = await build_checkout(widget=FakeWidget(paid("order_OTHER")))

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.FAILED
        mocks.payment.verify_payment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_second_checkout_while_in_progress_is_rejected(self):
        gate = asyncio.Event()
        widget = FakeWidget(paid(), gate)
        use_case, mocks = await build_checkout(widget=widget)

        first = asyncio.create_task(use_case.checkout(request(), CHARGES))
        await asyncio.wait_for(widget.opened.wait(), timeout=1)
        assert use_case.state is PaymentState.AWAITING_USER_ACTION

        with pytest.raises(CheckoutInProgressError):
            await use_case.checkout(request(), CHARGES)

        gate.set()
        result = await first
        assert result.succeeded
        mocks.payment.create_provider_order.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cash_checkout_skips_widget(self):
        widget = FakeWidget(paid())
        use_case, mocks = await build_checkout(widget=widget)

        result = await use_case.checkout(request(payment_method=PaymentMethod.CASH), CHARGES)

        assert result.succeeded
        assert result.order_number == "7"
        assert result.transitions == [
            PaymentState.IDLE,
            PaymentState.CREATING,
            PaymentState.SUCCEEDED,
            PaymentState.IDLE,
        ]
        assert widget.opened_with == []
        mocks.payment.create_provider_order.assert_not_awaited()
        payload = mocks.order.create_guest_order.call_args.args[0]
        assert payload["paymentMethod"] == "cash"
        assert payload["isGuest"] is True
        mocks.cart.clear_cart.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_follow_up_failures_do_not_undo_order(self):
        use_case, mocks = await build_checkout()
        mocks.order.save_billing_info.side_effect = NetworkError("billing down")

        result = await use_case.checkout(request(), CHARGES)

        assert result.succeeded
        mocks.cart.clear_cart.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_provider_order_failure(self):
        use_case, mocks = await build_checkout()
        mocks.payment.create_provider_order.side_effect = NetworkError("timeout")

        result = await use_case.checkout(request(), CHARGES)

        assert result.state is PaymentState.FAILED
        assert mocks.notifier.last.level is NotificationLevel.ERROR
        assert use_case.state is PaymentState.IDLE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "lines, overrides, field_message",
        [
            ([], {}, "Cart is empty"),
            (None, {"collector_name": "A"}, "Name must be between 2 and 100 characters"),
            (None, {"collector_phone": "12345"}, "Please enter a valid mobile number"),
            (None, {"order_type": OrderType.DELIVERY, "address": "  "}, "Delivery address is required"),
        ],
    )
    async def test_invalid_requests_fail_without_requests(self, lines, overrides, field_message):
        use_case, mocks = await build_checkout(cart_lines=lines)

        result = await use_case.checkout(request(**overrides), CHARGES)

        assert result.state is PaymentState.FAILED
        assert result.error_message == field_message
        mocks.payment.create_provider_order.assert_not_awaited()
        mocks.order.create_guest_order.assert_not_awaited()
