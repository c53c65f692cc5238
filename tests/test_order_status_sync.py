"""
Tests for order list synchronization and optimistic status updates
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from kampyn.application.use_cases.order_status_management_use_case import (
    OrderListKind,
    OrderListView,
    OrderStatusManagementUseCase,
)
from kampyn.domain.value_objects.order_enums import OrderStatus, OrderType
from kampyn.infrastructure.repositories.http_order_repository import HttpOrderRepository
from kampyn.infrastructure.services.notification_service import NotificationLevel, Notifier
from kampyn.infrastructure.utilities.exceptions import BackendError, NetworkError

from .factories import make_order


def mock_order_repository(active=None, delivery=None, past=None):
    """Repository double; ``active`` maps order type to the orders returned for it"""
    active = active or {}
    repository = MagicMock()
    repository.get_active_orders = AsyncMock(
        side_effect=lambda vendor_id, order_type: list(active.get(order_type, []))
    )
    repository.get_delivery_orders = AsyncMock(return_value=list(delivery or []))
    repository.get_past_orders = AsyncMock(return_value=list(past or []))
    repository.advance_status = AsyncMock()
    return repository


def order_json(order_id: str, order_type: str, status: str) -> dict:
    return {
        "orderId": order_id,
        "orderNumber": order_id.upper(),
        "orderType": order_type,
        "status": status,
        "collectorName": "Asha",
        "collectorPhone": "9876543210",
        "total": 85,
        "items": [],
    }


async def wait_until_in_flight(view, order_id: str, timeout: float = 1.0):
    """Yield to the loop until ``order_id`` has a request in flight"""

    async def poll():
        while order_id not in view.in_flight:
            await asyncio.sleep(0)

    await asyncio.wait_for(poll(), timeout)


class TestOrderListView:
    """Test a single polled order list"""

    @pytest.mark.asyncio
    async def test_concurrent_advances_send_one_patch(self, make_client):
        gate = asyncio.Event()
        patches = []

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(
                    200, json={"orders": [order_json("ord_1", "delivery", "onTheWay")]}
                )
            patches.append(request.url.path)
            await gate.wait()
            return httpx.Response(200, json={"success": True})

        client = make_client(handler)
        view = OrderListView(HttpOrderRepository(client), "vendor_1", OrderListKind.DELIVERY)
        await view.refresh()

        async def second_advance():
            await wait_until_in_flight(view, "ord_1")
            result = await view.advance("ord_1", OrderStatus.DELIVERED)
            gate.set()
            return result

        results = await asyncio.gather(
            view.advance("ord_1", OrderStatus.DELIVERED), second_advance()
        )

        assert results == [True, False]
        assert patches == ["/order/ord_1/deliver"]
        assert view.get("ord_1") is None
        assert view.in_flight == frozenset()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_rejected_advance_restores_position(self):
        orders = [
            make_order("ord_a", orderType="delivery", status="inProgress"),
            make_order("ord_b", orderType="delivery", status="onTheWay"),
            make_order("ord_c", orderType="delivery", status="ready"),
        ]
        repository = mock_order_repository(delivery=orders)
        repository.advance_status.side_effect = BackendError("Order already delivered", 400)
        notifier = Notifier()
        view = OrderListView(repository, "vendor_1", OrderListKind.DELIVERY, notifier=notifier)
        await view.refresh()

        advanced = await view.advance("ord_b", OrderStatus.DELIVERED)

        assert advanced is False
        assert [state.order_id for state in view.orders] == ["ord_a", "ord_b", "ord_c"]
        restored = view.get("ord_b")
        assert restored.local_status is OrderStatus.ON_THE_WAY
        assert restored.is_updating is False
        assert notifier.last.level is NotificationLevel.ERROR
        assert notifier.last.message == "Order already delivered"

    @pytest.mark.asyncio
    async def test_unexpected_error_restores_entry_and_propagates(self):
        orders = [
            make_order("ord_a", orderType="delivery", status="inProgress"),
            make_order("ord_b", orderType="delivery", status="onTheWay"),
            make_order("ord_c", orderType="delivery", status="ready"),
        ]
        repository = mock_order_repository(delivery=orders)
        repository.advance_status.side_effect = RuntimeError("connection pool closed")
        view = OrderListView(repository, "vendor_1", OrderListKind.DELIVERY)
        await view.refresh()

        with pytest.raises(RuntimeError, match="connection pool closed"):
            await view.advance("ord_b", OrderStatus.DELIVERED)

        assert [state.order_id for state in view.orders] == ["ord_a", "ord_b", "ord_c"]
        restored = view.get("ord_b")
        assert restored.local_status is OrderStatus.ON_THE_WAY
        assert restored.is_updating is False
        assert view.in_flight == frozenset()

    @pytest.mark.asyncio
    async def test_successful_advance_updates_entry(self):
        repository = mock_order_repository(
            delivery=[make_order("ord_1", orderType="delivery", status="inProgress")]
        )
        view = OrderListView(repository, "vendor_1", OrderListKind.DELIVERY)
        await view.refresh()

        assert await view.advance("ord_1", OrderStatus.READY) is True

        state = view.get("ord_1")
        assert state.local_status is OrderStatus.READY
        assert state.order.status is OrderStatus.READY
        assert state.is_updating is False
        repository.advance_status.assert_awaited_once_with("ord_1", OrderStatus.READY)

    @pytest.mark.asyncio
    async def test_disallowed_trigger_sends_nothing(self):
        repository = mock_order_repository(
            active={OrderType.TAKEAWAY: [make_order("ord_1", orderType="takeaway")]}
        )
        view = OrderListView(repository, "vendor_1", OrderListKind.ACTIVE)
        await view.refresh()

        assert await view.advance("ord_1", OrderStatus.ON_THE_WAY) is False
        assert await view.advance("missing", OrderStatus.READY) is False
        repository.advance_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_poll_during_advance_keeps_optimistic_entry(self):
        gate = asyncio.Event()
        repository = mock_order_repository(
            delivery=[make_order("ord_1", orderType="delivery", status="inProgress")]
        )

        async def slow_patch(order_id, next_status):
            await gate.wait()

        repository.advance_status.side_effect = slow_patch
        view = OrderListView(repository, "vendor_1", OrderListKind.DELIVERY)
        await view.refresh()

        advancing = asyncio.create_task(view.advance("ord_1", OrderStatus.READY))
        await wait_until_in_flight(view, "ord_1")

        # Server still reports the old status while the PATCH is pending
        assert await view.refresh() is True
        state = view.get("ord_1")
        assert state.local_status is OrderStatus.READY
        assert state.is_updating is True

        gate.set()
        assert await advancing is True
        assert view.get("ord_1").is_updating is False

    @pytest.mark.asyncio
    async def test_active_view_excludes_dispatched_deliveries(self):
        repository = mock_order_repository(
            active={
                OrderType.DELIVERY: [
                    make_order("ord_1", orderType="delivery", status="onTheWay"),
                    make_order("ord_2", orderType="delivery", status="ready"),
                ],
                OrderType.DINE_IN: [make_order("ord_3", orderType="dinein", status="inProgress")],
                OrderType.CASH: [make_order("ord_4", orderType="cash", status="completed")],
            }
        )
        view = OrderListView(repository, "vendor_1", OrderListKind.ACTIVE)

        await view.refresh()

        assert [state.order_id for state in view.orders] == ["ord_2", "ord_3"]
        assert repository.get_active_orders.await_count == 4

    @pytest.mark.asyncio
    async def test_pagination_is_clamped(self):
        orders = [make_order(f"ord_{n}", status="inProgress") for n in range(12)]
        view = OrderListView(mock_order_repository(past=orders), "vendor_1", OrderListKind.PAST, page_size=5)
        await view.refresh()

        first = view.page(1)
        last = view.page(99)

        assert (first.total_pages, first.total_items, len(first.items)) == (3, 12, 5)
        assert first.has_next and not first.has_previous
        assert last.page == 3
        assert [state.order_id for state in last.items] == ["ord_10", "ord_11"]
        assert view.page(0).page == 1

    def test_empty_page(self):
        view = OrderListView(mock_order_repository(), "vendor_1", OrderListKind.PAST)
        page = view.page(3)
        assert (page.page, page.total_pages, page.items) == (1, 0, [])

    @pytest.mark.asyncio
    async def test_poll_arriving_after_stop_is_discarded(self):
        gate = asyncio.Event()
        repository = mock_order_repository()

        async def slow_past(vendor_id):
            await gate.wait()
            return [make_order("ord_late", status="completed")]

        repository.get_past_orders.side_effect = slow_past
        view = OrderListView(repository, "vendor_1", OrderListKind.PAST)

        pending = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        await view.stop()
        gate.set()

        assert await pending is False
        assert view.orders == []

    @pytest.mark.asyncio
    async def test_fetch_error_becomes_notification(self):
        repository = mock_order_repository()
        repository.get_delivery_orders.side_effect = NetworkError("connection refused")
        notifier = Notifier()
        view = OrderListView(repository, "vendor_1", OrderListKind.DELIVERY, notifier=notifier)

        assert await view.refresh() is False
        assert notifier.last.level is NotificationLevel.ERROR
        assert view.is_loaded is False

    @pytest.mark.asyncio
    async def test_start_loads_and_polls(self):
        repository = mock_order_repository(past=[make_order("ord_1", status="completed")])
        view = OrderListView(repository, "vendor_1", OrderListKind.PAST, refresh_seconds=0.01)

        await view.start()
        assert view.is_loaded and view.is_polling
        await asyncio.sleep(0.05)
        await view.stop()

        assert repository.get_past_orders.await_count >= 2
        assert not view.is_polling


class TestOrderStatusManagementUseCase:
    """Test the three coordinated order lists"""

    @pytest.mark.asyncio
    async def test_dispatching_a_delivery_moves_it_between_lists(self):
        ready = make_order("ord_1", orderType="delivery", status="ready")
        dispatched = make_order("ord_1", orderType="delivery", status="onTheWay")
        repository = mock_order_repository(active={OrderType.DELIVERY: [ready]})
        use_case = OrderStatusManagementUseCase(repository, "vendor_1")
        await use_case.refresh_all()
        assert use_case.active.get("ord_1") is not None

        # After the PATCH the backend reports the order as dispatched
        async def dispatch(order_id, next_status):
            repository.get_active_orders.side_effect = (
                lambda vendor_id, order_type: [dispatched] if order_type is OrderType.DELIVERY else []
            )
            repository.get_delivery_orders.return_value = [dispatched]

        repository.advance_status.side_effect = dispatch

        assert await use_case.advance("ord_1", OrderStatus.ON_THE_WAY) is True
        assert use_case.active.get("ord_1") is None
        assert use_case.delivery.get("ord_1").local_status is OrderStatus.ON_THE_WAY

    @pytest.mark.asyncio
    async def test_unknown_order(self):
        notifier = Notifier()
        use_case = OrderStatusManagementUseCase(mock_order_repository(), "vendor_1", notifier)

        assert await use_case.advance("nope", OrderStatus.READY) is False
        assert notifier.last.message == "Order nope not found."


class TestHttpOrderRepository:
    """Test order endpoint paths"""

    @pytest.mark.asyncio
    async def test_status_actions_and_list_parsing(self, make_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            if request.method == "GET":
                return httpx.Response(
                    200,
                    json={"orders": [order_json("ord_1", "takeaway", "ready"), {"status": "ready"}]},
                )
            return httpx.Response(200, json={"success": True})

        client = make_client(handler)
        repository = HttpOrderRepository(client)

        orders = await repository.get_active_orders("vendor_1", OrderType.DINE_IN)
        await repository.advance_status("ord_1", OrderStatus.COMPLETED)
        await repository.advance_status("ord_1", OrderStatus.ON_THE_WAY)
        with pytest.raises(ValueError):
            await repository.advance_status("ord_1", OrderStatus.CANCELLED)

        assert [order.order_id for order in orders] == ["ord_1"]
        assert seen == [
            ("GET", "/order/active/vendor_1/dinein"),
            ("PATCH", "/order/ord_1/complete"),
            ("PATCH", "/order/ord_1/onTheWay"),
        ]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_guest_order_payload(self, make_client):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append((request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"success": True, "orderId": "ord_9", "orderNumber": "9"})

        client = make_client(handler)
        placed = await HttpOrderRepository(client).create_guest_order({"vendorId": "vendor_1", "total": 75})

        assert placed["orderNumber"] == "9"
        assert bodies == [("/order/guest", {"vendorId": "vendor_1", "total": 75})]
        await client.aclose()
