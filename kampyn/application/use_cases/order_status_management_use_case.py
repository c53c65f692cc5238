"""
Order Status Management Use Case

Keeps polled mirrors of a vendor's order lists and lets the vendor advance
orders through their statuses. Status changes are applied locally first and
rolled back if the backend rejects them.
"""

import asyncio
import logging
import math
from enum import Enum
from typing import Dict, List, Optional, Set

from kampyn.application.dtos.order_dtos import OrderState, Page
from kampyn.domain.entities.order_entity import Order
from kampyn.domain.repositories.order_repository import OrderRepository
from kampyn.domain.value_objects.order_enums import OrderStatus, OrderType
from kampyn.infrastructure.scheduling.periodic_task import PeriodicTask
from kampyn.infrastructure.services.notification_service import Notifier
from kampyn.infrastructure.utilities.constants import SyncSettings
from kampyn.infrastructure.utilities.exceptions import (
    KampynError,
    OrderNotFoundError,
    ValidationError,
)

# Order types fetched for the active list, in display order
ACTIVE_ORDER_TYPES = (OrderType.DELIVERY, OrderType.TAKEAWAY, OrderType.DINE_IN, OrderType.CASH)


class OrderListKind(str, Enum):
    ACTIVE = "active"
    DELIVERY = "delivery"
    PAST = "past"


class OptimisticStatusChange:
    """Local status change that can be undone exactly"""

    def __init__(self, view: "OrderListView", order_id: str, next_status: OrderStatus):
        self._view = view
        self._order_id = order_id
        self._next_status = next_status
        index, state = view.locate(order_id)
        self._index = index
        self._original = OrderState(state.order, state.local_status, state.is_updating)
        self.removes_entry = not view.belongs(state.order.order_type, next_status)

    def apply(self):
        index, state = self._view.locate(self._order_id)
        if self.removes_entry:
            del self._view._orders[index]
        else:
            state.local_status = self._next_status
            state.is_updating = True

    def commit(self):
        index, state = self._view.locate(self._order_id)
        if state is None:
            return
        state.order = state.order.with_status(self._next_status)
        state.local_status = self._next_status
        state.is_updating = False

    def revert(self):
        """Put the original entry back where it was"""
        index, _ = self._view.locate(self._order_id)
        restored = OrderState(self._original.order, self._original.local_status, self._original.is_updating)
        if index is None:
            position = min(self._index, len(self._view._orders))
            self._view._orders.insert(position, restored)
        else:
            self._view._orders[index] = restored


class OrderListView:
    """Eventually consistent mirror of one of the vendor's order lists"""

    def __init__(
        self,
        order_repository: OrderRepository,
        vendor_id: str,
        kind: OrderListKind,
        *,
        notifier: Optional[Notifier] = None,
        refresh_seconds: Optional[float] = None,
        page_size: int = SyncSettings.PAGE_SIZE,
    ):
        self._order_repository = order_repository
        self._vendor_id = vendor_id
        self._kind = kind
        self._notifier = notifier or Notifier()
        self._page_size = page_size
        self._orders: List[OrderState] = []
        self._in_flight: Set[str] = set()
        self._stopped = False
        self._loaded = False
        if refresh_seconds is None:
            refresh_seconds = (
                SyncSettings.PAST_ORDERS_REFRESH_SECONDS
                if kind is OrderListKind.PAST
                else SyncSettings.ACTIVE_ORDERS_REFRESH_SECONDS
            )
        self._poller = PeriodicTask(self.refresh, refresh_seconds, name=f"{kind.value}-orders")
        self._logger = logging.getLogger(f"{self.__class__.__name__}.{kind.value}")

    @property
    def kind(self) -> OrderListKind:
        return self._kind

    @property
    def orders(self) -> List[OrderState]:
        return list(self._orders)

    @property
    def in_flight(self) -> frozenset:
        return frozenset(self._in_flight)

    @property
    def is_polling(self) -> bool:
        return self._poller.is_running

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self, order_id: str) -> Optional[OrderState]:
        return self.locate(order_id)[1]

    async def start(self):
        """Initial load, then poll until ``stop``"""
        self._stopped = False
        await self.refresh()
        self._poller.start()

    async def stop(self):
        self._stopped = True
        await self._poller.stop()

    async def refresh(self) -> bool:
        """Fetch the list and merge it into local state; errors become notifications"""
        try:
            fetched = await self._fetch()
        except KampynError as e:
            self._notifier.notify_error(e, f"load {self._kind.value} orders")
            return False

        if self._stopped:
            self._logger.debug("Discarding %s poll received after stop", self._kind.value)
            return False

        self._merge(fetched)
        self._loaded = True
        return True

    def belongs(self, order_type: OrderType, status: OrderStatus) -> bool:
        """Whether an order in ``status`` is listed by this view"""
        if self._kind is OrderListKind.PAST:
            return True
        if status.is_terminal:
            return False
        if self._kind is OrderListKind.ACTIVE:
            return not (order_type is OrderType.DELIVERY and status is OrderStatus.ON_THE_WAY)
        return True

    async def advance(self, order_id: str, next_status: OrderStatus) -> bool:
        """
        Move an order to ``next_status`` optimistically.

        Returns False without sending anything when the order is unknown, the
        trigger is not allowed, or an advance for the same order is already in
        flight. A rejected request restores the entry exactly as it was.
        """
        if order_id in self._in_flight:
            self._logger.info("⏳ ADVANCE IGNORED: order %s is already updating", order_id)
            return False

        _, state = self.locate(order_id)
        if state is None:
            self._notifier.notify_error(OrderNotFoundError(order_id), "advance order")
            return False
        if not state.order.can_advance_to(next_status):
            self._notifier.notify_error(
                ValidationError(
                    f"Cannot mark a {state.order.order_type.value} order as {next_status.value}",
                    field="status",
                ),
                "advance order",
            )
            return False

        self._logger.info(
            "📝 STATUS UPDATE: order %s %s → %s", order_id, state.local_status.value, next_status.value
        )
        change = OptimisticStatusChange(self, order_id, next_status)
        self._in_flight.add(order_id)
        change.apply()
        try:
            await self._order_repository.advance_status(order_id, next_status)
        except KampynError as e:
            change.revert()
            self._logger.warning("↩️ STATUS REVERTED: order %s (%s)", order_id, e)
            self._notifier.notify_error(e, "advance order")
            return False
        except Exception:
            change.revert()
            self._logger.exception("💥 STATUS UPDATE FAILED: order %s reverted", order_id)
            raise
        finally:
            self._in_flight.discard(order_id)

        change.commit()
        self._notifier.success(f"Order #{state.order.order_number} marked {next_status.value}")
        return True

    def page(self, number: int = 1) -> Page[OrderState]:
        """Page ``number`` of the list, clamped to the available range"""
        total_items = len(self._orders)
        total_pages = math.ceil(total_items / self._page_size) if total_items else 0
        number = max(1, min(number, max(total_pages, 1)))
        start = (number - 1) * self._page_size
        return Page(
            items=self._orders[start:start + self._page_size],
            page=number,
            total_pages=total_pages,
            total_items=total_items,
        )

    async def _fetch(self) -> List[Order]:
        if self._kind is OrderListKind.PAST:
            return await self._order_repository.get_past_orders(self._vendor_id)
        if self._kind is OrderListKind.DELIVERY:
            return await self._order_repository.get_delivery_orders(self._vendor_id)

        batches = await asyncio.gather(
            *(
                self._order_repository.get_active_orders(self._vendor_id, order_type)
                for order_type in ACTIVE_ORDER_TYPES
            )
        )
        return [
            order
            for batch in batches
            for order in batch
            if self.belongs(order.order_type, order.status)
        ]

    def _merge(self, fetched: List[Order]):
        """Replace local state, keeping optimistic entries of in-flight orders"""
        local: Dict[str, OrderState] = {state.order_id: state for state in self._orders}
        merged: List[OrderState] = []
        for order in fetched:
            if order.order_id in self._in_flight:
                existing = local.get(order.order_id)
                if existing is not None:
                    merged.append(existing)
                continue
            merged.append(OrderState.from_order(order))
        self._orders = merged
        self._logger.debug("📋 %s ORDERS: %d listed", self._kind.value.upper(), len(merged))

    def locate(self, order_id: str):
        for index, state in enumerate(self._orders):
            if state.order_id == order_id:
                return index, state
        return None, None


class OrderStatusManagementUseCase:
    """Use case for a vendor's order lists and status transitions"""

    def __init__(
        self,
        order_repository: OrderRepository,
        vendor_id: str,
        notifier: Optional[Notifier] = None,
        active_refresh_seconds: float = SyncSettings.ACTIVE_ORDERS_REFRESH_SECONDS,
        past_refresh_seconds: float = SyncSettings.PAST_ORDERS_REFRESH_SECONDS,
        page_size: int = SyncSettings.PAGE_SIZE,
    ):
        self._vendor_id = vendor_id
        self._notifier = notifier or Notifier()
        self._views = {
            OrderListKind.ACTIVE: OrderListView(
                order_repository, vendor_id, OrderListKind.ACTIVE,
                notifier=self._notifier, refresh_seconds=active_refresh_seconds, page_size=page_size,
            ),
            OrderListKind.DELIVERY: OrderListView(
                order_repository, vendor_id, OrderListKind.DELIVERY,
                notifier=self._notifier, refresh_seconds=active_refresh_seconds, page_size=page_size,
            ),
            OrderListKind.PAST: OrderListView(
                order_repository, vendor_id, OrderListKind.PAST,
                notifier=self._notifier, refresh_seconds=past_refresh_seconds, page_size=page_size,
            ),
        }
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def vendor_id(self) -> str:
        return self._vendor_id

    @property
    def active(self) -> OrderListView:
        return self._views[OrderListKind.ACTIVE]

    @property
    def delivery(self) -> OrderListView:
        return self._views[OrderListKind.DELIVERY]

    @property
    def past(self) -> OrderListView:
        return self._views[OrderListKind.PAST]

    def view(self, kind: OrderListKind) -> OrderListView:
        return self._views[kind]

    async def start(self):
        self._logger.info("🚀 ORDER SYNC STARTED for vendor %s", self._vendor_id)
        await asyncio.gather(*(view.start() for view in self._views.values()))

    async def stop(self):
        await asyncio.gather(*(view.stop() for view in self._views.values()))
        self._logger.info("🛑 ORDER SYNC STOPPED for vendor %s", self._vendor_id)

    async def refresh_all(self):
        await asyncio.gather(*(view.refresh() for view in self._views.values()))

    async def advance(self, order_id: str, next_status: OrderStatus) -> bool:
        """Advance an order in whichever live view lists it"""
        for kind in (OrderListKind.ACTIVE, OrderListKind.DELIVERY):
            view = self._views[kind]
            if view.get(order_id) is not None or order_id in view.in_flight:
                advanced = await view.advance(order_id, next_status)
                if advanced:
                    # The order may now belong to a different list
                    await self.refresh_all()
                return advanced
        self._notifier.notify_error(OrderNotFoundError(order_id), "advance order")
        return False
