#!/usr/bin/env python3
"""
Command line entry point for the KAMPYN vendor client

Watches a vendor's order lists, advances orders, and inspects rate limits.
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from kampyn.application.use_cases.order_status_management_use_case import (  # noqa: E402
    OrderStatusManagementUseCase,
)
from kampyn.domain.value_objects.order_enums import OrderStatus  # noqa: E402
from kampyn.infrastructure.configuration import ConfigValidator, get_config  # noqa: E402
from kampyn.infrastructure.container import DependencyContainer  # noqa: E402
from kampyn.infrastructure.logging import ProductionLogger  # noqa: E402


def print_orders(sync: OrderStatusManagementUseCase):
    for view in (sync.active, sync.delivery, sync.past):
        page = view.page(1)
        print(f"\n== {view.kind.value} orders ({page.total_items}) ==")
        for state in page.items:
            order = state.order
            marker = " …" if state.is_updating else ""
            print(
                f"  #{order.order_number:<10} {order.order_type.value:<9} "
                f"{state.local_status.value:<12} {order.collector_name} ₹{order.total:.2f}{marker}"
            )
        if page.total_pages > 1:
            print(f"  (page 1 of {page.total_pages})")


async def watch_orders(container: DependencyContainer, vendor_id: str):
    """Keep the order lists in sync until interrupted"""
    logger = logging.getLogger(__name__)
    sync = container.create_order_status_management_use_case(vendor_id)
    await sync.start()
    logger.info("Watching orders for vendor %s (Ctrl+C to stop)", vendor_id)
    try:
        while True:
            print_orders(sync)
            await asyncio.sleep(container.get_config().active_orders_refresh_seconds)
    finally:
        await sync.stop()


async def advance_order(container: DependencyContainer, vendor_id: str, order_id: str, status: str) -> bool:
    sync = container.create_order_status_management_use_case(vendor_id)
    await sync.refresh_all()
    advanced = await sync.advance(order_id, OrderStatus(status))
    last = container.get_notifier().last
    if last:
        print(last.message)
    return advanced


async def show_blocked_ips(container: DependencyContainer) -> bool:
    monitor = container.get_rate_limit_monitoring_use_case()
    if not await monitor.refresh():
        print(container.get_notifier().last.message)
        return False
    for blocked in monitor.blocked_ips:
        print(f"{blocked.ip:<40} {blocked.endpoint:<30} hits={blocked.hit_count:<5} {blocked.time_remaining()}")
    if not monitor.blocked_ips:
        print("No blocked IPs")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kampyn", description="KAMPYN vendor client")
    commands = parser.add_subparsers(dest="command", required=True)

    watch = commands.add_parser("watch", help="watch a vendor's order lists")
    watch.add_argument("vendor_id")

    advance = commands.add_parser("advance", help="advance an order's status")
    advance.add_argument("vendor_id")
    advance.add_argument("order_id")
    advance.add_argument(
        "status",
        choices=[s.value for s in (OrderStatus.READY, OrderStatus.ON_THE_WAY, OrderStatus.COMPLETED, OrderStatus.DELIVERED)],
    )

    commands.add_parser("blocked-ips", help="list IPs blocked by the rate limiter")
    commands.add_parser("check-config", help="validate configuration")
    return parser


async def run(args: argparse.Namespace) -> int:
    container = DependencyContainer(get_config())
    try:
        if args.command == "watch":
            await watch_orders(container, args.vendor_id)
            return 0
        if args.command == "advance":
            ok = await advance_order(container, args.vendor_id, args.order_id, args.status)
            return 0 if ok else 1
        if args.command == "blocked-ips":
            return 0 if await show_blocked_ips(container) else 1
        return 2
    finally:
        await container.aclose()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Setup logging
    ProductionLogger.setup_logging()
    logger = logging.getLogger(__name__)

    validator = ConfigValidator(get_config())
    valid = validator.validate_all()
    if args.command == "check-config":
        report = validator.get_validation_report()
        for error in report["errors"]:
            print(f"ERROR: {error}")
        for warning in report["warnings"]:
            print(f"WARNING: {warning}")
        return 0 if valid else 1
    if not valid:
        logger.critical("Configuration is invalid - run `check-config` for details")
        return 1

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\n🛑 Stopped by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
