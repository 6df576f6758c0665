#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from mastersync.app import build_application
from mastersync.config import ConfigurationError, configure_logging
from mastersync.domain.model import Customer, EntityKind, ServerId
from mastersync.domain.ports import INCLUDE_INACTIVE
from mastersync.domain.result import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from mastersync.app import Application
    from mastersync.domain.model import MasterRecord, Order


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage field-sales master data")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List cached records of one entity kind")
    list_parser.add_argument("entity", choices=[kind.value for kind in EntityKind])
    list_parser.add_argument("--search", default="", help="Match against name or code")
    list_parser.add_argument(
        "--include-inactive",
        action="store_true",
        help="Also show deactivated records",
    )

    create_parser = commands.add_parser("create-customer", help="Create a customer")
    create_parser.add_argument("--code", required=True)
    create_parser.add_argument("--name", required=True)
    create_parser.add_argument("--phone", default="")
    create_parser.add_argument("--address", default="")
    create_parser.add_argument("--route-id", type=int)
    create_parser.add_argument("--salesman-id", type=int)

    order_parser = commands.add_parser(
        "order", help="Show today's order for a customer, creating a draft if needed"
    )
    order_parser.add_argument("customer_id", type=int, help="Server id of the customer")

    return parser.parse_args(list(argv))


def _describe(record: MasterRecord) -> str:
    code = getattr(record, "code", "")
    name = getattr(record, "name", "")
    marker = "" if record.is_active else " (inactive)"
    return f"{record.server_id}\t{code}\t{name}{marker}"


def _describe_order(order: Order) -> str:
    return f"{order.invoice_no}\tcustomer={order.customer_id}\tflag={order.flag.name.lower()}"


async def _run_command(app: Application, args: argparse.Namespace) -> bool:
    match args.command:
        case "list":
            orchestrator = app.orchestrator_for(EntityKind(args.entity))
            filters = {INCLUDE_INACTIVE: True} if args.include_inactive else {}
            result = await orchestrator.search(args.search, **filters)
            if isinstance(result, Ok):
                for record in result.value:
                    print(_describe(record))
        case "create-customer":
            customer = Customer(
                code=args.code,
                name=args.name,
                phone=args.phone,
                address=args.address,
                route_id=args.route_id,
                salesman_id=args.salesman_id,
            )
            result = await app.customers.create(customer)
            if isinstance(result, Ok):
                print(_describe(result.value))
        case "order":
            found = await app.customers.get(ServerId(args.customer_id))
            if isinstance(found, Err):
                result = found
            else:
                result = await app.customers.get_or_create_order(found.value)
                if isinstance(result, Ok):
                    print(_describe_order(result.value))
        case _:
            raise ValueError(f"Unknown command: {args.command}")

    if isinstance(result, Err):
        print(f"Error: {result.error.message}", file=sys.stderr)
        return False
    return True


async def _main_async(args: argparse.Namespace) -> bool:
    app = build_application()
    try:
        return await _run_command(app, args)
    finally:
        await app.aclose()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        succeeded = asyncio.run(_main_async(parsed_args))
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not succeeded:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
