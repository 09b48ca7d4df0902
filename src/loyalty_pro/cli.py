"""Command-line front end for the Loyalty Pro ledger.

Usage:
    loyalty-pro register "Bob's Shop" bob secret
    loyalty-pro login bob secret
    loyalty-pro transact bob 9999999999 --bill 100 --points 10 --name Asha
    loyalty-pro customers bob
    loyalty-pro insights bob "Who are my top spenders?"
"""

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

import structlog

from loyalty_pro.config import configure_logging
from loyalty_pro.exceptions import LedgerError
from loyalty_pro.insights import InsightRequestBuilder, InsightService
from loyalty_pro.ledger import LedgerService
from loyalty_pro.models import CustomerDraft, Transaction
from loyalty_pro.store import JSONFileStore

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loyalty-pro",
        description="Loyalty Pro customer ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s register "Bob's Shop" bob secret
  %(prog)s transact bob 9999999999 --bill 100 --points 10 --name Asha
  %(prog)s insights bob "Who visits most often?"
        """,
    )
    parser.add_argument(
        "--store",
        type=str,
        default=None,
        help="Path to the JSON ledger file (default: LEDGER_STORE_PATH)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="Register a new admin")
    register.add_argument("name")
    register.add_argument("username")
    register.add_argument("password")

    login = sub.add_parser("login", help="Check admin credentials")
    login.add_argument("username")
    login.add_argument("password")

    customers = sub.add_parser("customers", help="List an admin's customers")
    customers.add_argument("username")

    transact = sub.add_parser("transact", help="Record a purchase for a customer")
    transact.add_argument("username")
    transact.add_argument("mobile")
    transact.add_argument("--bill", type=float, required=True, help="Bill amount")
    transact.add_argument("--points", type=int, required=True, help="Points awarded")
    transact.add_argument("--name", default="", help="Name, used for new customers")
    transact.add_argument("--pin", default="", help="PIN, used for new customers")

    insights = sub.add_parser("insights", help="Ask a question about your customers")
    insights.add_argument("username")
    insights.add_argument("prompt", nargs="+")

    return parser


async def run(args: argparse.Namespace) -> object:
    """Execute one parsed command and return a JSON-serializable result."""
    ledger = LedgerService(JSONFileStore(args.store))

    if args.command == "register":
        admin = await ledger.register(args.name, args.username, args.password)
        return admin.model_dump()
    if args.command == "login":
        admin = await ledger.login(args.username, args.password)
        return admin.model_dump()
    if args.command == "customers":
        customers = await ledger.get_customers(args.username)
        return [c.model_dump(mode="json", by_alias=True, exclude={"pin"}) for c in customers]
    if args.command == "transact":
        receipt = await ledger.apply_transaction(
            args.username,
            CustomerDraft(mobile=args.mobile, name=args.name, pin=args.pin),
            Transaction(bill=args.bill, points=args.points),
        )
        return receipt.model_dump(mode="json", by_alias=True, exclude={"customer": {"pin"}})
    if args.command == "insights":
        service = InsightService(ledger, InsightRequestBuilder.from_settings())
        return await service.fetch_insights(args.username, " ".join(args.prompt))

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``loyalty-pro`` script."""
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run(args))
    except LedgerError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
