"""
Minimal script that uses the public API to create, list and delete an invoice item.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from stripe_bindings import (
    ConfigError,
    CreateInvoiceItem,
    Currency,
    InvoiceItem,
    ListInvoiceItems,
    StripeError,
    create_client,
    load_client_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an invoice item, list it back, then delete it"
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing STRIPE_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--customer", required=True, help="Customer id (cus_...)")
    parser.add_argument("--amount", type=int, default=1095, help="Amount in cents")
    parser.add_argument("--currency", default="cad", help="Three-letter currency code")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Leave the invoice item in place instead of deleting it",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
        )
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)

    try:
        params = CreateInvoiceItem(
            currency=Currency(args.currency),
            customer=args.customer,
            amount=args.amount,
        )
        item = InvoiceItem.create(client, params)
        logging.info("Created %s for %s %s", item.id, item.amount, item.currency)

        page = InvoiceItem.list(client, ListInvoiceItems(customer=args.customer))
        for listed in page:
            logging.info("Listed %s: %s %s", listed.id, listed.amount, listed.currency)
        if page.has_more:
            logging.info("More invoice items exist beyond this page")

        if not args.keep:
            deleted = InvoiceItem.delete(client, item.id)
            logging.info("Deleted %s: %s", deleted.id, deleted.deleted)
    except ValueError as exc:
        logging.error("Invalid arguments: %s", exc)
        return 1
    except StripeError as exc:
        logging.error("Request failed: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
