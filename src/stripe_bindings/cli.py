"""
Command-line interface for exercising the API bindings.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import requests

from .api import construct_event, create_client
from .core.client import Client
from .core.config import ConfigError, load_client_config
from .core.environment import build_environment
from .core.errors import StripeError
from .core.params import Expandable, RangeBounds, RangeQuery, Unrecognized, paginate
from .resources.invoiceitem import (
    CreateInvoiceItem,
    InvoiceItem,
    ListInvoiceItems,
    UpdateInvoiceItem,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _key_value(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Values must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Key must not be empty")
    return key, val


def _collect_pairs(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    collected: Dict[str, str] = {}
    for key, value in pairs:
        collected[key] = value
    return collected


def _jsonable(value: Any) -> Any:
    if isinstance(value, Expandable):
        expanded = value.as_object()
        return _jsonable(expanded) if expanded is not None else str(value.id)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Unrecognized):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {
            f.name: _jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if getattr(value, f.name) is not None
        }
        kind = getattr(type(value), "object", None)
        if isinstance(kind, str) and "object" not in result:
            result["object"] = kind
        return result
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, str):
        return str(value)
    return value


def _emit(value: Any) -> None:
    print(json.dumps(_jsonable(value), indent=2, sort_keys=True))


def _created_range(args: argparse.Namespace) -> Optional[RangeQuery]:
    bounds = RangeBounds(
        gt=args.created_gt,
        gte=args.created_gte,
        lt=args.created_lt,
        lte=args.created_lte,
    )
    if not bounds.to_params():
        return None
    return RangeQuery(bounds=bounds)


def _list_items(client: Client, args: argparse.Namespace) -> int:
    params = ListInvoiceItems(
        created=_created_range(args),
        customer=args.customer,
        ending_before=args.ending_before,
        expand=args.expand or (),
        invoice=args.invoice,
        limit=args.limit,
        pending=args.pending,
        starting_after=args.starting_after,
    )
    if args.all:
        items = list(paginate(lambda p: InvoiceItem.list(client, p), params))
        _emit(items)
        return 0
    _emit(InvoiceItem.list(client, params))
    return 0


def _create_item(client: Client, args: argparse.Namespace) -> int:
    params = CreateInvoiceItem(
        currency=args.currency,
        customer=args.customer,
        amount=args.amount,
        description=args.description,
        discountable=args.discountable,
        expand=args.expand or (),
        invoice=args.invoice,
        metadata=_collect_pairs(args.metadata) if args.metadata else None,
        quantity=args.quantity,
        subscription=args.subscription,
        unit_amount=args.unit_amount,
    )
    _emit(InvoiceItem.create(client, params))
    return 0


def _retrieve_item(client: Client, args: argparse.Namespace) -> int:
    _emit(InvoiceItem.retrieve(client, args.id, args.expand or ()))
    return 0


def _update_item(client: Client, args: argparse.Namespace) -> int:
    params = UpdateInvoiceItem(
        amount=args.amount,
        description=args.description,
        discountable=args.discountable,
        expand=args.expand or (),
        metadata=_collect_pairs(args.metadata) if args.metadata else None,
        quantity=args.quantity,
        unit_amount=args.unit_amount,
    )
    _emit(InvoiceItem.update(client, args.id, params))
    return 0


def _delete_item(client: Client, args: argparse.Namespace) -> int:
    deleted = InvoiceItem.delete(client, args.id)
    _emit(deleted)
    if not deleted.deleted:
        logging.error("Invoice item %s was not deleted", deleted.id)
        return 1
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing STRIPE_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_key_value,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )


def _add_item_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--amount", type=int, help="Amount in the smallest currency unit")
    parser.add_argument("--unit-amount", type=int, help="Unit amount in the smallest currency unit")
    parser.add_argument("--quantity", type=int, help="Quantity of units")
    parser.add_argument("--description", help="Description shown on the invoice")
    parser.add_argument(
        "--discountable",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Whether discounts apply to this invoice item",
    )
    parser.add_argument(
        "--metadata",
        action="append",
        type=_key_value,
        metavar="KEY=VALUE",
        help="Attach a metadata entry (repeatable)",
    )


def _add_expand(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--expand",
        action="append",
        metavar="FIELD",
        help="Expand a referenced object in the response (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stripe-bindings",
        description="Issue Stripe API requests from the command line",
    )
    _add_common_arguments(parser)
    groups = parser.add_subparsers(dest="group", required=True)

    items = groups.add_parser("invoiceitems", help="Manage invoice items")
    actions = items.add_subparsers(dest="action", required=True)

    list_parser = actions.add_parser("list", help="List invoice items")
    list_parser.add_argument("--customer", help="Only items for this customer id")
    list_parser.add_argument("--invoice", help="Only items on this invoice id")
    list_parser.add_argument("--limit", type=int, help="Page size (1-100)")
    list_parser.add_argument(
        "--pending",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only pending (or, with --no-pending, only invoiced) items",
    )
    list_parser.add_argument("--starting-after", help="Cursor: item id to page forward from")
    list_parser.add_argument("--ending-before", help="Cursor: item id to page backward from")
    list_parser.add_argument("--created-gt", type=int, metavar="UNIX")
    list_parser.add_argument("--created-gte", type=int, metavar="UNIX")
    list_parser.add_argument("--created-lt", type=int, metavar="UNIX")
    list_parser.add_argument("--created-lte", type=int, metavar="UNIX")
    list_parser.add_argument(
        "--all", action="store_true", help="Follow pagination cursors until exhausted"
    )
    _add_expand(list_parser)
    list_parser.set_defaults(handler=_list_items)

    create_parser = actions.add_parser("create", help="Create an invoice item")
    create_parser.add_argument("--currency", required=True, help="Three-letter currency code")
    create_parser.add_argument("--customer", required=True, help="Customer id to bill")
    create_parser.add_argument("--invoice", help="Draft invoice id to attach to")
    create_parser.add_argument("--subscription", help="Subscription id to attach to")
    _add_item_fields(create_parser)
    _add_expand(create_parser)
    create_parser.set_defaults(handler=_create_item)

    retrieve_parser = actions.add_parser("retrieve", help="Retrieve an invoice item")
    retrieve_parser.add_argument("id", help="Invoice item id (ii_...)")
    _add_expand(retrieve_parser)
    retrieve_parser.set_defaults(handler=_retrieve_item)

    update_parser = actions.add_parser("update", help="Update an invoice item")
    update_parser.add_argument("id", help="Invoice item id (ii_...)")
    _add_item_fields(update_parser)
    _add_expand(update_parser)
    update_parser.set_defaults(handler=_update_item)

    delete_parser = actions.add_parser("delete", help="Delete an invoice item")
    delete_parser.add_argument("id", help="Invoice item id (ii_...)")
    delete_parser.set_defaults(handler=_delete_item)

    webhooks = groups.add_parser("webhooks", help="Webhook utilities")
    webhook_actions = webhooks.add_subparsers(dest="action", required=True)
    verify_parser = webhook_actions.add_parser(
        "verify", help="Verify a webhook payload against its signature header"
    )
    verify_parser.add_argument(
        "--payload-file", required=True, help="File holding the raw request body"
    )
    verify_parser.add_argument(
        "--signature", required=True, help="Value of the Stripe-Signature header"
    )
    verify_parser.add_argument(
        "--secret", help="Signing secret (default: STRIPE_WEBHOOK_SECRET)"
    )
    verify_parser.add_argument(
        "--tolerance", type=int, default=300, help="Allowed clock skew in seconds"
    )
    verify_parser.set_defaults(handler=None)
    return parser


def _verify_webhook(args: argparse.Namespace, overrides: Dict[str, str]) -> int:
    secret = args.secret
    if secret is None:
        config_secret = overrides.get("STRIPE_WEBHOOK_SECRET")
        if config_secret is None:
            config_secret = build_environment(env_file=args.env_file).get(
                "STRIPE_WEBHOOK_SECRET"
            )
        secret = config_secret

    payload = Path(args.payload_file).read_bytes()
    event = construct_event(payload, args.signature, secret=secret, tolerance=args.tolerance)
    logging.info("Signature valid for event %s", event.id)
    _emit(event)
    return 0


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    session: Optional[requests.Session] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_pairs(args.set or ())

    if args.group == "webhooks":
        try:
            return _verify_webhook(args, overrides)
        except (ConfigError, StripeError, OSError) as exc:
            logging.error("Webhook verification failed: %s", exc)
            return 1

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config, session=session or requests.Session())
    handler: Callable[[Client, argparse.Namespace], int] = args.handler
    try:
        return handler(client, args)
    except ValueError as exc:
        logging.error("Invalid arguments: %s", exc)
        return 1
    except StripeError as exc:
        logging.error("Request failed: %s", exc)
        return 1


def main() -> None:
    sys.exit(run_cli())
