"""
Verification of signed webhook deliveries.

Stripe signs each delivery with the endpoint's signing secret and sends the
result in the ``Stripe-Signature`` header as ``t=<unix time>,v1=<hex digest>``.
The digest is an HMAC-SHA256 of ``"<t>.<raw body>"``.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

from .errors import WebhookError, WebhookErrorKind
from .ids import EventId
from .params import Unrecognized, parse_enum

__all__ = [
    "DEFAULT_TOLERANCE_SECONDS",
    "SIGNATURE_SCHEME",
    "Event",
    "EventData",
    "EventType",
    "Webhook",
]

T = TypeVar("T")

DEFAULT_TOLERANCE_SECONDS = 300
SIGNATURE_SCHEME = "v1"


class EventType(str, Enum):
    CHARGE_CAPTURED = "charge.captured"
    CHARGE_FAILED = "charge.failed"
    CHARGE_REFUNDED = "charge.refunded"
    CHARGE_SUCCEEDED = "charge.succeeded"
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_DELETED = "customer.deleted"
    CUSTOMER_UPDATED = "customer.updated"
    CUSTOMER_SUBSCRIPTION_CREATED = "customer.subscription.created"
    CUSTOMER_SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    CUSTOMER_SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    INVOICE_CREATED = "invoice.created"
    INVOICE_DELETED = "invoice.deleted"
    INVOICE_FINALIZED = "invoice.finalized"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    INVOICE_UPCOMING = "invoice.upcoming"
    INVOICE_UPDATED = "invoice.updated"
    INVOICE_ITEM_CREATED = "invoiceitem.created"
    INVOICE_ITEM_DELETED = "invoiceitem.deleted"
    INVOICE_ITEM_UPDATED = "invoiceitem.updated"
    PLAN_CREATED = "plan.created"
    PLAN_DELETED = "plan.deleted"
    PLAN_UPDATED = "plan.updated"
    TAX_RATE_CREATED = "tax_rate.created"
    TAX_RATE_UPDATED = "tax_rate.updated"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EventData:
    object: Mapping[str, Any]
    previous_attributes: Mapping[str, Any] = field(default_factory=dict)

    def object_as(self, decoder: Callable[[Mapping[str, Any]], T]) -> T:
        """Decode the event's object, e.g. ``data.object_as(InvoiceItem.from_response)``."""
        return decoder(self.object)


@dataclass(frozen=True)
class Event:
    id: EventId
    type: Union[EventType, Unrecognized]
    created: int
    data: EventData
    livemode: bool = False
    account: Optional[str] = None
    api_version: Optional[str] = None
    pending_webhooks: Optional[int] = None

    object = "event"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Event":
        data = payload["data"]
        return cls(
            id=EventId(payload["id"]),
            type=parse_enum(EventType, payload["type"]),  # type: ignore[arg-type]
            created=int(payload["created"]),
            data=EventData(
                object=data["object"],
                previous_attributes=data.get("previous_attributes") or {},
            ),
            livemode=bool(payload.get("livemode", False)),
            account=payload.get("account"),
            api_version=payload.get("api_version"),
            pending_webhooks=payload.get("pending_webhooks"),
        )


def _to_bytes(payload: Union[str, bytes]) -> bytes:
    return payload.encode("utf-8") if isinstance(payload, str) else payload


def _parse_header(header: str) -> Tuple[int, List[str]]:
    timestamp: Optional[int] = None
    signatures: List[str] = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError as exc:
                raise WebhookError(
                    WebhookErrorKind.BAD_HEADER, f"invalid timestamp in signature header: {value!r}"
                ) from exc
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)

    if timestamp is None:
        raise WebhookError(WebhookErrorKind.BAD_HEADER, "signature header has no timestamp")
    if not signatures:
        raise WebhookError(
            WebhookErrorKind.BAD_HEADER,
            f"signature header has no {SIGNATURE_SCHEME} signature",
        )
    return timestamp, signatures


class Webhook:
    """Signature checks and event parsing for incoming webhook requests."""

    @staticmethod
    def compute_signature(payload: Union[str, bytes], secret: str, timestamp: int) -> str:
        if not secret:
            raise WebhookError(WebhookErrorKind.BAD_KEY, "webhook signing secret is empty")
        signed_payload = f"{timestamp}.".encode("utf-8") + _to_bytes(payload)
        return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()

    @classmethod
    def generate_header(
        cls,
        payload: Union[str, bytes],
        secret: str,
        *,
        timestamp: Optional[int] = None,
    ) -> str:
        timestamp = int(time.time()) if timestamp is None else timestamp
        signature = cls.compute_signature(payload, secret, timestamp)
        return f"t={timestamp},{SIGNATURE_SCHEME}={signature}"

    @classmethod
    def verify_header(
        cls,
        payload: Union[str, bytes],
        sig_header: str,
        secret: str,
        *,
        tolerance: int = DEFAULT_TOLERANCE_SECONDS,
        now: Optional[int] = None,
    ) -> int:
        """
        Raise :class:`WebhookError` unless ``sig_header`` is a valid signature of
        ``payload`` made within ``tolerance`` seconds of ``now``.

        Returns the signed timestamp.
        """
        timestamp, signatures = _parse_header(sig_header)
        expected = cls.compute_signature(payload, secret, timestamp).encode("utf-8")

        if not any(
            hmac.compare_digest(expected, candidate.encode("utf-8")) for candidate in signatures
        ):
            raise WebhookError(
                WebhookErrorKind.BAD_SIGNATURE,
                "no signature in the header matches the expected signature for the payload",
            )

        now = int(time.time()) if now is None else now
        if abs(now - timestamp) > tolerance:
            raise WebhookError(
                WebhookErrorKind.BAD_TIMESTAMP,
                f"timestamp {timestamp} is outside the tolerance of {tolerance}s",
            )
        return timestamp

    @classmethod
    def construct_event(
        cls,
        payload: Union[str, bytes],
        sig_header: str,
        secret: str,
        *,
        tolerance: int = DEFAULT_TOLERANCE_SECONDS,
        now: Optional[int] = None,
    ) -> Event:
        cls.verify_header(payload, sig_header, secret, tolerance=tolerance, now=now)
        try:
            body: Dict[str, Any] = json.loads(_to_bytes(payload).decode("utf-8"))
            event = Event.from_response(body)
        except (ValueError, KeyError, TypeError) as exc:
            raise WebhookError(
                WebhookErrorKind.BAD_PARSE, f"webhook payload is not a valid event: {exc}"
            ) from exc

        logging.info("Verified webhook event %s (%s)", event.id, event.type)
        return event
