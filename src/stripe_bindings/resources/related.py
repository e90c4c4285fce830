"""
Snapshots of the objects an invoice item can reference or expand into.

Only the commonly used fields are decoded; anything else the API returns is
ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

from ..core.currency import Currency, parse_currency
from ..core.ids import CustomerId, InvoiceId, PlanId, SubscriptionId, TaxRateId
from ..core.params import Expandable, Metadata, Timestamp, Unrecognized

__all__ = ["Customer", "Invoice", "Period", "Plan", "Subscription", "TaxRate"]


def _metadata(payload: Mapping[str, Any]) -> Metadata:
    return dict(payload.get("metadata") or {})


@dataclass(frozen=True)
class Period:
    start: Optional[Timestamp] = None
    end: Optional[Timestamp] = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Period":
        return cls(start=payload.get("start"), end=payload.get("end"))

    def to_params(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class Customer:
    id: CustomerId
    email: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    currency: Union[Currency, Unrecognized, None] = None
    balance: Optional[int] = None
    created: Optional[Timestamp] = None
    livemode: Optional[bool] = None
    deleted: bool = False
    metadata: Metadata = field(default_factory=dict)

    object: ClassVar[str] = "customer"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Customer":
        return cls(
            id=CustomerId(payload["id"]),
            email=payload.get("email"),
            name=payload.get("name"),
            description=payload.get("description"),
            currency=parse_currency(payload.get("currency")),
            balance=payload.get("balance"),
            created=payload.get("created"),
            livemode=payload.get("livemode"),
            deleted=bool(payload.get("deleted", False)),
            metadata=_metadata(payload),
        )


@dataclass(frozen=True)
class Invoice:
    id: InvoiceId
    customer: Optional[Expandable[Customer]] = None
    amount_due: Optional[int] = None
    amount_paid: Optional[int] = None
    currency: Union[Currency, Unrecognized, None] = None
    status: Optional[str] = None
    subscription: Optional[str] = None
    created: Optional[Timestamp] = None
    livemode: Optional[bool] = None
    metadata: Metadata = field(default_factory=dict)

    object: ClassVar[str] = "invoice"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Invoice":
        return cls(
            id=InvoiceId(payload["id"]),
            customer=Expandable.decode(
                payload.get("customer"), CustomerId, Customer.from_response
            ),
            amount_due=payload.get("amount_due"),
            amount_paid=payload.get("amount_paid"),
            currency=parse_currency(payload.get("currency")),
            status=payload.get("status"),
            subscription=_id_of(payload.get("subscription")),
            created=payload.get("created"),
            livemode=payload.get("livemode"),
            metadata=_metadata(payload),
        )


@dataclass(frozen=True)
class Plan:
    id: PlanId
    active: Optional[bool] = None
    amount: Optional[int] = None
    currency: Union[Currency, Unrecognized, None] = None
    interval: Optional[str] = None
    interval_count: Optional[int] = None
    nickname: Optional[str] = None
    product: Optional[str] = None
    created: Optional[Timestamp] = None
    livemode: Optional[bool] = None
    metadata: Metadata = field(default_factory=dict)

    object: ClassVar[str] = "plan"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Plan":
        return cls(
            id=PlanId(payload["id"]),
            active=payload.get("active"),
            amount=payload.get("amount"),
            currency=parse_currency(payload.get("currency")),
            interval=payload.get("interval"),
            interval_count=payload.get("interval_count"),
            nickname=payload.get("nickname"),
            product=_id_of(payload.get("product")),
            created=payload.get("created"),
            livemode=payload.get("livemode"),
            metadata=_metadata(payload),
        )


@dataclass(frozen=True)
class Subscription:
    id: SubscriptionId
    customer: Optional[Expandable[Customer]] = None
    status: Optional[str] = None
    current_period_start: Optional[Timestamp] = None
    current_period_end: Optional[Timestamp] = None
    cancel_at_period_end: Optional[bool] = None
    created: Optional[Timestamp] = None
    livemode: Optional[bool] = None
    metadata: Metadata = field(default_factory=dict)

    object: ClassVar[str] = "subscription"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "Subscription":
        return cls(
            id=SubscriptionId(payload["id"]),
            customer=Expandable.decode(
                payload.get("customer"), CustomerId, Customer.from_response
            ),
            status=payload.get("status"),
            current_period_start=payload.get("current_period_start"),
            current_period_end=payload.get("current_period_end"),
            cancel_at_period_end=payload.get("cancel_at_period_end"),
            created=payload.get("created"),
            livemode=payload.get("livemode"),
            metadata=_metadata(payload),
        )


@dataclass(frozen=True)
class TaxRate:
    id: TaxRateId
    display_name: Optional[str] = None
    percentage: Optional[float] = None
    inclusive: Optional[bool] = None
    active: Optional[bool] = None
    jurisdiction: Optional[str] = None
    description: Optional[str] = None
    created: Optional[Timestamp] = None
    livemode: Optional[bool] = None
    metadata: Metadata = field(default_factory=dict)

    object: ClassVar[str] = "tax_rate"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "TaxRate":
        return cls(
            id=TaxRateId(payload["id"]),
            display_name=payload.get("display_name"),
            percentage=payload.get("percentage"),
            inclusive=payload.get("inclusive"),
            active=payload.get("active"),
            jurisdiction=payload.get("jurisdiction"),
            description=payload.get("description"),
            created=payload.get("created"),
            livemode=payload.get("livemode"),
            metadata=_metadata(payload),
        )


def _id_of(value: Any) -> Optional[str]:
    # Fields we do not model as expandable still arrive expanded when asked to.
    if isinstance(value, Mapping):
        return value.get("id")
    return value
