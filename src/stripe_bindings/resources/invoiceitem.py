"""
Invoice items: charges or credits queued onto a customer's next invoice.

See https://stripe.com/docs/api/invoiceitems for the upstream reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from ..core.client import Client
from ..core.currency import Currency, parse_currency
from ..core.ids import (
    CustomerId,
    InvoiceId,
    InvoiceItemId,
    SubscriptionId,
)
from ..core.params import (
    Deleted,
    Expand,
    Expandable,
    List,
    Metadata,
    RangeQuery,
    Timestamp,
    Unrecognized,
)
from .related import Customer, Invoice, Period, Plan, Subscription, TaxRate

__all__ = [
    "CreateInvoiceItem",
    "InvoiceItem",
    "ListInvoiceItems",
    "UpdateInvoiceItem",
]


def _path(id: Optional[InvoiceItemId] = None) -> str:
    if id is None:
        return "/invoiceitems"
    return f"/invoiceitems/{quote(str(id), safe='')}"


def _optional_id(value: Any, id_type: Any) -> Any:
    if value is None:
        return None
    return id_type(value)


@dataclass(frozen=True)
class InvoiceItem:
    """
    The resource representing a Stripe "InvoiceItem".

    ``amount`` should always equal ``unit_amount * quantity``. ``customer``,
    ``invoice`` and ``subscription`` arrive as bare ids unless they were
    named in ``expand``.
    """

    id: InvoiceItemId
    amount: Optional[int] = None
    currency: Union[Currency, Unrecognized, None] = None
    customer: Optional[Expandable[Customer]] = None
    date: Optional[Timestamp] = None
    # Always true for a deleted object.
    deleted: bool = False
    description: Optional[str] = None
    discountable: Optional[bool] = None
    invoice: Optional[Expandable[Invoice]] = None
    livemode: Optional[bool] = None
    metadata: Metadata = field(default_factory=dict)
    period: Optional[Period] = None
    plan: Optional[Plan] = None
    proration: Optional[bool] = None
    quantity: Optional[int] = None
    subscription: Optional[Expandable[Subscription]] = None
    subscription_item: Optional[str] = None
    tax_rates: Optional[Sequence[TaxRate]] = None
    unit_amount: Optional[int] = None

    object: ClassVar[str] = "invoiceitem"

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "InvoiceItem":
        period = payload.get("period")
        plan = payload.get("plan")
        tax_rates = payload.get("tax_rates")
        return cls(
            id=InvoiceItemId(payload["id"]),
            amount=payload.get("amount"),
            currency=parse_currency(payload.get("currency")),
            customer=Expandable.decode(
                payload.get("customer"), CustomerId, Customer.from_response
            ),
            date=payload.get("date"),
            deleted=bool(payload.get("deleted", False)),
            description=payload.get("description"),
            discountable=payload.get("discountable"),
            invoice=Expandable.decode(
                payload.get("invoice"), InvoiceId, Invoice.from_response
            ),
            livemode=payload.get("livemode"),
            metadata=dict(payload.get("metadata") or {}),
            period=Period.from_response(period) if period is not None else None,
            plan=Plan.from_response(plan) if plan is not None else None,
            proration=payload.get("proration"),
            quantity=payload.get("quantity"),
            subscription=Expandable.decode(
                payload.get("subscription"), SubscriptionId, Subscription.from_response
            ),
            subscription_item=payload.get("subscription_item"),
            tax_rates=(
                [TaxRate.from_response(rate) for rate in tax_rates]
                if tax_rates is not None
                else None
            ),
            unit_amount=payload.get("unit_amount"),
        )

    @classmethod
    def list(
        cls, client: Client, params: Optional["ListInvoiceItems"] = None
    ) -> List["InvoiceItem"]:
        """
        Returns a list of your invoice items.

        Invoice items are returned sorted by creation date, with the most
        recently created invoice items appearing first.
        """
        return client.get_query(
            _path(), params or ListInvoiceItems(), List.decoder(cls.from_response)
        )

    @classmethod
    def create(cls, client: Client, params: "CreateInvoiceItem") -> "InvoiceItem":
        """
        Creates an item to be added to a draft invoice.

        If no invoice is specified, the item will be on the next invoice
        created for the customer specified.
        """
        return client.post_form(_path(), params, cls.from_response)

    @classmethod
    def retrieve(
        cls, client: Client, id: Union[InvoiceItemId, str], expand: Sequence[str] = ()
    ) -> "InvoiceItem":
        return client.get_query(
            _path(InvoiceItemId(id)), Expand(tuple(expand)), cls.from_response
        )

    @classmethod
    def update(
        cls,
        client: Client,
        id: Union[InvoiceItemId, str],
        params: "UpdateInvoiceItem",
    ) -> "InvoiceItem":
        """
        Updates the amount or description of an invoice item on an upcoming
        invoice. Only possible before the invoice it's attached to is closed.
        """
        return client.post_form(_path(InvoiceItemId(id)), params, cls.from_response)

    @classmethod
    def delete(
        cls, client: Client, id: Union[InvoiceItemId, str]
    ) -> Deleted[InvoiceItemId]:
        """
        Deletes an invoice item, removing it from an invoice.

        Only possible when the item is not attached to an invoice, or is
        attached to a draft invoice.
        """
        return client.delete(_path(InvoiceItemId(id)), Deleted.decoder(InvoiceItemId))


@dataclass
class CreateInvoiceItem:
    """
    The parameters for :meth:`InvoiceItem.create`.

    ``currency`` also accepts an :class:`Unrecognized` code taken from a decoded
    item; it is sent as received.
    """

    currency: Union[Currency, Unrecognized, str]
    customer: Union[CustomerId, str]
    # A negative amount applies a credit to the customer's account.
    amount: Optional[int] = None
    description: Optional[str] = None
    discountable: Optional[bool] = None
    expand: Sequence[str] = ()
    invoice: Optional[InvoiceId] = None
    metadata: Optional[Metadata] = None
    period: Optional[Period] = None
    quantity: Optional[int] = None
    subscription: Optional[SubscriptionId] = None
    tax_rates: Optional[Sequence[str]] = None
    unit_amount: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.currency, Unrecognized):
            self.currency = Currency(self.currency)
        self.customer = CustomerId(self.customer)
        self.invoice = _optional_id(self.invoice, InvoiceId)
        self.subscription = _optional_id(self.subscription, SubscriptionId)
        if self.quantity is not None and self.quantity < 0:
            raise ValueError("quantity must be a non-negative integer")


@dataclass
class ListInvoiceItems:
    """The parameters for :meth:`InvoiceItem.list`."""

    created: Optional[RangeQuery] = None
    customer: Optional[CustomerId] = None
    # Cursor: an invoice item id; the page ends just before it.
    ending_before: Optional[InvoiceItemId] = None
    expand: Sequence[str] = ()
    invoice: Optional[InvoiceId] = None
    # Between 1 and 100; the API defaults to 10.
    limit: Optional[int] = None
    pending: Optional[bool] = None
    # Cursor: an invoice item id; the page starts just after it.
    starting_after: Optional[InvoiceItemId] = None

    def __post_init__(self) -> None:
        self.customer = _optional_id(self.customer, CustomerId)
        self.ending_before = _optional_id(self.ending_before, InvoiceItemId)
        self.invoice = _optional_id(self.invoice, InvoiceId)
        self.starting_after = _optional_id(self.starting_after, InvoiceItemId)


@dataclass
class UpdateInvoiceItem:
    """The parameters for :meth:`InvoiceItem.update`."""

    amount: Optional[int] = None
    description: Optional[str] = None
    # Cannot be set to true for prorations.
    discountable: Optional[bool] = None
    expand: Sequence[str] = ()
    metadata: Optional[Metadata] = None
    period: Optional[Period] = None
    quantity: Optional[int] = None
    tax_rates: Optional[Sequence[str]] = None
    unit_amount: Optional[int] = None
