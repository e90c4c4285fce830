"""
Python bindings to the Stripe HTTP API.

The package re-exports the pieces integrators need so they can
``from stripe_bindings import ...`` without navigating the package::

    client = create_client(secret_key="sk_test_...")
    params = CreateInvoiceItem(currency=Currency.CAD, customer="cus_123", amount=1095)
    item = InvoiceItem.create(client, params)
"""

from .api import construct_event, create_client
from .core import (
    ChargeId,
    Client,
    ClientConfig,
    ClientEnvironment,
    ClientParameters,
    ConfigError,
    Currency,
    CustomerId,
    DecodeError,
    Deleted,
    EncodeError,
    ErrorCode,
    ErrorType,
    Event,
    EventData,
    EventId,
    EventType,
    Expand,
    Expandable,
    ExpandableId,
    ExpandableObject,
    Headers,
    InvoiceId,
    InvoiceItemId,
    List,
    Metadata,
    Object,
    ParseIdError,
    PlanId,
    ProductId,
    RangeBounds,
    RangeQuery,
    RequestError,
    RequestTimeoutError,
    StripeError,
    StripeId,
    SubscriptionId,
    SubscriptionItemId,
    TaxRateId,
    Timestamp,
    TransportError,
    UnexpectedError,
    Unrecognized,
    Webhook,
    WebhookError,
    WebhookErrorKind,
    build_environment,
    load_client_config,
    load_env_file,
    paginate,
)
from .resources import (
    CreateInvoiceItem,
    Customer,
    Invoice,
    InvoiceItem,
    ListInvoiceItems,
    Period,
    Plan,
    Subscription,
    TaxRate,
    UpdateInvoiceItem,
)

__version__ = "0.1.0"

__all__ = (
    "__version__",
    "ChargeId",
    "Client",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "CreateInvoiceItem",
    "Currency",
    "Customer",
    "CustomerId",
    "DecodeError",
    "Deleted",
    "EncodeError",
    "ErrorCode",
    "ErrorType",
    "Event",
    "EventData",
    "EventId",
    "EventType",
    "Expand",
    "Expandable",
    "ExpandableId",
    "ExpandableObject",
    "Headers",
    "Invoice",
    "InvoiceId",
    "InvoiceItem",
    "InvoiceItemId",
    "List",
    "ListInvoiceItems",
    "Metadata",
    "Object",
    "ParseIdError",
    "Period",
    "Plan",
    "PlanId",
    "ProductId",
    "RangeBounds",
    "RangeQuery",
    "RequestError",
    "RequestTimeoutError",
    "StripeError",
    "StripeId",
    "Subscription",
    "SubscriptionId",
    "SubscriptionItemId",
    "TaxRate",
    "TaxRateId",
    "Timestamp",
    "TransportError",
    "UnexpectedError",
    "Unrecognized",
    "UpdateInvoiceItem",
    "Webhook",
    "WebhookError",
    "WebhookErrorKind",
    "build_environment",
    "construct_event",
    "create_client",
    "load_client_config",
    "load_env_file",
    "paginate",
)
