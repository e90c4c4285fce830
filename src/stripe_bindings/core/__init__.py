"""
Request/response plumbing shared by every resource.
"""

from .client import Client
from .config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .currency import Currency, parse_currency
from .encoding import encode_query, flatten_params
from .environment import ClientEnvironment, build_environment, load_env_file
from .errors import (
    DecodeError,
    EncodeError,
    ErrorCode,
    ErrorType,
    RequestError,
    RequestTimeoutError,
    StripeError,
    TransportError,
    UnexpectedError,
    WebhookError,
    WebhookErrorKind,
)
from .ids import (
    ChargeId,
    CustomerId,
    EventId,
    InvoiceId,
    InvoiceItemId,
    ParseIdError,
    PlanId,
    ProductId,
    StripeId,
    SubscriptionId,
    SubscriptionItemId,
    TaxRateId,
)
from .params import (
    Deleted,
    Expand,
    Expandable,
    ExpandableId,
    ExpandableObject,
    Headers,
    List,
    Metadata,
    Object,
    RangeBounds,
    RangeQuery,
    Timestamp,
    Unrecognized,
    paginate,
    parse_enum,
    to_timestamp,
)
from .webhook import Event, EventData, EventType, Webhook

__all__ = [
    "ChargeId",
    "Client",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "Currency",
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
    "InvoiceId",
    "InvoiceItemId",
    "List",
    "Metadata",
    "Object",
    "ParseIdError",
    "PlanId",
    "ProductId",
    "RangeBounds",
    "RangeQuery",
    "RequestError",
    "RequestTimeoutError",
    "StripeError",
    "StripeId",
    "SubscriptionId",
    "SubscriptionItemId",
    "TaxRateId",
    "Timestamp",
    "TransportError",
    "UnexpectedError",
    "Unrecognized",
    "Webhook",
    "WebhookError",
    "WebhookErrorKind",
    "build_environment",
    "encode_query",
    "flatten_params",
    "load_client_config",
    "load_env_file",
    "paginate",
    "parse_currency",
    "parse_enum",
    "to_timestamp",
]
