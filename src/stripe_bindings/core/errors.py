"""
Error taxonomy shared by every API operation.

Each failure surfaces as exactly one :class:`StripeError` subclass. Nothing is
retried and nothing is swallowed at this layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Union

from .params import Unrecognized, parse_enum

__all__ = [
    "DecodeError",
    "EncodeError",
    "ErrorCode",
    "ErrorType",
    "RequestError",
    "RequestTimeoutError",
    "StripeError",
    "TransportError",
    "UnexpectedError",
    "WebhookError",
    "WebhookErrorKind",
]


class ErrorType(str, Enum):
    API = "api_error"
    API_CONNECTION = "api_connection_error"
    AUTHENTICATION = "authentication_error"
    CARD = "card_error"
    IDEMPOTENCY = "idempotency_error"
    INVALID_REQUEST = "invalid_request_error"
    RATE_LIMIT = "rate_limit_error"
    VALIDATION = "validation_error"


class ErrorCode(str, Enum):
    ACCOUNT_ALREADY_EXISTS = "account_already_exists"
    ACCOUNT_COUNTRY_INVALID_ADDRESS = "account_country_invalid_address"
    ACCOUNT_INVALID = "account_invalid"
    ACCOUNT_NUMBER_INVALID = "account_number_invalid"
    ALIPAY_UPGRADE_REQUIRED = "alipay_upgrade_required"
    AMOUNT_TOO_LARGE = "amount_too_large"
    AMOUNT_TOO_SMALL = "amount_too_small"
    API_KEY_EXPIRED = "api_key_expired"
    BALANCE_INSUFFICIENT = "balance_insufficient"
    BANK_ACCOUNT_EXISTS = "bank_account_exists"
    BANK_ACCOUNT_UNUSABLE = "bank_account_unusable"
    BANK_ACCOUNT_UNVERIFIED = "bank_account_unverified"
    BITCOIN_UPGRADE_REQUIRED = "bitcoin_upgrade_required"
    CARD_DECLINED = "card_declined"
    CHARGE_ALREADY_CAPTURED = "charge_already_captured"
    CHARGE_ALREADY_REFUNDED = "charge_already_refunded"
    CHARGE_DISPUTED = "charge_disputed"
    CHARGE_EXCEEDS_SOURCE_LIMIT = "charge_exceeds_source_limit"
    CHARGE_EXPIRED_FOR_CAPTURE = "charge_expired_for_capture"
    COUNTRY_UNSUPPORTED = "country_unsupported"
    COUPON_EXPIRED = "coupon_expired"
    CUSTOMER_MAX_SUBSCRIPTIONS = "customer_max_subscriptions"
    EMAIL_INVALID = "email_invalid"
    EXPIRED_CARD = "expired_card"
    IDEMPOTENCY_KEY_IN_USE = "idempotency_key_in_use"
    INCORRECT_ADDRESS = "incorrect_address"
    INCORRECT_CVC = "incorrect_cvc"
    INCORRECT_NUMBER = "incorrect_number"
    INCORRECT_ZIP = "incorrect_zip"
    INSTANT_PAYOUTS_UNSUPPORTED = "instant_payouts_unsupported"
    INVALID_CARD_TYPE = "invalid_card_type"
    INVALID_CHARGE_AMOUNT = "invalid_charge_amount"
    INVALID_CVC = "invalid_cvc"
    INVALID_EXPIRY_MONTH = "invalid_expiry_month"
    INVALID_EXPIRY_YEAR = "invalid_expiry_year"
    INVALID_NUMBER = "invalid_number"
    INVALID_SOURCE_USAGE = "invalid_source_usage"
    INVOICE_NO_CUSTOMER_LINE_ITEMS = "invoice_no_customer_line_items"
    INVOICE_NO_SUBSCRIPTION_LINE_ITEMS = "invoice_no_subscription_line_items"
    INVOICE_NOT_EDITABLE = "invoice_not_editable"
    INVOICE_UPCOMING_NONE = "invoice_upcoming_none"
    LIVEMODE_MISMATCH = "livemode_mismatch"
    MISSING = "missing"
    NOT_ALLOWED_ON_STANDARD_ACCOUNT = "not_allowed_on_standard_account"
    ORDER_CREATION_FAILED = "order_creation_failed"
    ORDER_REQUIRED_SETTINGS = "order_required_settings"
    ORDER_STATUS_INVALID = "order_status_invalid"
    ORDER_UPSTREAM_TIMEOUT = "order_upstream_timeout"
    OUT_OF_INVENTORY = "out_of_inventory"
    PARAMETER_INVALID_EMPTY = "parameter_invalid_empty"
    PARAMETER_INVALID_INTEGER = "parameter_invalid_integer"
    PARAMETER_INVALID_STRING_BLANK = "parameter_invalid_string_blank"
    PARAMETER_INVALID_STRING_EMPTY = "parameter_invalid_string_empty"
    PARAMETER_MISSING = "parameter_missing"
    PARAMETER_UNKNOWN = "parameter_unknown"
    PARAMETERS_EXCLUSIVE = "parameters_exclusive"
    PAYMENT_INTENT_AUTHENTICATION_FAILURE = "payment_intent_authentication_failure"
    PAYMENT_INTENT_INCOMPATIBLE_PAYMENT_METHOD = "payment_intent_incompatible_payment_method"
    PAYMENT_INTENT_INVALID_PARAMETER = "payment_intent_invalid_parameter"
    PAYMENT_INTENT_PAYMENT_ATTEMPT_FAILED = "payment_intent_payment_attempt_failed"
    PAYMENT_INTENT_UNEXPECTED_STATE = "payment_intent_unexpected_state"
    PAYMENT_METHOD_UNACTIVATED = "payment_method_unactivated"
    PAYMENT_METHOD_UNEXPECTED_STATE = "payment_method_unexpected_state"
    PAYOUTS_NOT_ALLOWED = "payouts_not_allowed"
    PLATFORM_API_KEY_EXPIRED = "platform_api_key_expired"
    POSTAL_CODE_INVALID = "postal_code_invalid"
    PROCESSING_ERROR = "processing_error"
    PRODUCT_INACTIVE = "product_inactive"
    RATE_LIMIT = "rate_limit"
    RESOURCE_ALREADY_EXISTS = "resource_already_exists"
    RESOURCE_MISSING = "resource_missing"
    ROUTING_NUMBER_INVALID = "routing_number_invalid"
    SECRET_KEY_REQUIRED = "secret_key_required"
    SEPA_UNSUPPORTED_ACCOUNT = "sepa_unsupported_account"
    SHIPPING_CALCULATION_FAILED = "shipping_calculation_failed"
    SKU_INACTIVE = "sku_inactive"
    STATE_UNSUPPORTED = "state_unsupported"
    TAX_ID_INVALID = "tax_id_invalid"
    TAXES_CALCULATION_FAILED = "taxes_calculation_failed"
    TESTMODE_CHARGES_ONLY = "testmode_charges_only"
    TLS_VERSION_UNSUPPORTED = "tls_version_unsupported"
    TOKEN_ALREADY_USED = "token_already_used"
    TOKEN_IN_USE = "token_in_use"
    TRANSFERS_NOT_ALLOWED = "transfers_not_allowed"
    UPSTREAM_ORDER_CREATION_FAILED = "upstream_order_creation_failed"
    URL_INVALID = "url_invalid"


class StripeError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RequestError(StripeError):
    """The API received the request and rejected it."""

    def __init__(
        self,
        message: Optional[str],
        *,
        http_status: int,
        error_type: Union[ErrorType, Unrecognized, None] = None,
        code: Union[ErrorCode, Unrecognized, None] = None,
        param: Optional[str] = None,
        decline_code: Optional[str] = None,
        charge: Optional[str] = None,
        doc_url: Optional[str] = None,
        raw: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message or f"request failed with status {http_status}")
        self.http_status = http_status
        self.error_type = error_type
        self.code = code
        self.param = param
        self.decline_code = decline_code
        self.charge = charge
        self.doc_url = doc_url
        self.raw = dict(raw or {})

    @classmethod
    def from_response(cls, http_status: int, payload: Mapping[str, Any]) -> "RequestError":
        """Build the error from a ``{"error": {...}}`` response body."""
        body = payload["error"]
        if not isinstance(body, Mapping):
            raise TypeError("the 'error' member of the response is not an object")
        return cls(
            body.get("message"),
            http_status=http_status,
            error_type=parse_enum(ErrorType, body.get("type")),
            code=parse_enum(ErrorCode, body.get("code")),
            param=body.get("param"),
            decline_code=body.get("decline_code"),
            charge=body.get("charge"),
            doc_url=body.get("doc_url"),
            raw=body,
        )

    def __str__(self) -> str:
        kind = self.error_type.value if self.error_type is not None else "error"
        detail = f"{kind} ({self.http_status}): {self.message}"
        if self.param:
            detail += f" [param: {self.param}]"
        return detail


class TransportError(StripeError):
    """The request never produced an HTTP response."""


class RequestTimeoutError(TransportError):
    pass


class DecodeError(StripeError):
    """A response body could not be decoded into the expected shape."""

    def __init__(self, message: str, *, http_status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.http_status = http_status
        self.body = body


class EncodeError(StripeError):
    """Request parameters could not be serialized."""


class UnexpectedError(StripeError):
    """The API answered with a status that is neither success nor an error (1xx, 3xx)."""

    def __init__(self, message: str, *, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class WebhookErrorKind(str, Enum):
    BAD_KEY = "bad_key"
    BAD_HEADER = "bad_header"
    BAD_SIGNATURE = "bad_signature"
    BAD_TIMESTAMP = "bad_timestamp"
    BAD_PARSE = "bad_parse"


class WebhookError(StripeError):
    """Webhook payload failed signature verification or could not be parsed."""

    def __init__(self, kind: WebhookErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
