"""
Prefix-typed identifiers for Stripe objects.

Every identifier is a ``str`` subclass, so it can be passed anywhere a plain
string is expected, while still rejecting identifiers of the wrong kind at
construction time.
"""

from __future__ import annotations

from typing import ClassVar, Tuple

__all__ = [
    "ChargeId",
    "CustomerId",
    "EventId",
    "InvoiceId",
    "InvoiceItemId",
    "ParseIdError",
    "PlanId",
    "ProductId",
    "StripeId",
    "SubscriptionId",
    "SubscriptionItemId",
    "TaxRateId",
]


class ParseIdError(ValueError):
    """Raised when a string does not carry the prefix its id type requires."""

    def __init__(self, typename: str, expected: Tuple[str, ...], value: str) -> None:
        self.typename = typename
        self.expected = expected
        self.value = value
        prefixes = " or ".join(repr(prefix) for prefix in expected)
        super().__init__(
            f"invalid {typename}: expected id to start with {prefixes}, got {value!r}"
        )


class StripeId(str):
    prefixes: ClassVar[Tuple[str, ...]] = ()

    def __new__(cls, value: str) -> "StripeId":
        value = str(value)
        if not value:
            raise ParseIdError(cls.__name__, cls.prefixes or ("",), value)
        if cls.prefixes and not value.startswith(cls.prefixes):
            raise ParseIdError(cls.__name__, cls.prefixes, value)
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"

    @property
    def prefix(self) -> str:
        for prefix in self.prefixes:
            if self.startswith(prefix):
                return prefix
        return ""


class ChargeId(StripeId):
    prefixes = ("ch_", "py_")


class CustomerId(StripeId):
    prefixes = ("cus_",)


class EventId(StripeId):
    prefixes = ("evt_",)


class InvoiceId(StripeId):
    prefixes = ("in_",)


class InvoiceItemId(StripeId):
    prefixes = ("ii_",)


# Plans created in the dashboard may carry arbitrary ids.
class PlanId(StripeId):
    prefixes = ()


class ProductId(StripeId):
    prefixes = ("prod_",)


class SubscriptionId(StripeId):
    prefixes = ("sub_",)


class SubscriptionItemId(StripeId):
    prefixes = ("si_",)


class TaxRateId(StripeId):
    prefixes = ("txr_",)
