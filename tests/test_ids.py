"""Tests for prefix-typed identifiers."""

import pytest

from stripe_bindings import (
    CustomerId,
    InvoiceId,
    InvoiceItemId,
    ParseIdError,
    PlanId,
    StripeId,
)


class TestStripeId:
    def test_parses_matching_prefix(self):
        item_id = InvoiceItemId("ii_1Eu3qA2eZvKYlo2C")
        assert item_id == "ii_1Eu3qA2eZvKYlo2C"
        assert isinstance(item_id, str)
        assert isinstance(item_id, StripeId)
        assert item_id.prefix == "ii_"

    def test_rejects_wrong_prefix(self):
        with pytest.raises(ParseIdError) as exc_info:
            InvoiceItemId("in_1Eu3qA2eZvKYlo2C")
        assert exc_info.value.typename == "InvoiceItemId"
        assert exc_info.value.expected == ("ii_",)
        assert "ii_" in str(exc_info.value)

    def test_rejects_empty_string(self):
        with pytest.raises(ParseIdError):
            CustomerId("")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            CustomerId("ii_123")

    def test_kinds_are_distinct_types(self):
        invoice_id = InvoiceId("in_123")
        assert not isinstance(invoice_id, InvoiceItemId)
        with pytest.raises(ParseIdError):
            InvoiceItemId(invoice_id)

    def test_plan_id_accepts_any_non_empty_value(self):
        assert PlanId("gold-monthly") == "gold-monthly"

    def test_serializes_as_plain_string(self):
        customer_id = CustomerId("cus_123")
        assert str(customer_id) == "cus_123"
        assert type(str(customer_id)) is str
        assert f"/customers/{customer_id}" == "/customers/cus_123"

    def test_repr_names_the_kind(self):
        assert repr(CustomerId("cus_123")) == "CustomerId('cus_123')"

    def test_hashable_and_equal_to_string(self):
        assert {CustomerId("cus_1"): 1}["cus_1"] == 1
