"""Tests for webhook signature verification."""

import hashlib
import hmac
import json

import pytest

from stripe_bindings import (
    EventType,
    InvoiceItem,
    Unrecognized,
    Webhook,
    WebhookError,
    WebhookErrorKind,
)

SECRET = "whsec_test_secret"
NOW = 1_700_000_000

PAYLOAD = json.dumps(
    {
        "id": "evt_1",
        "object": "event",
        "type": "invoiceitem.created",
        "created": NOW,
        "livemode": False,
        "api_version": "2019-03-14",
        "data": {
            "object": {
                "id": "ii_1",
                "object": "invoiceitem",
                "amount": 1095,
                "currency": "cad",
                "customer": "cus_1",
            }
        },
    }
)


def _header(payload=PAYLOAD, secret=SECRET, timestamp=NOW):
    return Webhook.generate_header(payload, secret, timestamp=timestamp)


class TestSignature:
    def test_compute_signature_matches_hmac_sha256(self):
        expected = hmac.new(
            SECRET.encode(), f"{NOW}.{PAYLOAD}".encode(), hashlib.sha256
        ).hexdigest()
        assert Webhook.compute_signature(PAYLOAD, SECRET, NOW) == expected

    def test_header_format(self):
        header = _header()
        assert header.startswith(f"t={NOW},v1=")

    def test_valid_signature(self):
        assert Webhook.verify_header(PAYLOAD, _header(), SECRET, now=NOW + 10) == NOW

    def test_bytes_payload(self):
        assert Webhook.verify_header(PAYLOAD.encode(), _header(), SECRET, now=NOW) == NOW

    def test_one_altered_byte_fails(self):
        tampered = PAYLOAD.replace("1095", "1096")
        with pytest.raises(WebhookError) as exc_info:
            Webhook.verify_header(tampered, _header(), SECRET, now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_SIGNATURE

    def test_wrong_secret_fails(self):
        with pytest.raises(WebhookError) as exc_info:
            Webhook.verify_header(PAYLOAD, _header(secret="whsec_other"), SECRET, now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_SIGNATURE

    @pytest.mark.parametrize("skew", [301, -301, 10_000])
    def test_timestamp_outside_tolerance_fails(self, skew):
        with pytest.raises(WebhookError) as exc_info:
            Webhook.verify_header(PAYLOAD, _header(), SECRET, now=NOW + skew)
        assert exc_info.value.kind is WebhookErrorKind.BAD_TIMESTAMP

    def test_timestamp_at_tolerance_edge_passes(self):
        assert Webhook.verify_header(PAYLOAD, _header(), SECRET, now=NOW + 300) == NOW

    def test_custom_tolerance(self):
        with pytest.raises(WebhookError):
            Webhook.verify_header(PAYLOAD, _header(), SECRET, tolerance=5, now=NOW + 6)

    def test_any_v1_signature_may_match(self):
        good = Webhook.compute_signature(PAYLOAD, SECRET, NOW)
        header = f"t={NOW},v1={'0' * 64},v1={good},v0=legacy"
        assert Webhook.verify_header(PAYLOAD, header, SECRET, now=NOW) == NOW

    @pytest.mark.parametrize(
        "header",
        ["", "garbage", f"v1={'a' * 64}", f"t={NOW}", f"t=yesterday,v1={'a' * 64}"],
    )
    def test_malformed_header(self, header):
        with pytest.raises(WebhookError) as exc_info:
            Webhook.verify_header(PAYLOAD, header, SECRET, now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_HEADER

    def test_empty_secret_fails_closed(self):
        with pytest.raises(WebhookError) as exc_info:
            Webhook.verify_header(PAYLOAD, _header(), "", now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_KEY


class TestConstructEvent:
    def test_parses_event(self):
        event = Webhook.construct_event(PAYLOAD, _header(), SECRET, now=NOW)
        assert event.id == "evt_1"
        assert event.type is EventType.INVOICE_ITEM_CREATED
        assert event.created == NOW
        assert event.api_version == "2019-03-14"
        assert event.data.previous_attributes == {}

        item = event.data.object_as(InvoiceItem.from_response)
        assert item.id == "ii_1"
        assert item.amount == 1095

    def test_unknown_event_type_is_kept(self):
        payload = PAYLOAD.replace("invoiceitem.created", "invoiceitem.teleported")
        event = Webhook.construct_event(payload, _header(payload), SECRET, now=NOW)
        assert event.type == Unrecognized("invoiceitem.teleported")

    def test_signed_but_invalid_json(self):
        payload = "{not json"
        with pytest.raises(WebhookError) as exc_info:
            Webhook.construct_event(payload, _header(payload), SECRET, now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_PARSE

    def test_signed_but_not_an_event(self):
        payload = json.dumps({"id": "evt_1"})
        with pytest.raises(WebhookError) as exc_info:
            Webhook.construct_event(payload, _header(payload), SECRET, now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_PARSE

    def test_bad_signature_is_checked_before_parsing(self):
        with pytest.raises(WebhookError) as exc_info:
            Webhook.construct_event("{not json", _header(), SECRET, now=NOW)
        assert exc_info.value.kind is WebhookErrorKind.BAD_SIGNATURE
