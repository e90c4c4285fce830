"""
Shared test fixtures.

Nothing here touches the network: sessions are stand-ins for
:class:`requests.Session` that hand back canned :class:`requests.Response`
objects.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import pytest
import requests

from stripe_bindings import Client, ClientConfig


TEST_SECRET_KEY = "sk_test_4eC39HqLyjWDarjtT1zdp7dc"
TEST_API_BASE = "https://api.stripe.test/v1"


def make_response(
    status_code: int,
    payload: Any = None,
    *,
    text: Optional[str] = None,
    url: str = TEST_API_BASE,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    body = text if text is not None else json.dumps(payload)
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    response.url = url
    return response


def error_response(status_code: int, error_type: str, message: str, **extra: Any) -> requests.Response:
    return make_response(status_code, {"error": {"type": error_type, "message": message, **extra}})


class RecordingSession:
    """Returns queued responses (or raises queued exceptions) and records each call."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def queue(self, response: Any) -> None:
        self.responses.append(response)

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "data": data,
                "headers": headers or {},
                "timeout": timeout,
            }
        )
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def last_call(self) -> Dict[str, Any]:
        return self.calls[-1]


def _pairs_to_dict(pairs: Optional[List[Tuple[str, str]]]) -> Dict[str, str]:
    return dict(pairs or [])


def _nested(values: Dict[str, str], name: str) -> Dict[str, str]:
    prefix = f"{name}["
    return {
        key[len(prefix):-1]: value
        for key, value in values.items()
        if key.startswith(prefix) and key.endswith("]")
    }


class FakeStripeSession:
    """
    A tiny in-memory imitation of the invoice item endpoints.

    Items are listed newest first and paginated with ``starting_after`` /
    ``ending_before`` cursors, like the real API.
    """

    def __init__(self, secret_key: str = TEST_SECRET_KEY, api_base: str = TEST_API_BASE) -> None:
        self.secret_key = secret_key
        self.base_path = urlsplit(api_base).path.rstrip("/")
        self.items: Dict[str, Dict[str, Any]] = {}
        self.order: List[str] = []
        self.calls: List[Tuple[str, str]] = []
        self._counter = 0

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        self.calls.append((method, url))
        if (headers or {}).get("Authorization") != f"Bearer {self.secret_key}":
            return error_response(401, "authentication_error", "Invalid API Key provided")

        path = urlsplit(url).path[len(self.base_path):]
        parts = [part for part in path.split("/") if part]
        if not parts or parts[0] != "invoiceitems":
            return error_response(404, "invalid_request_error", f"Unrecognized request URL ({path})")

        query = _pairs_to_dict(params)
        form = _pairs_to_dict(data)
        if len(parts) == 1:
            if method == "GET":
                return self._list(query)
            if method == "POST":
                return self._create(form)
        elif len(parts) == 2:
            item_id = parts[1]
            if item_id not in self.items:
                return error_response(
                    404,
                    "invalid_request_error",
                    f"No such invoiceitem: '{item_id}'",
                    code="resource_missing",
                    param="id",
                )
            if method == "GET":
                return make_response(200, self._render(self.items[item_id], query))
            if method == "POST":
                return self._update(item_id, form)
            if method == "DELETE":
                del self.items[item_id]
                self.order.remove(item_id)
                return make_response(200, {"id": item_id, "object": "invoiceitem", "deleted": True})
        return error_response(405, "invalid_request_error", "Method not allowed")

    def _render(self, item: Dict[str, Any], query: Dict[str, str]) -> Dict[str, Any]:
        rendered = dict(item)
        expand = set(_nested(query, "expand").values())
        if "customer" in expand:
            rendered["customer"] = {
                "id": item["customer"],
                "object": "customer",
                "email": "jenny.rosen@example.com",
            }
        return rendered

    def _create(self, form: Dict[str, str]) -> requests.Response:
        for required in ("currency", "customer"):
            if required not in form:
                return error_response(
                    400,
                    "invalid_request_error",
                    f"Missing required param: {required}.",
                    code="parameter_missing",
                    param=required,
                )
        self._counter += 1
        item_id = f"ii_{self._counter:06d}"
        quantity = int(form.get("quantity", "1"))
        unit_amount = int(form["unit_amount"]) if "unit_amount" in form else None
        amount = int(form["amount"]) if "amount" in form else (unit_amount or 0) * quantity
        item = {
            "id": item_id,
            "object": "invoiceitem",
            "amount": amount,
            "currency": form["currency"],
            "customer": form["customer"],
            "date": 1_700_000_000 + self._counter,
            "description": form.get("description"),
            "discountable": form.get("discountable", "true") == "true",
            "invoice": form.get("invoice"),
            "livemode": False,
            "metadata": _nested(form, "metadata"),
            "period": {"start": 1_700_000_000, "end": 1_700_000_000},
            "plan": None,
            "proration": False,
            "quantity": quantity,
            "subscription": form.get("subscription"),
            "tax_rates": [],
            "unit_amount": unit_amount if unit_amount is not None else amount,
            "unit_amount_decimal": str(amount),
        }
        self.items[item_id] = item
        self.order.insert(0, item_id)
        return make_response(200, self._render(item, form))

    def _update(self, item_id: str, form: Dict[str, str]) -> requests.Response:
        item = self.items[item_id]
        for key in ("amount", "quantity", "unit_amount"):
            if key in form:
                item[key] = int(form[key])
        if "description" in form:
            item["description"] = form["description"]
        item["metadata"].update(_nested(form, "metadata"))
        return make_response(200, self._render(item, form))

    def _list(self, query: Dict[str, str]) -> requests.Response:
        ids = [
            item_id
            for item_id in self.order
            if "customer" not in query or self.items[item_id]["customer"] == query["customer"]
        ]
        limit = int(query.get("limit", "10"))
        if "starting_after" in query:
            cursor = query["starting_after"]
            start = ids.index(cursor) + 1 if cursor in ids else len(ids)
            window = ids[start:]
            page = window[:limit]
            has_more = len(window) > limit
        elif "ending_before" in query:
            cursor = query["ending_before"]
            end = ids.index(cursor) if cursor in ids else 0
            window = ids[:end]
            page = window[-limit:]
            has_more = len(window) > limit
        else:
            page = ids[:limit]
            has_more = len(ids) > limit
        return make_response(
            200,
            {
                "object": "list",
                "url": "/v1/invoiceitems",
                "has_more": has_more,
                "data": [self._render(self.items[item_id], query) for item_id in page],
            },
        )


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(secret_key=TEST_SECRET_KEY, api_base=TEST_API_BASE)


@pytest.fixture
def session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture
def client(config: ClientConfig, session: RecordingSession) -> Client:
    return Client(config, session=session)


@pytest.fixture
def fake_stripe() -> FakeStripeSession:
    return FakeStripeSession()


@pytest.fixture
def stripe_client(config: ClientConfig, fake_stripe: FakeStripeSession) -> Client:
    return Client(config, session=fake_stripe)
