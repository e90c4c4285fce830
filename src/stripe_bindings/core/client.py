"""
HTTP client for the Stripe API.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple, TypeVar

import requests

from .config import ClientConfig
from .encoding import flatten_params
from .errors import (
    DecodeError,
    RequestError,
    RequestTimeoutError,
    TransportError,
    UnexpectedError,
)
from .params import Headers

__all__ = ["Client", "USER_AGENT"]

T = TypeVar("T")

Decoder = Callable[[Any], T]

USER_AGENT = "stripe-bindings/0.1.0"


def _parse_json(response: requests.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(
            f"Failed to parse JSON from {url} (status {response.status_code})",
            http_status=response.status_code,
            body=response.text,
        ) from exc


def _raise_for_error(response: requests.Response, url: str) -> None:
    status = response.status_code
    if 200 <= status < 300:
        return
    if status < 400 or status >= 600:
        raise UnexpectedError(
            f"Unexpected status {status} from {url}", http_status=status
        )

    payload = _parse_json(response, url)
    try:
        error = RequestError.from_response(status, payload)
    except (KeyError, TypeError) as exc:
        raise DecodeError(
            f"Unrecognized error body from {url} (status {status})",
            http_status=status,
            body=response.text,
        ) from exc

    logging.warning("Stripe rejected request to %s: %s", url, error)
    raise error


def _decode_response(response: requests.Response, url: str, decode: Decoder[T]) -> T:
    _raise_for_error(response, url)
    payload = _parse_json(response, url)
    try:
        return decode(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(
            f"Response from {url} does not match the expected shape: {exc}",
            http_status=response.status_code,
            body=response.text,
        ) from exc


class Client:
    """
    Issues authenticated requests and decodes the responses.

    The client holds no per-request state: its configuration is frozen and the
    only shared resource is the underlying :class:`requests.Session`, so one
    instance can serve many callers.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    @classmethod
    def from_secret_key(
        cls,
        secret_key: str,
        *,
        session: Optional[requests.Session] = None,
        **config_values: Any,
    ) -> "Client":
        return cls(ClientConfig(secret_key=secret_key, **config_values), session=session)

    def __repr__(self) -> str:
        return f"Client({self.config!r})"

    def with_headers(self, headers: Headers) -> "Client":
        """Return a client that sends ``headers`` on every request."""
        return Client(self.config.with_headers(headers), session=self.session)

    def with_stripe_account(self, account_id: str) -> "Client":
        return self.with_headers(Headers(stripe_account=account_id))

    def with_client_id(self, client_id: str) -> "Client":
        return self.with_headers(Headers(client_id=client_id))

    def url(self, path: str) -> str:
        return f"{self.config.api_base}/{path.lstrip('/')}"

    def request_headers(self) -> Mapping[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.secret_key}",
            "User-Agent": USER_AGENT,
        }
        headers.update(self.config.headers.to_http_headers())
        return headers

    def get(self, path: str, decode: Decoder[T]) -> T:
        return self._request("GET", path, decode)

    def get_query(self, path: str, params: Any, decode: Decoder[T]) -> T:
        return self._request("GET", path, decode, query=flatten_params(params))

    def delete(self, path: str, decode: Decoder[T]) -> T:
        return self._request("DELETE", path, decode)

    def delete_query(self, path: str, params: Any, decode: Decoder[T]) -> T:
        return self._request("DELETE", path, decode, query=flatten_params(params))

    def post(self, path: str, decode: Decoder[T]) -> T:
        return self._request("POST", path, decode)

    def post_form(self, path: str, params: Any, decode: Decoder[T]) -> T:
        return self._request("POST", path, decode, form=flatten_params(params))

    def _request(
        self,
        method: str,
        path: str,
        decode: Decoder[T],
        *,
        query: Optional[List[Tuple[str, str]]] = None,
        form: Optional[List[Tuple[str, str]]] = None,
    ) -> T:
        url = self.url(path)
        logging.info("Sending %s request to %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                params=query or None,
                data=form or None,
                headers=dict(self.request_headers()),
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise RequestTimeoutError(
                f"{method} {url} timed out after {self.config.timeout_seconds}s"
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        return _decode_response(response, url, decode)
