"""
Public, high-level helpers for building clients and handling webhooks.
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

import requests

from .core.client import Client
from .core.config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .core.webhook import DEFAULT_TOLERANCE_SECONDS, Event, Webhook

__all__ = ["construct_event", "create_client"]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    secret_key: Optional[str] = None,
    api_base: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
    stripe_version: Optional[str] = None,
    stripe_account: Optional[str] = None,
    client_id: Optional[str] = None,
    webhook_secret: Optional[str] = None,
) -> Client:
    """
    Construct a :class:`Client`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            secret_key,
            api_base,
            timeout_seconds,
            stripe_version,
            stripe_account,
            client_id,
            webhook_secret,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            secret_key=secret_key,
            api_base=api_base,
            timeout_seconds=timeout_seconds,
            stripe_version=stripe_version,
            stripe_account=stripe_account,
            client_id=client_id,
            webhook_secret=webhook_secret,
        )
    return Client(cfg, session=session)


def construct_event(
    payload: Union[str, bytes],
    sig_header: str,
    *,
    secret: Optional[str] = None,
    config: Optional[ClientConfig] = None,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
) -> Event:
    """
    Verify and parse a webhook delivery.

    The signing secret comes from ``secret`` or, failing that, from
    ``config.webhook_secret``.
    """
    if secret is None and config is not None:
        secret = config.webhook_secret
    if not secret:
        raise ConfigError("A webhook signing secret (STRIPE_WEBHOOK_SECRET) is required")
    return Webhook.construct_event(payload, sig_header, secret, tolerance=tolerance)
