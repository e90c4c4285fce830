"""
Client configuration.

A :class:`ClientConfig` is built once and passed explicitly to every
:class:`~stripe_bindings.core.client.Client`; nothing here reads global state
after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .environment import build_environment
from .params import Headers

__all__ = [
    "DEFAULT_API_BASE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "load_client_config",
]

DEFAULT_API_BASE = "https://api.stripe.com/v1"
DEFAULT_TIMEOUT_SECONDS = 80

_PARAMETER_TO_ENV_KEY = {
    "secret_key": "STRIPE_SECRET_KEY",
    "api_base": "STRIPE_API_BASE",
    "timeout_seconds": "STRIPE_TIMEOUT_SECONDS",
    "stripe_version": "STRIPE_VERSION",
    "stripe_account": "STRIPE_ACCOUNT",
    "client_id": "STRIPE_CLIENT_ID",
    "webhook_secret": "STRIPE_WEBHOOK_SECRET",
}

_SECRET_KEY_PREFIXES = ("sk_", "rk_")


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Equivalent to passing the same keyword arguments to
    :func:`load_client_config`.
    """

    secret_key: Optional[str] = None
    api_base: Optional[str] = None
    timeout_seconds: Optional[int | str] = None
    stripe_version: Optional[str] = None
    stripe_account: Optional[str] = None
    client_id: Optional[str] = None
    webhook_secret: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _normalize_secret_key(raw_key: Optional[str]) -> str:
    if raw_key is None:
        raise ConfigError("STRIPE_SECRET_KEY must be provided")
    key = raw_key.strip()
    if not key:
        raise ConfigError("STRIPE_SECRET_KEY must not be empty")
    if not key.startswith(_SECRET_KEY_PREFIXES):
        raise ConfigError(
            "STRIPE_SECRET_KEY must be a secret or restricted key (sk_... or rk_...)"
        )
    return key


def _normalize_api_base(raw_base: str) -> str:
    value = raw_base.strip().rstrip("/")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"STRIPE_API_BASE is not a valid URL: '{raw_base}'")
    return value


def _prefer(value: Optional[str], current: Optional[str]) -> Optional[str]:
    return current if value is None else value


def _parse_timeout(raw_timeout: int | str) -> int:
    try:
        timeout = int(raw_timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"STRIPE_TIMEOUT_SECONDS must be an integer, got '{raw_timeout}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("STRIPE_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    """Checked and normalized on construction, however it is built."""

    secret_key: str
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    stripe_version: Optional[str] = None
    stripe_account: Optional[str] = None
    client_id: Optional[str] = None
    webhook_secret: Optional[str] = None
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "secret_key", _normalize_secret_key(self.secret_key))
        object.__setattr__(self, "api_base", _normalize_api_base(self.api_base))
        object.__setattr__(self, "timeout_seconds", _parse_timeout(self.timeout_seconds))
        object.__setattr__(self, "extra_headers", dict(self.extra_headers))

    def __repr__(self) -> str:
        return (
            f"ClientConfig(secret_key='{self.redacted_key}', api_base={self.api_base!r}, "
            f"timeout_seconds={self.timeout_seconds}, stripe_version={self.stripe_version!r}, "
            f"stripe_account={self.stripe_account!r}, client_id={self.client_id!r})"
        )

    @property
    def redacted_key(self) -> str:
        return self.secret_key[:8] + "..." if len(self.secret_key) > 8 else "***"

    @property
    def headers(self) -> Headers:
        return Headers(
            stripe_account=self.stripe_account,
            client_id=self.client_id,
            stripe_version=self.stripe_version,
            extra=dict(self.extra_headers),
        )

    def with_headers(self, headers: Headers) -> "ClientConfig":
        """
        Layer ``headers`` over the current ones. Fields left as ``None`` keep
        their current value; ``extra`` entries are added or replaced by name.
        """
        return replace(
            self,
            stripe_account=_prefer(headers.stripe_account, self.stripe_account),
            client_id=_prefer(headers.client_id, self.client_id),
            stripe_version=_prefer(headers.stripe_version, self.stripe_version),
            extra_headers={**self.extra_headers, **headers.extra},
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        def _get(key: str) -> Optional[str]:
            value = values.get(key)
            return value if value else None

        return cls(
            secret_key=_get("STRIPE_SECRET_KEY"),  # type: ignore[arg-type]
            api_base=_get("STRIPE_API_BASE") or DEFAULT_API_BASE,
            timeout_seconds=_get("STRIPE_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS,  # type: ignore[arg-type]
            stripe_version=_get("STRIPE_VERSION"),
            stripe_account=_get("STRIPE_ACCOUNT"),
            client_id=_get("STRIPE_CLIENT_ID"),
            webhook_secret=_get("STRIPE_WEBHOOK_SECRET"),
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "secret_key": secret_key,
                "api_base": api_base,
                "timeout_seconds": timeout_seconds,
                "stripe_version": stripe_version,
                "stripe_account": stripe_account,
                "client_id": client_id,
                "webhook_secret": webhook_secret,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.with_prefix("STRIPE_"))


def load_client_config(
    *,
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
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Settings may come from environment variables, a ``.env`` file, keyword
    arguments, or any combination; keyword arguments take precedence.
    """
    return ClientConfig.from_env(
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
