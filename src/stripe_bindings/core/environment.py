"""
Resolve the settings a :class:`~stripe_bindings.core.config.ClientConfig` is
built from.

Sources are layered: the process environment (or an explicit ``base``), then a
``.env`` file that only fills gaps, then explicit overrides that always win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

__all__ = ["ClientEnvironment", "build_environment", "load_env_file", "parse_env_file"]

_QUOTES = ("'", '"')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    # Trailing comments are only stripped from unquoted values.
    if " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return value


def parse_env_file(path: Path) -> Dict[str, str]:
    """Read ``KEY=VALUE`` lines; a missing file yields an empty mapping."""
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue
        values[key] = _unquote(value.strip())
    return values


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy the variables in ``path`` into ``environ`` (default :data:`os.environ`)
    without replacing keys that are already set.
    """
    target: MutableMapping[str, str] = environ if environ is not None else os.environ
    for key, value in parse_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class ClientEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.variables.get(key)
        if value is None or value == "":
            return default
        return value

    def with_prefix(self, prefix: str) -> Dict[str, str]:
        return {
            key: value for key, value in self.variables.items() if key.startswith(prefix)
        }


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> ClientEnvironment:
    """
    ``base`` defaults to :data:`os.environ`; pass ``env_file=None`` to skip the
    file entirely.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return ClientEnvironment(variables=merged)
