"""
Form and query-string encoding for request parameters.

Nested values are flattened with bracket notation: ``{"metadata": {"k": "v"}}``
becomes ``metadata[k]=v`` and ``{"expand": ["a", "b"]}`` becomes
``expand[0]=a&expand[1]=b``. Unset (``None``) values and empty collections are
left out of the request entirely.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from .errors import EncodeError
from .params import Expandable, RangeQuery, Unrecognized, to_timestamp

__all__ = ["encode_query", "flatten_params", "to_params"]


def to_params(obj: Any) -> Dict[str, Any]:
    """
    Turn a parameter object into a plain mapping.

    Objects may define ``to_params()``; dataclasses are otherwise converted
    field by field (shallowly, so nested values keep their types).
    """
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    to_params_method = getattr(obj, "to_params", None)
    if callable(to_params_method):
        return dict(to_params_method())
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise EncodeError(f"cannot encode parameters of type {type(obj).__name__}")


def _scalar(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Unrecognized):
        return value.value
    if isinstance(value, datetime):
        return str(to_timestamp(value))
    if isinstance(value, (str, int, Decimal)):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return None


def _flatten(prefix: str, value: Any, pairs: List[Tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Expandable):
        pairs.append((prefix, str(value.id)))
        return
    if isinstance(value, RangeQuery):
        _flatten(prefix, value.to_param(), pairs)
        return

    scalar = _scalar(value)
    if scalar is not None:
        pairs.append((prefix, scalar))
        return

    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, pairs)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, pairs)
        return
    if hasattr(value, "to_params") or dataclasses.is_dataclass(value):
        _flatten(prefix, to_params(value), pairs)
        return

    raise EncodeError(
        f"cannot encode value of type {type(value).__name__} for parameter '{prefix}'"
    )


def flatten_params(params: Any) -> List[Tuple[str, str]]:
    """Flatten a parameter object or mapping into ordered ``(key, value)`` pairs."""
    pairs: List[Tuple[str, str]] = []
    for key, value in to_params(params).items():
        _flatten(str(key), value, pairs)
    return pairs


def encode_query(params: Any) -> str:
    return urlencode(flatten_params(params))
