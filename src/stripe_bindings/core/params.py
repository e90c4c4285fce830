"""
Shared request parameters and response envelopes.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Type,
    TypeVar,
    Union,
    runtime_checkable,
)

__all__ = [
    "Deleted",
    "Expand",
    "Expandable",
    "ExpandableId",
    "ExpandableObject",
    "Headers",
    "List",
    "Metadata",
    "Object",
    "RangeBounds",
    "RangeQuery",
    "Timestamp",
    "Unrecognized",
    "paginate",
    "parse_enum",
    "to_timestamp",
]

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

Metadata = Dict[str, str]
Timestamp = int


def to_timestamp(value: Union[int, datetime]) -> Timestamp:
    """Convert ``value`` to Unix seconds; naive datetimes are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return int(value)


@runtime_checkable
class Object(Protocol):
    """Anything with an identifier and a fixed object kind tag."""

    id: Any
    object: str


@dataclass(frozen=True)
class Unrecognized:
    """An enum value returned by the API that this client does not know yet."""

    value: str

    def __str__(self) -> str:
        return self.value


def parse_enum(enum_type: Type[E], raw: Any) -> Union[E, Unrecognized, None]:
    if raw is None:
        return None
    try:
        return enum_type(raw)
    except ValueError:
        return Unrecognized(str(raw))


class Expandable(Generic[T]):
    """
    A reference that is either a bare identifier or the full object.

    The API only inlines the object when the caller asked for it through the
    ``expand`` parameter, so code must not assume :meth:`as_object` returns
    anything unless the expansion was requested.
    """

    __slots__ = ()

    @property
    def id(self) -> Any:
        raise NotImplementedError

    def is_object(self) -> bool:
        return False

    def as_object(self) -> Optional[T]:
        return None

    @staticmethod
    def decode(
        value: Any,
        id_type: Callable[[str], Any],
        object_decoder: Callable[[Mapping[str, Any]], T],
    ) -> Optional["Expandable[T]"]:
        if value is None:
            return None
        if isinstance(value, str):
            return ExpandableId(id_type(value))
        if isinstance(value, Mapping):
            return ExpandableObject(object_decoder(value))
        raise TypeError(
            f"expected an id string or an object, got {type(value).__name__}"
        )


class ExpandableId(Expandable[T]):
    __slots__ = ("_id",)

    def __init__(self, id: Any) -> None:
        self._id = id

    @property
    def id(self) -> Any:
        return self._id

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ExpandableId) and other._id == self._id

    def __hash__(self) -> int:
        return hash(("id", self._id))

    def __repr__(self) -> str:
        return f"ExpandableId({self._id!r})"


class ExpandableObject(Expandable[T]):
    __slots__ = ("_object",)

    def __init__(self, obj: T) -> None:
        self._object = obj

    @property
    def id(self) -> Any:
        return self._object.id  # type: ignore[attr-defined]

    def is_object(self) -> bool:
        return True

    def as_object(self) -> Optional[T]:
        return self._object

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ExpandableObject) and other._object == self._object

    def __hash__(self) -> int:
        return hash(("object", self.id))

    def __repr__(self) -> str:
        return f"ExpandableObject({self._object!r})"


@dataclass(frozen=True)
class List(Generic[T]):
    """
    One page of a cursor-paginated listing.

    ``has_more`` is the only reliable signal that another page exists; a page
    shorter than the requested ``limit`` does not mean the listing is over.
    """

    data: Sequence[T]
    has_more: bool
    total_count: Optional[int] = None
    url: Optional[str] = None
    object: str = "list"

    @classmethod
    def from_response(
        cls,
        payload: Mapping[str, Any],
        item_decoder: Callable[[Mapping[str, Any]], T],
    ) -> "List[T]":
        return cls(
            data=[item_decoder(item) for item in payload.get("data") or ()],
            has_more=bool(payload["has_more"]),
            total_count=payload.get("total_count"),
            url=payload.get("url"),
            object=payload.get("object", "list"),
        )

    @classmethod
    def decoder(
        cls, item_decoder: Callable[[Mapping[str, Any]], T]
    ) -> Callable[[Mapping[str, Any]], "List[T]"]:
        return lambda payload: cls.from_response(payload, item_decoder)

    def __iter__(self) -> Iterator[T]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def next_page_params(self, params: Any) -> Any:
        """
        Return a copy of ``params`` positioned after this page, or ``None``.

        ``params`` must be a dataclass with ``starting_after`` and
        ``ending_before`` fields.
        """
        if not self.has_more or not self.data:
            return None
        last = self.data[-1]
        return dataclasses.replace(
            params, starting_after=last.id, ending_before=None
        )

    def previous_page_params(self, params: Any) -> Any:
        if not self.data:
            return None
        first = self.data[0]
        return dataclasses.replace(
            params, ending_before=first.id, starting_after=None
        )


def paginate(fetch: Callable[[Any], List[T]], params: Any) -> Iterator[T]:
    """
    Yield every item across pages, following ``starting_after`` cursors.

    ``fetch`` is a list operation bound to a client, for example
    ``lambda p: InvoiceItem.list(client, p)``.
    """
    while params is not None:
        page = fetch(params)
        yield from page.data
        params = page.next_page_params(params)


@dataclass(frozen=True)
class Deleted(Generic[T]):
    """Confirmation returned by delete operations."""

    id: T
    deleted: bool = True
    object: Optional[str] = None

    @classmethod
    def from_response(
        cls, payload: Mapping[str, Any], id_type: Callable[[str], T]
    ) -> "Deleted[T]":
        return cls(
            id=id_type(payload["id"]),
            deleted=bool(payload.get("deleted", False)),
            object=payload.get("object"),
        )

    @classmethod
    def decoder(
        cls, id_type: Callable[[str], T]
    ) -> Callable[[Mapping[str, Any]], "Deleted[T]"]:
        return lambda payload: cls.from_response(payload, id_type)


@dataclass(frozen=True)
class Expand:
    """Dotted field paths the API should inline instead of returning ids."""

    expand: Sequence[str] = ()

    def is_empty(self) -> bool:
        return not self.expand

    def to_params(self) -> Dict[str, Any]:
        if self.is_empty():
            return {}
        return {"expand": list(self.expand)}


@dataclass(frozen=True)
class RangeBounds:
    gt: Optional[Timestamp] = None
    gte: Optional[Timestamp] = None
    lt: Optional[Timestamp] = None
    lte: Optional[Timestamp] = None

    def to_params(self) -> Dict[str, Timestamp]:
        bounds = {"gt": self.gt, "gte": self.gte, "lt": self.lt, "lte": self.lte}
        return {key: value for key, value in bounds.items() if value is not None}


@dataclass(frozen=True)
class RangeQuery:
    """Either an exact value or a set of bounds over a timestamp field."""

    exact: Optional[Timestamp] = None
    bounds: Optional[RangeBounds] = None

    def __post_init__(self) -> None:
        if (self.exact is None) == (self.bounds is None):
            raise ValueError("RangeQuery needs exactly one of 'exact' or 'bounds'")
        if self.bounds is not None and not self.bounds.to_params():
            raise ValueError("RangeQuery bounds must set at least one limit")

    @classmethod
    def eq(cls, value: Union[int, datetime]) -> "RangeQuery":
        return cls(exact=to_timestamp(value))

    @classmethod
    def gt(cls, value: Union[int, datetime]) -> "RangeQuery":
        return cls(bounds=RangeBounds(gt=to_timestamp(value)))

    @classmethod
    def gte(cls, value: Union[int, datetime]) -> "RangeQuery":
        return cls(bounds=RangeBounds(gte=to_timestamp(value)))

    @classmethod
    def lt(cls, value: Union[int, datetime]) -> "RangeQuery":
        return cls(bounds=RangeBounds(lt=to_timestamp(value)))

    @classmethod
    def lte(cls, value: Union[int, datetime]) -> "RangeQuery":
        return cls(bounds=RangeBounds(lte=to_timestamp(value)))

    @classmethod
    def between(
        cls, start: Union[int, datetime], end: Union[int, datetime]
    ) -> "RangeQuery":
        """Half-open range ``[start, end)``."""
        return cls(bounds=RangeBounds(gte=to_timestamp(start), lt=to_timestamp(end)))

    def to_param(self) -> Union[Timestamp, Dict[str, Timestamp]]:
        if self.bounds is not None:
            return self.bounds.to_params()
        return self.exact  # type: ignore[return-value]


@dataclass(frozen=True)
class Headers:
    """Per-client request headers beyond authentication."""

    stripe_account: Optional[str] = None
    client_id: Optional[str] = None
    stripe_version: Optional[str] = None
    extra: Mapping[str, str] = field(default_factory=dict)

    def to_http_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.stripe_version:
            headers["Stripe-Version"] = self.stripe_version
        if self.stripe_account:
            headers["Stripe-Account"] = self.stripe_account
        if self.client_id:
            headers["Client-Id"] = self.client_id
        headers.update(self.extra)
        return headers
