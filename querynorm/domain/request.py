"""The structured result of normalizing a search request."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict, Union

from .base import asdict

QueryValue = Union[str, List[str]]


class DateBounds(TypedDict, total=False):
    """Inclusive bounds of a range filter on a date field."""

    gte: str
    lte: str
    format: str
    time_zone: str


DateRange = Dict[str, DateBounds]
"""Date field name -> :class:`.DateBounds`."""


Options = TypedDict(
    "Options",
    {
        "size": int,
        "from": int,
        "sort": List[Dict[str, Dict[str, str]]],
        "search_after": List[str],
    },
    total=False,
)
"""Paging and sorting directives for the search engine."""


class Errors(TypedDict):
    """One flag per validated field; ``True`` if it fell back to a default."""

    invalid_start: bool
    invalid_end: bool
    invalid_sort: bool
    invalid_order: bool
    invalid_size: bool


class BoolClauses(TypedDict):
    """The occurrence buckets of an Elasticsearch ``bool`` query."""

    filter: List[Dict[str, Any]]
    must: List[Dict[str, Any]]
    must_not: List[Dict[str, Any]]


@dataclass
class NormalizedRequest:
    """A validated search request, ready to hand to a search client."""

    query: Dict[str, QueryValue] = field(default_factory=dict)
    """Requested field values, restricted to mapped fields."""

    date_range: Optional[DateRange] = None
    """Range filter on the date field, if any bound resolved."""

    filters: Dict[str, Any] = field(default_factory=dict)
    """The effective range/start/end/sort/order/size, for echoing back."""

    options: Dict[str, Any] = field(default_factory=dict)
    """Paging and sort directives (see :class:`.Options`)."""

    errors: Errors = field(default_factory=lambda: Errors(
        invalid_start=False, invalid_end=False, invalid_sort=False,
        invalid_order=False, invalid_size=False
    ))

    @property
    def has_errors(self) -> bool:
        """Whether any field fell back to its default."""
        return any(self.errors.values())

    @property
    def sort(self) -> str:
        """The resolved primary sort field."""
        return str(self.filters["sort"])

    @property
    def size(self) -> int:
        """The resolved page size."""
        return int(self.filters["size"])

    def to_dict(self) -> Dict[str, Any]:
        """Get a plain ``dict``, leaving out an empty date range."""
        data = asdict(self)
        if not data["date_range"]:
            data.pop("date_range")
        return data
