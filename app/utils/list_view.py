"""
Filter -> sort -> paginate derivation for table screens.

``derive_view`` is a pure function of its arguments: the same record set,
search term, filters, sort and page always produce an equal ``ListView``.
It is used by the audit log endpoint and by the frontend view models.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from numbers import Number
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: Optional[str] = "asc"

    def __post_init__(self):
        if self.direction is not None and self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Sort direction must be 'asc', 'desc' or None, got: {self.direction!r}")


@dataclass(frozen=True)
class ListView:
    rows: Tuple[Any, ...]
    total: int
    total_pages: int
    page: int
    page_size: int


def field_value(record: Any, key: str) -> Any:
    """Read ``key`` from a mapping or an object attribute; missing fields are None."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value)


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 string or datetime into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        instant = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        instant = datetime.fromisoformat(text)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def _sort_key(value: Any, as_instant: bool) -> Tuple[int, Any]:
    # Rank keeps unlike types apart: numbers, then text, then missing values
    if as_instant:
        instant = parse_instant(value)
        return (2, 0) if instant is None else (0, instant.timestamp())
    if value is None:
        return (2, 0)
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, datetime):
        return (0, parse_instant(value).timestamp())
    if isinstance(value, Number):
        return (0, value)
    return (1, str(value))


def _matches_search(record: Any, needle: str, search_fields: Sequence[str]) -> bool:
    return any(needle in _text(field_value(record, key)).casefold() for key in search_fields)


def _matches_filters(record: Any, filters: Mapping[str, Any]) -> bool:
    for key, expected in filters.items():
        actual = field_value(record, key)
        if isinstance(actual, Enum):
            actual = actual.value
        if isinstance(expected, Enum):
            expected = expected.value
        if actual != expected:
            return False
    return True


def active_filters(filters: Optional[Mapping[str, Any]]) -> dict:
    """Drop filters whose value is unset (None or empty string)."""
    if not filters:
        return {}
    return {key: value for key, value in filters.items() if value is not None and value != ""}


def derive_view(
    records: Iterable[Any],
    *,
    search: Optional[str] = "",
    search_fields: Sequence[str] = (),
    filters: Optional[Mapping[str, Any]] = None,
    sort: Optional[SortSpec] = None,
    page: int = 1,
    page_size: int = 10,
    timestamp_keys: Iterable[str] = (),
) -> ListView:
    """
    Produce the rows to display for one table page.

    Args:
        records: The full loaded record set (mappings or objects)
        search: Case-insensitive substring; a record is kept when any of
            ``search_fields`` contains it
        search_fields: Fields the search term is matched against
        filters: Field -> value equality constraints, combined with AND
        sort: Key and direction; a ``None`` direction keeps filtered order
        page: 1-indexed page number
        page_size: Rows per page
        timestamp_keys: Sort keys compared as parsed instants

    Returns:
        ListView with the page's rows and pagination metadata
    """
    if page_size <= 0:
        raise ValueError("page_size must be a positive integer")

    result = list(records)

    if search:
        needle = search.casefold()
        result = [record for record in result if _matches_search(record, needle, search_fields)]

    constraints = active_filters(filters)
    if constraints:
        result = [record for record in result if _matches_filters(record, constraints)]

    if sort is not None and sort.direction is not None:
        as_instant = sort.key in set(timestamp_keys)
        result.sort(
            key=lambda record: _sort_key(field_value(record, sort.key), as_instant),
            reverse=sort.direction == "desc",
        )

    total = len(result)
    start = (page - 1) * page_size
    rows = tuple(result[start:start + page_size]) if start >= 0 else ()

    return ListView(
        rows=rows,
        total=total,
        total_pages=math.ceil(total / page_size),
        page=page,
        page_size=page_size,
    )
