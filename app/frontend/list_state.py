from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from app.utils.list_view import ListView, SortSpec, derive_view


@dataclass
class ListViewState:
    """
    Inputs of one table screen.

    The current page returns to 1 when the record set, the search term or a
    filter changes; sorting, page size and explicit page changes keep it.
    """

    search_fields: Tuple[str, ...]
    timestamp_keys: Tuple[str, ...] = ()
    records: Tuple[Any, ...] = ()
    search: str = ""
    filters: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[SortSpec] = None
    page: int = 1
    page_size: int = 10

    def set_records(self, records: Iterable[Any]) -> None:
        self.records = tuple(records)
        self.page = 1

    def set_search(self, search: Optional[str]) -> None:
        search = search or ""
        if search != self.search:
            self.search = search
            self.page = 1

    def set_filter(self, key: str, value: Any) -> None:
        filters = dict(self.filters)
        if value is None or value == "":
            filters.pop(key, None)
        else:
            filters[key] = value
        if filters != self.filters:
            self.filters = filters
            self.page = 1

    def clear_filters(self) -> None:
        """Reset both the search term and every field filter."""
        if self.search or self.filters:
            self.search = ""
            self.filters = {}
            self.page = 1

    def set_sort(self, key: str, direction: Optional[str]) -> None:
        self.sort = SortSpec(key, direction)

    def set_page(self, page: int) -> None:
        if page < 1:
            raise ValueError("page must be >= 1")
        self.page = page

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size

    def has_active_filters(self) -> bool:
        return bool(self.search or self.filters)

    def view(self) -> ListView:
        return derive_view(
            self.records,
            search=self.search,
            search_fields=self.search_fields,
            filters=self.filters,
            sort=self.sort,
            page=self.page,
            page_size=self.page_size,
            timestamp_keys=self.timestamp_keys,
        )
