"""
Tests for the filter -> sort -> paginate derivation.
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from app.utils.list_view import SortSpec, active_filters, derive_view, parse_instant

OWNERS = [
    {"id": "1", "name": "Sarah Johnson", "email": "sarah.johnson@example.com", "role": "CEO", "ownershipPercentage": 45},
    {"id": "2", "name": "Michael Chen", "email": "michael.chen@example.com", "role": "CTO", "ownershipPercentage": 30},
    {"id": "3", "name": "Emily Rodriguez", "email": "emily.rodriguez@example.com", "role": "CFO", "ownershipPercentage": 15},
    {"id": "4", "name": "David Kim", "email": "david.kim@example.com", "role": "Shareholder", "ownershipPercentage": 10},
]

SEARCH_FIELDS = ("name", "email")


def ids(view):
    return [row["id"] for row in view.rows]


class TestFiltering:
    def test_no_search_no_filter_returns_everything(self):
        view = derive_view(OWNERS, search="", search_fields=SEARCH_FIELDS, filters={}, page=1, page_size=10)

        assert ids(view) == ["1", "2", "3", "4"]
        assert view.total == 4
        assert view.total_pages == 1

    def test_role_filter(self):
        view = derive_view(OWNERS, search_fields=SEARCH_FIELDS, filters={"role": "CTO"})

        assert ids(view) == ["2"]
        assert view.total == 1

    def test_search_is_case_insensitive(self):
        view = derive_view(OWNERS, search="kim", search_fields=SEARCH_FIELDS)

        assert ids(view) == ["4"]

    def test_search_matches_any_configured_field(self):
        view = derive_view(OWNERS, search="EMILY.RODRIGUEZ@", search_fields=SEARCH_FIELDS)

        assert ids(view) == ["3"]

    def test_search_ignores_fields_not_configured(self):
        view = derive_view(OWNERS, search="CTO", search_fields=SEARCH_FIELDS)

        assert view.total == 0

    def test_search_and_filter_combine_with_and(self):
        view = derive_view(OWNERS, search="e", search_fields=SEARCH_FIELDS, filters={"role": "CFO"})

        assert ids(view) == ["3"]

    def test_empty_filter_values_are_inactive(self):
        view = derive_view(OWNERS, search_fields=SEARCH_FIELDS, filters={"role": "", "name": None})

        assert view.total == 4

    def test_active_filters_drops_unset_values(self):
        assert active_filters({"role": "CEO", "action": "", "user": None}) == {"role": "CEO"}
        assert active_filters(None) == {}


class TestSorting:
    def test_numeric_sort_ascending(self):
        view = derive_view(OWNERS, sort=SortSpec("ownershipPercentage", "asc"))

        assert ids(view) == ["4", "3", "2", "1"]

    def test_text_sort_descending(self):
        view = derive_view(OWNERS, sort=SortSpec("name", "desc"))

        assert [row["name"] for row in view.rows] == [
            "Sarah Johnson",
            "Michael Chen",
            "Emily Rodriguez",
            "David Kim",
        ]

    def test_no_direction_keeps_filtered_order(self):
        view = derive_view(OWNERS, sort=SortSpec("name", None))

        assert ids(view) == ["1", "2", "3", "4"]

    def test_sort_is_stable(self):
        records = [
            {"id": "a", "group": 1},
            {"id": "b", "group": 0},
            {"id": "c", "group": 1},
            {"id": "d", "group": 0},
        ]

        ascending = derive_view(records, sort=SortSpec("group", "asc"))
        descending = derive_view(records, sort=SortSpec("group", "desc"))

        assert ids(ascending) == ["b", "d", "a", "c"]
        assert ids(descending) == ["a", "c", "b", "d"]

    def test_timestamp_keys_compare_as_instants(self):
        records = [
            {"id": "late", "timestamp": "2024-01-02T00:00:00Z"},
            {"id": "offset", "timestamp": "2024-01-01T23:30:00-01:00"},
            {"id": "early", "timestamp": "2024-01-01T12:00:00+00:00"},
        ]

        view = derive_view(records, sort=SortSpec("timestamp", "asc"), timestamp_keys=("timestamp",))

        # 23:30 at -01:00 is 00:30 UTC on the 2nd
        assert ids(view) == ["early", "late", "offset"]

    def test_missing_values_sort_last_ascending(self):
        records = [{"id": "none"}, {"id": "b", "name": "b"}, {"id": "a", "name": "a"}]

        view = derive_view(records, sort=SortSpec("name", "asc"))

        assert ids(view) == ["a", "b", "none"]

    def test_invalid_direction_rejected(self):
        with pytest.raises(ValueError):
            SortSpec("name", "sideways")


class TestPagination:
    def test_page_past_the_end_is_empty(self):
        view = derive_view(OWNERS, page=3, page_size=10)

        assert view.rows == ()
        assert view.total == 4
        assert view.page == 3
        assert view.page_size == 10

    def test_pages_partition_the_filtered_set(self):
        records = [{"id": str(i), "score": (i * 7) % 5} for i in range(23)]
        sort = SortSpec("score", "desc")

        full = derive_view(records, sort=sort, page_size=100)
        first = derive_view(records, sort=sort, page=1, page_size=5)

        collected = []
        for page in range(1, first.total_pages + 1):
            collected.extend(derive_view(records, sort=sort, page=page, page_size=5).rows)

        assert first.total_pages == 5
        assert collected == list(full.rows)
        assert len({row["id"] for row in collected}) == 23

    def test_total_pages_is_zero_for_empty_result(self):
        view = derive_view(OWNERS, search="nobody", search_fields=SEARCH_FIELDS)

        assert view.total == 0
        assert view.total_pages == 0

    def test_non_positive_page_size_rejected(self):
        with pytest.raises(ValueError):
            derive_view(OWNERS, page_size=0)

    def test_derivation_is_idempotent(self):
        kwargs = dict(
            search="e",
            search_fields=SEARCH_FIELDS,
            filters={"role": "CEO"},
            sort=SortSpec("name", "asc"),
            page=1,
            page_size=2,
        )

        assert derive_view(OWNERS, **kwargs) == derive_view(OWNERS, **kwargs)


@dataclass
class Entry:
    id: str
    user_name: str
    note: Optional[str] = None


def test_records_may_be_objects():
    entries = [Entry("1", "Alice"), Entry("2", "bob"), Entry("3", "Carol")]

    view = derive_view(entries, search="BO", search_fields=("user_name",))

    assert [entry.id for entry in view.rows] == ["2"]


def test_parse_instant_handles_zulu_and_naive():
    zulu = parse_instant("2024-03-01T10:00:00Z")
    naive = parse_instant("2024-03-01T10:00:00")

    assert zulu == naive
    assert zulu.utcoffset().total_seconds() == 0
    assert parse_instant("") is None
