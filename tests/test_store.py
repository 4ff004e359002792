"""
Owner store contract, run against every backend.
"""

from dataclasses import FrozenInstanceError

import pytest

from app.core.config import Settings
from app.core.exceptions import NotFoundError, OwnerNotFoundError
from app.schemas.owner import OwnerRole
from app.store import UNSET, build_owner_store
from app.store.base import OwnerFields, OwnerPatch, page_bounds
from app.store.memory import InMemoryOwnerStore
from app.store.seed import demo_owners
from app.store.sql import SqlAlchemyOwnerStore


def fields(**overrides) -> OwnerFields:
    values = dict(
        name="Grace Hopper",
        email="grace.hopper@example.com",
        ownership_percentage=5.0,
        role=OwnerRole.ADVISOR,
    )
    values.update(overrides)
    return OwnerFields(**values)


class TestList:
    def test_lists_seed_in_insertion_order(self, owner_store):
        page = owner_store.list(page=1, page_size=10)

        assert [owner.id for owner in page.data] == ["1", "2", "3", "4"]
        assert page.total == 4
        assert (page.page, page.page_size) == (1, 10)

    def test_search_matches_name_email_and_role(self, owner_store):
        assert [o.id for o in owner_store.list(search="kim").data] == ["4"]
        assert [o.id for o in owner_store.list(search="EMILY.RODRIGUEZ").data] == ["3"]
        assert [o.id for o in owner_store.list(search="cto").data] == ["2"]

    def test_total_is_filtered_count(self, owner_store):
        page = owner_store.list(page=1, page_size=1, search="example.com")

        assert len(page.data) == 1
        assert page.total == 4

    def test_page_past_the_end_is_empty(self, owner_store):
        page = owner_store.list(page=3, page_size=10)

        assert page.data == ()
        assert page.total == 4
        assert (page.page, page.page_size) == (3, 10)

    def test_second_page(self, owner_store):
        page = owner_store.list(page=2, page_size=3)

        assert [owner.id for owner in page.data] == ["4"]

    def test_pages_partition_the_search_result(self, owner_store):
        for i in range(3):
            owner_store.create(fields(name=f"Partner {i}", email=f"partner{i}@example.com"))
        owner_store.create(fields(name="Ada Lovelace", email="ada@lovelace.org"))
        everything = owner_store.list(page=1, page_size=100, search="example.com")

        pages = [owner_store.list(page=n, page_size=3, search="example.com") for n in (1, 2, 3, 4)]

        assert everything.total == 7
        assert [len(p.data) for p in pages] == [3, 3, 1, 0]
        assert {p.total for p in pages} == {7}
        assert tuple(owner for p in pages for owner in p.data) == everything.data

    def test_invalid_bounds_yield_empty_page(self, owner_store):
        assert owner_store.list(page=0, page_size=10).data == ()
        assert owner_store.list(page=1, page_size=0).data == ()


class TestCreate:
    def test_assigns_next_id_and_timestamps(self, owner_store, clock):
        expected_now = clock.now

        owner = owner_store.create(fields())

        assert owner.id == "5"
        assert owner.created_at == owner.updated_at == expected_now
        assert owner_store.snapshot()[-1] == owner

    def test_get_after_create_returns_equal_record(self, owner_store):
        owner = owner_store.create(fields())

        assert owner_store.get(owner.id) == owner

    def test_ids_are_unique_and_never_reused(self, owner_store):
        first = owner_store.create(fields())
        owner_store.delete(first.id)
        second = owner_store.create(fields(name="Ada Lovelace"))

        live_ids = [owner.id for owner in owner_store.snapshot()]
        assert second.id != first.id
        assert second.id == "6"
        assert len(live_ids) == len(set(live_ids))

    def test_records_are_immutable(self, owner_store):
        owner = owner_store.get("1")

        with pytest.raises(FrozenInstanceError):
            owner.name = "Changed"


class TestUpdate:
    def test_empty_patch_only_moves_updated_at(self, owner_store):
        before = owner_store.get("2")

        after = owner_store.update("2", OwnerPatch())

        assert after.updated_at > before.updated_at
        assert after.created_at == before.created_at
        assert (after.name, after.email, after.ownership_percentage, after.role) == (
            before.name,
            before.email,
            before.ownership_percentage,
            before.role,
        )

    def test_patch_changes_only_given_fields(self, owner_store):
        untouched = {owner.id: owner for owner in owner_store.snapshot() if owner.id != "2"}

        updated = owner_store.update("2", OwnerPatch(ownership_percentage=99))

        assert updated.ownership_percentage == 99
        assert updated.name == "Michael Chen"
        assert owner_store.get("2") == updated
        for owner_id, owner in untouched.items():
            assert owner_store.get(owner_id) == owner

    def test_update_keeps_position(self, owner_store):
        owner_store.update("2", OwnerPatch(name="Michael C."))

        assert [owner.id for owner in owner_store.snapshot()] == ["1", "2", "3", "4"]

    def test_updated_at_never_moves_backwards(self, owner_store, clock):
        owner_store.update("1", OwnerPatch(name="Sarah J."))
        latest = owner_store.get("1").updated_at
        clock.now = latest.replace(year=2000)

        owner_store.update("1", OwnerPatch(name="Sarah"))

        assert owner_store.get("1").updated_at == latest

    def test_missing_owner(self, owner_store):
        with pytest.raises(OwnerNotFoundError) as exc_info:
            owner_store.update("99", OwnerPatch(name="Nobody"))

        assert exc_info.value.message == "Owner with ID 99 not found"
        assert len(owner_store.snapshot()) == 4


class TestDelete:
    def test_get_after_delete_signals_not_found(self, owner_store):
        owner_store.delete("3")

        with pytest.raises(NotFoundError):
            owner_store.get("3")
        assert [owner.id for owner in owner_store.snapshot()] == ["1", "2", "4"]

    def test_missing_owner(self, owner_store):
        with pytest.raises(OwnerNotFoundError):
            owner_store.delete("99")


def test_load_rejects_duplicate_ids(owner_store):
    with pytest.raises(ValueError):
        owner_store.load(demo_owners()[:1])


def test_patch_changes_skip_unset_fields():
    patch = OwnerPatch(name="Ada", role=OwnerRole.CTO)

    assert patch.changes() == {"name": "Ada", "role": OwnerRole.CTO}
    assert patch.email is UNSET
    assert OwnerPatch().changes() == {}


def test_page_bounds():
    assert page_bounds(1, 10) == (0, 10)
    assert page_bounds(3, 10) == (20, 30)
    assert page_bounds(0, 10) is None
    assert page_bounds(1, 0) is None


@pytest.mark.parametrize(
    "backend, store_class",
    [("memory", InMemoryOwnerStore), ("sqlalchemy", SqlAlchemyOwnerStore)],
)
def test_build_owner_store_picks_backend(backend, store_class):
    store = build_owner_store(Settings(OWNER_STORE_BACKEND=backend, DATABASE_URL="sqlite://"))

    assert isinstance(store, store_class)
    assert len(store.snapshot()) == 4


def test_build_owner_store_without_seed():
    store = build_owner_store(Settings(SEED_DEMO_DATA=False))

    assert store.snapshot() == ()
    assert store.create(fields()).id == "1"
