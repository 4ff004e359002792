"""
Backoffice API Tests - Test Configuration.

Provides a deterministic clock, seeded owner stores for both backends and a
FastAPI TestClient bound to a freshly built application.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from app.clients.backoffice_client import BackofficeClient
from app.core.database import build_engine, build_session_factory
from app.main import create_app
from app.store.base import OwnerStore
from app.store.memory import InMemoryOwnerStore
from app.store.seed import demo_owners
from app.store.sql import SqlAlchemyOwnerStore


class FakeClock:
    """Returns ``start`` on the first call and one ``step`` later on every call after."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc), step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_store(backend: str, clock: FakeClock) -> OwnerStore:
    if backend == "sqlalchemy":
        store: OwnerStore = SqlAlchemyOwnerStore(build_session_factory(build_engine("sqlite://")), clock=clock)
    else:
        store = InMemoryOwnerStore(clock=clock)
    store.load(demo_owners())
    return store


@pytest.fixture(params=["memory", "sqlalchemy"])
def owner_store(request, clock: FakeClock) -> OwnerStore:
    """Seeded store, once per backend."""
    return make_store(request.param, clock)


@pytest.fixture
def app(clock: FakeClock):
    return create_app(owner_store=make_store("memory", clock), clock=clock)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def backoffice(client: TestClient) -> BackofficeClient:
    """BackofficeClient talking to the in-process application."""
    return BackofficeClient(http_client=client)


@pytest.fixture
def new_owner() -> Dict[str, Any]:
    return {
        "name": "Grace Hopper",
        "email": "grace.hopper@example.com",
        "ownershipPercentage": 5,
        "role": "Advisor",
    }
