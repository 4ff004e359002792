from typing import Optional

from app.core.config import Settings
from app.core.logging import get_logger
from app.store.base import (
    UNSET,
    Clock,
    OwnerFields,
    OwnerPage,
    OwnerPatch,
    OwnerRecord,
    OwnerStore,
)
from app.store.memory import InMemoryOwnerStore
from app.store.seed import demo_owners

logger = get_logger("store")


def build_owner_store(settings: Settings, clock: Optional[Clock] = None) -> OwnerStore:
    """Create the backend named by ``OWNER_STORE_BACKEND`` and seed it if asked to."""
    if settings.OWNER_STORE_BACKEND == "sqlalchemy":
        from app.core.database import build_engine, build_session_factory
        from app.store.sql import SqlAlchemyOwnerStore

        engine = build_engine(settings.DATABASE_URL)
        store: OwnerStore = SqlAlchemyOwnerStore(build_session_factory(engine), clock=clock)
    else:
        store = InMemoryOwnerStore(clock=clock)

    if settings.SEED_DEMO_DATA:
        store.load(demo_owners())
        logger.info("Seeded owner store with %d demo owners", len(demo_owners()))

    logger.info("Owner store ready (backend=%s)", settings.OWNER_STORE_BACKEND)
    return store


__all__ = [
    "UNSET",
    "InMemoryOwnerStore",
    "OwnerFields",
    "OwnerPage",
    "OwnerPatch",
    "OwnerRecord",
    "OwnerStore",
    "build_owner_store",
    "demo_owners",
]
