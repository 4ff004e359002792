"""
Owner store contract.

Every backend keeps owners in insertion order, hands out immutable
``OwnerRecord`` values and raises ``OwnerNotFoundError`` for unknown ids.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from app.schemas.owner import OwnerRole

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class OwnerRecord:
    id: str
    name: str
    email: str
    ownership_percentage: float
    role: OwnerRole
    created_at: datetime
    updated_at: datetime

    def searchable_values(self) -> Tuple[str, ...]:
        return (self.name, self.email, self.role.value)

    def matches(self, search: Optional[str]) -> bool:
        if not search:
            return True
        needle = search.casefold()
        return any(needle in value.casefold() for value in self.searchable_values())


@dataclass(frozen=True)
class OwnerFields:
    """Validated fields of a new owner."""

    name: str
    email: str
    ownership_percentage: float
    role: OwnerRole

    @classmethod
    def from_schema(cls, data) -> "OwnerFields":
        return cls(
            name=data.name,
            email=str(data.email),
            ownership_percentage=data.ownership_percentage,
            role=OwnerRole(data.role),
        )


@dataclass(frozen=True)
class OwnerPatch:
    """Partial update; fields left as ``UNSET`` are not touched."""

    name: Any = UNSET
    email: Any = UNSET
    ownership_percentage: Any = UNSET
    role: Any = UNSET

    @classmethod
    def from_schema(cls, data) -> "OwnerPatch":
        values = data.model_dump(exclude_unset=True)
        if "email" in values:
            values["email"] = str(values["email"])
        if "role" in values:
            values["role"] = OwnerRole(values["role"])
        return cls(**values)

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def apply(self, record: OwnerRecord, updated_at: datetime) -> OwnerRecord:
        return replace(record, **self.changes(), updated_at=max(updated_at, record.updated_at))


@dataclass(frozen=True)
class OwnerPage:
    data: Tuple[OwnerRecord, ...]
    page: int
    page_size: int
    total: int


def page_bounds(page: int, page_size: int) -> Optional[Tuple[int, int]]:
    """Slice bounds for a 1-indexed page, or None when no rows can be on it."""
    start = (page - 1) * page_size
    if start < 0 or page_size <= 0:
        return None
    return start, start + page_size


class OwnerStore(ABC):
    """Authoritative holder of owner records."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock: Clock = clock or utc_now

    @abstractmethod
    def list(self, page: int = 1, page_size: int = 10, search: Optional[str] = None) -> OwnerPage:
        """Filter by ``search`` (name, email, role), then slice the requested page."""

    @abstractmethod
    def get(self, owner_id: str) -> OwnerRecord:
        ...

    @abstractmethod
    def create(self, data: OwnerFields) -> OwnerRecord:
        ...

    @abstractmethod
    def update(self, owner_id: str, patch: OwnerPatch) -> OwnerRecord:
        ...

    @abstractmethod
    def delete(self, owner_id: str) -> None:
        ...

    @abstractmethod
    def snapshot(self) -> Tuple[OwnerRecord, ...]:
        """Every record, in insertion order."""

    @abstractmethod
    def load(self, records) -> None:
        """Insert pre-built records (seed data), keeping their ids and timestamps."""
