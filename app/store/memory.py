from typing import Iterable, List, Optional, Tuple

from app.core.exceptions import OwnerNotFoundError
from app.core.logging import get_logger
from app.store.base import (
    Clock,
    OwnerFields,
    OwnerPage,
    OwnerPatch,
    OwnerRecord,
    OwnerStore,
    page_bounds,
)

logger = get_logger("store.memory")


class InMemoryOwnerStore(OwnerStore):
    """Owners held in a private list; contents are lost on restart."""

    def __init__(self, clock: Optional[Clock] = None, start_id: int = 1):
        super().__init__(clock)
        self._owners: List[OwnerRecord] = []
        self._next_id = start_id

    def _index_of(self, owner_id: str) -> int:
        for index, owner in enumerate(self._owners):
            if owner.id == owner_id:
                return index
        raise OwnerNotFoundError(owner_id)

    def list(self, page: int = 1, page_size: int = 10, search: Optional[str] = None) -> OwnerPage:
        matched = [owner for owner in self._owners if owner.matches(search)]
        bounds = page_bounds(page, page_size)
        data = tuple(matched[bounds[0]:bounds[1]]) if bounds else ()
        return OwnerPage(data=data, page=page, page_size=page_size, total=len(matched))

    def get(self, owner_id: str) -> OwnerRecord:
        return self._owners[self._index_of(owner_id)]

    def create(self, data: OwnerFields) -> OwnerRecord:
        now = self.clock()
        owner = OwnerRecord(
            id=str(self._next_id),
            name=data.name,
            email=data.email,
            ownership_percentage=data.ownership_percentage,
            role=data.role,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._owners.append(owner)
        logger.debug("Stored owner %s", owner.id)
        return owner

    def update(self, owner_id: str, patch: OwnerPatch) -> OwnerRecord:
        index = self._index_of(owner_id)
        updated = patch.apply(self._owners[index], self.clock())
        self._owners[index] = updated
        return updated

    def delete(self, owner_id: str) -> None:
        index = self._index_of(owner_id)
        del self._owners[index]

    def snapshot(self) -> Tuple[OwnerRecord, ...]:
        return tuple(self._owners)

    def load(self, records: Iterable[OwnerRecord]) -> None:
        for record in records:
            if any(owner.id == record.id for owner in self._owners):
                raise ValueError(f"Owner with ID {record.id} already exists")
            self._owners.append(record)
            if record.id.isdigit():
                self._next_id = max(self._next_id, int(record.id) + 1)
