from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import session_scope
from app.core.exceptions import OwnerNotFoundError
from app.core.logging import get_logger
from app.models.owner import Owner
from app.schemas.owner import OwnerRole
from app.store.base import (
    Clock,
    OwnerFields,
    OwnerPage,
    OwnerPatch,
    OwnerRecord,
    OwnerStore,
    page_bounds,
)

logger = get_logger("store.sql")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_record(row: Owner) -> OwnerRecord:
    return OwnerRecord(
        id=row.id,
        name=row.name,
        email=row.email,
        ownership_percentage=row.ownership_percentage,
        role=OwnerRole(row.role),
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlAlchemyOwnerStore(OwnerStore):
    """Owner store over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker, clock: Optional[Clock] = None):
        super().__init__(clock)
        self.session_factory = session_factory

    def _get_row(self, session: Session, owner_id: str) -> Owner:
        row = session.query(Owner).filter(Owner.id == owner_id).first()
        if row is None:
            raise OwnerNotFoundError(owner_id)
        return row

    def _all_records(self, session: Session) -> Tuple[OwnerRecord, ...]:
        rows = session.query(Owner).order_by(Owner.seq).all()
        return tuple(_to_record(row) for row in rows)

    def list(self, page: int = 1, page_size: int = 10, search: Optional[str] = None) -> OwnerPage:
        with session_scope(self.session_factory) as session:
            records = self._all_records(session)
        # Matching happens in Python so both backends fold case identically
        matched = [record for record in records if record.matches(search)]
        bounds = page_bounds(page, page_size)
        data = tuple(matched[bounds[0]:bounds[1]]) if bounds else ()
        return OwnerPage(data=data, page=page, page_size=page_size, total=len(matched))

    def get(self, owner_id: str) -> OwnerRecord:
        with session_scope(self.session_factory) as session:
            return _to_record(self._get_row(session, owner_id))

    def create(self, data: OwnerFields) -> OwnerRecord:
        now = _as_utc(self.clock())
        with session_scope(self.session_factory) as session:
            row = Owner(
                name=data.name,
                email=data.email,
                ownership_percentage=data.ownership_percentage,
                role=data.role.value,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            row.id = str(row.seq)
            session.commit()
            logger.debug("Stored owner %s", row.id)
            return OwnerRecord(
                id=row.id,
                name=data.name,
                email=data.email,
                ownership_percentage=data.ownership_percentage,
                role=data.role,
                created_at=now,
                updated_at=now,
            )

    def update(self, owner_id: str, patch: OwnerPatch) -> OwnerRecord:
        with session_scope(self.session_factory) as session:
            row = self._get_row(session, owner_id)
            updated = patch.apply(_to_record(row), _as_utc(self.clock()))
            row.name = updated.name
            row.email = updated.email
            row.ownership_percentage = updated.ownership_percentage
            row.role = updated.role.value
            row.updated_at = updated.updated_at
            session.commit()
            return updated

    def delete(self, owner_id: str) -> None:
        with session_scope(self.session_factory) as session:
            row = self._get_row(session, owner_id)
            session.delete(row)
            session.commit()

    def snapshot(self) -> Tuple[OwnerRecord, ...]:
        with session_scope(self.session_factory) as session:
            return self._all_records(session)

    def load(self, records: Iterable[OwnerRecord]) -> None:
        with session_scope(self.session_factory) as session:
            for record in records:
                if session.query(Owner).filter(Owner.id == record.id).first() is not None:
                    raise ValueError(f"Owner with ID {record.id} already exists")
                session.add(
                    Owner(
                        seq=int(record.id) if record.id.isdigit() else None,
                        id=record.id,
                        name=record.name,
                        email=record.email,
                        ownership_percentage=record.ownership_percentage,
                        role=record.role.value,
                        created_at=record.created_at,
                        updated_at=record.updated_at,
                    )
                )
                session.flush()
            session.commit()
