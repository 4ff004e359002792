import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from app.core.logging import get_logger
from app.schemas.audit import AuditAction
from app.store.base import Clock, utc_now
from app.utils.list_view import ListView, SortSpec, derive_view, parse_instant

logger = get_logger("services.audit")

AUDIT_SEARCH_FIELDS = ("user_name", "entity_type", "action", "entity_id")
AUDIT_TIMESTAMP_KEYS = ("timestamp",)

# Column keys accepted by the audit table mapped to entry attributes
AUDIT_SORT_KEYS = {
    "timestamp": "timestamp",
    "action": "action",
    "entity": "entity_type",
    "entityType": "entity_type",
    "user": "user_name",
}

EXPORT_COLUMNS = ["id", "timestamp", "action", "entityType", "entityId", "userId", "userName", "changes"]


@dataclass(frozen=True)
class Actor:
    user_id: str
    user_name: str


SYSTEM_ACTOR = Actor(user_id="system", user_name="System")


@dataclass(frozen=True)
class AuditLogEntry:
    id: str
    timestamp: datetime
    user_id: str
    user_name: str
    action: AuditAction
    entity_type: str
    entity_id: str
    changes: Optional[Dict[str, Dict[str, Any]]] = None
    metadata: Optional[Dict[str, Any]] = None


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def diff_fields(before: Mapping[str, Any], after: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Per-field ``{"old", "new"}`` map for the keys of ``after`` whose value changed."""
    changes = {}
    for key, new_value in after.items():
        old_value = before.get(key)
        if _plain(old_value) != _plain(new_value):
            changes[key] = {"old": _plain(old_value), "new": _plain(new_value)}
    return changes


def _end_of(value: Optional[str]) -> Optional[datetime]:
    """Upper bound for a ``to`` filter; a bare date covers that whole day."""
    upper = parse_instant(value)
    if upper is not None and isinstance(value, str):
        try:
            date.fromisoformat(value)
        except ValueError:
            return upper
        upper += timedelta(days=1) - timedelta(microseconds=1)
    return upper


class AuditLogService:
    """Append-only, in-memory audit trail of mutations."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now
        self._entries: List[AuditLogEntry] = []
        self._next_id = 1

    def record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        actor: Actor = SYSTEM_ACTOR,
        changes: Optional[Dict[str, Dict[str, Any]]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            id=f"audit-{self._next_id}",
            timestamp=self.clock(),
            user_id=actor.user_id,
            user_name=actor.user_name,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            changes=changes or None,
            metadata=metadata or None,
        )
        self._next_id += 1
        self._entries.append(entry)
        logger.info(
            "Audit %s %s %s by %s", action.value, entity_type, entity_id, actor.user_id
        )
        return entry

    def entries(self) -> Tuple[AuditLogEntry, ...]:
        return tuple(self._entries)

    def _in_range(self, date_from: Optional[str], date_to: Optional[str]) -> List[AuditLogEntry]:
        lower = parse_instant(date_from)
        upper = _end_of(date_to)
        return [
            entry
            for entry in self._entries
            if (lower is None or entry.timestamp >= lower)
            and (upper is None or entry.timestamp <= upper)
        ]

    def query(
        self,
        search: Optional[str] = None,
        action: Optional[AuditAction] = None,
        entity_type: Optional[str] = None,
        user: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        sort_key: str = "timestamp",
        sort_direction: Optional[str] = "desc",
        page: int = 1,
        page_size: int = 25,
    ) -> ListView:
        """Filter, sort and paginate the audit trail the way the audit table does."""
        if sort_key not in AUDIT_SORT_KEYS:
            raise ValueError(f"Unknown sort key '{sort_key}'")

        return derive_view(
            self._in_range(date_from, date_to),
            search=search,
            search_fields=AUDIT_SEARCH_FIELDS,
            filters={"action": action, "entity_type": entity_type, "user_name": user},
            sort=SortSpec(AUDIT_SORT_KEYS[sort_key], sort_direction),
            page=page,
            page_size=page_size,
            timestamp_keys=AUDIT_TIMESTAMP_KEYS,
        )

    def export_csv(self, **filters) -> str:
        """CSV of every entry matching ``filters`` (same arguments as ``query``, unpaged)."""
        filters.pop("page", None)
        filters["page_size"] = max(len(self._entries), 1)
        view = self.query(**filters)

        rows = [
            {
                "id": entry.id,
                "timestamp": entry.timestamp.isoformat(),
                "action": entry.action.value,
                "entityType": entry.entity_type,
                "entityId": entry.entity_id,
                "userId": entry.user_id,
                "userName": entry.user_name,
                "changes": json.dumps(entry.changes) if entry.changes else "",
            }
            for entry in view.rows
        ]
        frame = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        logger.info("Exported %d audit entries", len(frame))
        return frame.to_csv(index=False)
