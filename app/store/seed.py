from datetime import datetime, timezone
from typing import Tuple

from app.schemas.owner import OwnerRole
from app.store.base import OwnerRecord


def _owner(owner_id, name, email, percentage, role, day) -> OwnerRecord:
    stamp = datetime.fromisoformat(day).replace(tzinfo=timezone.utc)
    return OwnerRecord(
        id=owner_id,
        name=name,
        email=email,
        ownership_percentage=percentage,
        role=role,
        created_at=stamp,
        updated_at=stamp,
    )


def demo_owners() -> Tuple[OwnerRecord, ...]:
    """The four owners every fresh demo instance starts with."""
    return (
        _owner("1", "Sarah Johnson", "sarah.johnson@example.com", 45, OwnerRole.CEO, "2023-01-15"),
        _owner("2", "Michael Chen", "michael.chen@example.com", 30, OwnerRole.CTO, "2023-02-20"),
        _owner("3", "Emily Rodriguez", "emily.rodriguez@example.com", 15, OwnerRole.CFO, "2023-03-10"),
        _owner("4", "David Kim", "david.kim@example.com", 10, OwnerRole.SHAREHOLDER, "2023-04-05"),
    )
