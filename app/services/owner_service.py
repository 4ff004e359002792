from dataclasses import asdict
from typing import Optional

from fastapi import HTTPException, status

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.schemas.audit import AuditAction
from app.schemas.owner import OwnerCreate, OwnershipSummary, OwnerUpdate
from app.services.audit_service import SYSTEM_ACTOR, Actor, AuditLogService, diff_fields
from app.store.base import OwnerFields, OwnerPage, OwnerPatch, OwnerRecord, OwnerStore

logger = get_logger("services.owner")

OWNER_ENTITY = "owner"
OWNERSHIP_LIMIT = 100

# Audit change maps use the field names clients see
WIRE_NAMES = {"ownership_percentage": "ownershipPercentage", "created_at": "createdAt", "updated_at": "updatedAt"}


def _wire(values):
    return {WIRE_NAMES.get(key, key): value for key, value in values.items()}


class OwnerService:
    def __init__(
        self,
        store: OwnerStore,
        audit_log: AuditLogService,
        actor: Actor = SYSTEM_ACTOR,
    ):
        self.store = store
        self.audit_log = audit_log
        self.actor = actor

    def _not_found(self, exc: NotFoundError) -> HTTPException:
        logger.warning("%s", exc.message)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)

    def list_owners(self, page: int = 1, page_size: int = 10, search: Optional[str] = None) -> OwnerPage:
        return self.store.list(page=page, page_size=page_size, search=search)

    def get_owner(self, owner_id: str) -> OwnerRecord:
        try:
            return self.store.get(owner_id)
        except NotFoundError as exc:
            raise self._not_found(exc)

    def create_owner(self, data: OwnerCreate) -> OwnerRecord:
        """Store a new owner and record the creation in the audit log."""
        logger.info("Creating owner %s (%s)", data.name, data.role.value)

        owner = self.store.create(OwnerFields.from_schema(data))
        self.audit_log.record(
            AuditAction.CREATE,
            OWNER_ENTITY,
            owner.id,
            actor=self.actor,
            changes=diff_fields({}, _wire(asdict(OwnerFields.from_schema(data)))),
        )

        logger.info("Owner %s created successfully", owner.id)
        return owner

    def update_owner(self, owner_id: str, data: OwnerUpdate) -> OwnerRecord:
        """
        Merge the supplied fields over an existing owner.

        Fields omitted from ``data`` are left untouched; ``updatedAt`` is
        refreshed even when nothing else changes.
        """
        patch = OwnerPatch.from_schema(data)
        try:
            before = self.store.get(owner_id)
            owner = self.store.update(owner_id, patch)
        except NotFoundError as exc:
            raise self._not_found(exc)

        changes = diff_fields(_wire(asdict(before)), _wire(patch.changes()))
        self.audit_log.record(
            AuditAction.UPDATE,
            OWNER_ENTITY,
            owner_id,
            actor=self.actor,
            changes=changes,
        )

        logger.info("Owner %s updated (fields: %s)", owner_id, ", ".join(changes) or "none")
        return owner

    def delete_owner(self, owner_id: str) -> None:
        try:
            self.store.delete(owner_id)
        except NotFoundError as exc:
            raise self._not_found(exc)

        self.audit_log.record(AuditAction.DELETE, OWNER_ENTITY, owner_id, actor=self.actor)
        logger.info("Owner %s deleted by %s", owner_id, self.actor.user_id)

    def ownership_summary(self) -> OwnershipSummary:
        """
        Report the total ownership percentage.

        Totals above 100% are allowed; they only produce a warning.
        """
        owners = self.store.snapshot()
        total = sum(owner.ownership_percentage for owner in owners)
        exceeds = total > OWNERSHIP_LIMIT
        warning = None
        if exceeds:
            warning = f"Total ownership exceeds 100% ({total:g}%)"
            logger.warning(warning)
        return OwnershipSummary(
            total_ownership=total,
            owner_count=len(owners),
            exceeds_limit=exceeds,
            warning=warning,
        )
