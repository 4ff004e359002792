from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_audit_log
from app.core.config import settings
from app.schemas.audit import AuditAction, AuditLogListResponse, AuditLogResponse
from app.services.audit_service import AuditLogService

router = APIRouter()

SortKey = Literal["timestamp", "action", "entity", "entityType", "user"]
SortDirection = Literal["asc", "desc", "none"]


class AuditQuery:
    """Query parameters shared by the listing and the export."""

    def __init__(
        self,
        search: Optional[str] = Query(None, description="Match on user, entity type, action or entity id"),
        action: Optional[AuditAction] = Query(None, description="Filter by action"),
        entity_type: Optional[str] = Query(None, alias="entityType", description="Filter by entity type"),
        user: Optional[str] = Query(None, description="Filter by user name"),
        date_from: Optional[str] = Query(None, alias="from", description="Earliest timestamp (ISO 8601)"),
        date_to: Optional[str] = Query(None, alias="to", description="Latest timestamp (ISO 8601)"),
        sort_key: SortKey = Query("timestamp", alias="sortKey"),
        sort_direction: SortDirection = Query("desc", alias="sortDirection"),
    ):
        self.search = search
        self.action = action
        self.entity_type = entity_type
        self.user = user
        self.date_from = date_from
        self.date_to = date_to
        self.sort_key = sort_key
        self.sort_direction = None if sort_direction == "none" else sort_direction

    def as_kwargs(self) -> dict:
        return {
            "search": self.search,
            "action": self.action,
            "entity_type": self.entity_type,
            "user": self.user,
            "date_from": self.date_from,
            "date_to": self.date_to,
            "sort_key": self.sort_key,
            "sort_direction": self.sort_direction,
        }


def _run(call):
    try:
        return call()
    except ValueError as exc:
        # Unparseable from/to timestamps
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("", response_model=AuditLogListResponse, status_code=status.HTTP_200_OK)
def list_audit_logs(
    query: AuditQuery = Depends(),
    page: int = Query(1),
    page_size: int = Query(
        settings.AUDIT_DEFAULT_PAGE_SIZE, ge=1, alias="pageSize"
    ),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """
    List audit entries, newest first by default.

    Search, filters and sorting are applied before pagination.
    """
    view = _run(lambda: audit_log.query(page=page, page_size=page_size, **query.as_kwargs()))
    return AuditLogListResponse(
        status="success",
        message="Audit logs fetched successfully",
        data=[AuditLogResponse.model_validate(entry) for entry in view.rows],
        page=view.page,
        page_size=view.page_size,
        total=view.total,
        total_pages=view.total_pages,
    )


@router.get("/export", status_code=status.HTTP_200_OK, response_class=Response)
def export_audit_logs(
    query: AuditQuery = Depends(),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """Download every matching entry as CSV."""
    content = _run(lambda: audit_log.export_csv(**query.as_kwargs()))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="audit-logs.csv"'},
    )
