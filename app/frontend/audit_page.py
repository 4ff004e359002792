from typing import List, Optional

from app.clients.backoffice_client import BackofficeClient, BackofficeClientError
from app.core.logging import get_logger
from app.frontend.list_state import ListViewState
from app.frontend.notifications import NotificationMixin
from app.utils.list_view import ListView, SortSpec

logger = get_logger("frontend.audit")

AUDIT_SEARCH_FIELDS = ("userName", "entityType", "action", "entityId")
PAGE_SIZE_OPTIONS = (10, 25, 50, 100)

# Toolbar filter / column keys mapped to entry fields
FILTER_FIELDS = {"action": "action", "entityType": "entityType", "user": "userName"}
SORT_FIELDS = {"timestamp": "timestamp", "action": "action", "entity": "entityType", "user": "userName"}


class AuditPage(NotificationMixin):
    """View model of the audit log screen; newest entries first by default."""

    def __init__(self, client: BackofficeClient, page_size: int = 25):
        self.client = client
        self.state = ListViewState(
            search_fields=AUDIT_SEARCH_FIELDS,
            timestamp_keys=("timestamp",),
            sort=SortSpec("timestamp", "desc"),
            page_size=page_size,
        )
        self.loading = False
        self.error: Optional[str] = None

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.state.set_records(self.client.fetch_all_audit_logs())
        except BackofficeClientError as exc:
            self.error = exc.message
            logger.error("Failed to load audit logs: %s", exc.message)
            self.notify("Failed to load audit logs", "error")
        finally:
            self.loading = False

    def set_filter(self, key: str, value: Optional[str]) -> None:
        self.state.set_filter(FILTER_FIELDS[key], value)

    def sort_by(self, column: str, direction: Optional[str]) -> None:
        self.state.set_sort(SORT_FIELDS[column], direction)

    def view(self) -> ListView:
        return self.state.view()

    def unique_users(self) -> List[str]:
        return sorted({entry["userName"] for entry in self.state.records})

    def empty_state_message(self) -> str:
        if self.state.has_active_filters():
            return "Try adjusting your search or filters"
        return "Audit logs will appear here once actions are performed"
