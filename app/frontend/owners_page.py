from typing import Any, Dict, List, Mapping, Optional

from app.clients.backoffice_client import ApiError, BackofficeClient, BackofficeClientError
from app.core.logging import get_logger
from app.frontend.list_state import ListViewState
from app.frontend.notifications import NotificationMixin
from app.schemas.owner import OwnerRole, validate_owner_form
from app.utils.list_view import ListView

logger = get_logger("frontend.owners")

OWNER_SEARCH_FIELDS = ("name", "email")
OWNER_TIMESTAMP_KEYS = ("createdAt", "updatedAt")
ROLE_OPTIONS = [role.value for role in OwnerRole]


def _coerce_form(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn the percentage text of an input box into a number when it parses."""
    data = dict(form)
    value = data.get("ownershipPercentage")
    if isinstance(value, str) and value.strip():
        try:
            data["ownershipPercentage"] = float(value)
        except ValueError:
            pass
    return data


class OwnersPage(NotificationMixin):
    """
    View model of the owners screen.

    Loads every owner once, then searches (name, email), filters (role) and
    paginates locally. Mutations go through the API and are merged into the
    loaded set on success; on failure the loaded set is left as it was.
    """

    def __init__(self, client: BackofficeClient, page_size: int = 10):
        self.client = client
        self.state = ListViewState(
            search_fields=OWNER_SEARCH_FIELDS,
            timestamp_keys=OWNER_TIMESTAMP_KEYS,
            page_size=page_size,
        )
        self.loading = False
        self.error: Optional[str] = None

    @property
    def owners(self) -> List[Dict[str, Any]]:
        return list(self.state.records)

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.state.set_records(self.client.fetch_all_owners())
        except BackofficeClientError as exc:
            self.error = exc.message
            logger.error("Failed to load owners: %s", exc.message)
            self.notify("Failed to load owners", "error")
        finally:
            self.loading = False

    def view(self) -> ListView:
        return self.state.view()

    @property
    def total_ownership(self) -> float:
        return sum(owner["ownershipPercentage"] for owner in self.state.records)

    @property
    def ownership_warning(self) -> Optional[str]:
        total = self.total_ownership
        if total > 100:
            return f"Total ownership exceeds 100% ({total:g}%)"
        return None

    def create_owner(self, form: Mapping[str, Any]) -> Dict[str, str]:
        """
        Validate and submit the add-owner form.

        Returns the field errors to show next to the inputs; an empty dict
        means the owner was created.
        """
        data = _coerce_form(form)
        errors = validate_owner_form(data)
        if errors:
            return errors

        try:
            created = self.client.create_owner(data)
        except ApiError as exc:
            self.notify("Failed to create owner", "error")
            return exc.field_errors
        except BackofficeClientError:
            self.notify("Failed to create owner", "error")
            return {}

        self.state.set_records(self.state.records + (created,))
        self.notify("Owner created successfully", "success")
        return {}

    def update_owner(self, owner_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Save an edited row.

        Re-raises on failure so the caller can keep the row in edit mode.
        """
        try:
            updated = self.client.update_owner(owner_id, _coerce_form(changes))
        except BackofficeClientError:
            self.notify("Failed to update owner", "error")
            raise

        self.state.set_records(
            updated if owner["id"] == owner_id else owner for owner in self.state.records
        )
        self.notify("Owner updated successfully", "success")
        return updated

    def delete_owner(self, owner_id: str) -> bool:
        try:
            self.client.delete_owner(owner_id)
        except BackofficeClientError:
            self.notify("Failed to delete owner", "error")
            return False

        self.state.set_records(owner for owner in self.state.records if owner["id"] != owner_id)
        self.notify("Owner deleted successfully", "success")
        return True
