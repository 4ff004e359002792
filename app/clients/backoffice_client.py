"""
HTTP client for the back office API.

Used by the frontend view models. Every call either returns the decoded
JSON payload or raises a ``BackofficeClientError``: ``ApiError`` when the
API answered with an error status, ``NetworkError`` when it could not be
reached at all.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from app.core.config import settings
from app.core.logging import get_logger, get_request_id

logger = get_logger("clients.backoffice")


class BackofficeClientError(Exception):
    """Base class for client-side failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ApiError(BackofficeClientError):
    """
    The API responded with a non-2xx status.

    Attributes:
        status_code: HTTP status code
        status_text: Reason phrase
        data: Decoded error body ({} when the body is not JSON)
    """

    def __init__(self, status_code: int, status_text: str, data: Any):
        self.status_code = status_code
        self.status_text = status_text
        self.data = data
        super().__init__(f"API Error: {status_code} {status_text}")

    @property
    def field_errors(self) -> Dict[str, str]:
        if isinstance(self.data, dict):
            return dict(self.data.get("fieldErrors") or {})
        return {}


class NetworkError(BackofficeClientError):
    """The request never produced an HTTP response."""


class BackofficeClient:
    """
    Synchronous client for the owners, audit-log and settings endpoints.

    Args:
        base_url: API root (defaults to ``settings.API_BASE_URL``)
        timeout: Request timeout in seconds (defaults to ``settings.REQUEST_TIMEOUT``)
        http_client: Pre-configured ``httpx.Client`` to use instead of
            creating one, e.g. FastAPI's ``TestClient``
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
        api_prefix: Optional[str] = None,
    ):
        self.api_prefix = api_prefix if api_prefix is not None else settings.API_V1_STR
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.REQUEST_TIMEOUT,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "BackofficeClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.api_prefix}{path}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = self._client.request(method, url, params=params, json=json, headers=self._headers())
        except httpx.RequestError as exc:
            logger.error("Network error calling %s %s: %s", method, url, exc)
            raise NetworkError(f"Network error: {exc}") from exc

        if response.is_error:
            try:
                data = response.json()
            except ValueError:
                data = {}
            logger.warning("%s %s failed with %s", method, url, response.status_code)
            raise ApiError(response.status_code, response.reason_phrase, data)

        if response.status_code == 204:
            return None
        return response.json()

    def _fetch_all(self, fetch_page: Callable[[int], Dict[str, Any]]) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        page = 1
        while True:
            payload = fetch_page(page)
            rows.extend(payload["data"])
            if not payload["data"] or len(rows) >= payload["total"]:
                return rows
            page += 1

    # Owners

    def list_owners(self, page: Optional[int] = None, page_size: Optional[int] = None, search: Optional[str] = None) -> Dict[str, Any]:
        return self._request("GET", "/owners", params={"page": page, "pageSize": page_size, "search": search or None})

    def fetch_all_owners(self, page_size: int = 100) -> List[Dict[str, Any]]:
        """Every owner, following pagination until ``total`` is reached."""
        return self._fetch_all(lambda page: self.list_owners(page=page, page_size=page_size))

    def get_owner(self, owner_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/owners/{owner_id}")["data"]

    def create_owner(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/owners", json=dict(data))["data"]

    def update_owner(self, owner_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/owners/{owner_id}", json=dict(data))["data"]

    def delete_owner(self, owner_id: str) -> None:
        self._request("DELETE", f"/owners/{owner_id}")

    def owner_summary(self) -> Dict[str, Any]:
        return self._request("GET", "/owners/summary")

    # Audit logs

    def list_audit_logs(self, **params: Any) -> Dict[str, Any]:
        """Query the audit trail; keyword arguments are sent as query parameters (camelCase)."""
        return self._request("GET", "/audit-logs", params=params)

    def fetch_all_audit_logs(self, page_size: int = 100) -> List[Dict[str, Any]]:
        return self._fetch_all(lambda page: self.list_audit_logs(page=page, pageSize=page_size))

    # Settings

    def get_settings(self) -> Dict[str, Any]:
        return self._request("GET", "/settings")["data"]

    def update_settings(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", "/settings", json=dict(data))["data"]
