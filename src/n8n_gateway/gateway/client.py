"""n8n public REST API client."""

from __future__ import annotations

import threading
from typing import Any
from urllib.parse import quote

import requests

from ..logger import get_logger
from .config import N8nConfig
from .errors import N8nApiError

_log = get_logger("n8n_gateway.gateway.client")


class N8nApiClient:
    """Thin synchronous client for the n8n workflow endpoints.

    requests.Session is not thread-safe, and the tools call this client from
    anyio worker threads, so requests on one client are serialized.
    """

    def __init__(self, config: N8nConfig, session: requests.Session | None = None):
        self.config = config
        self.base_url = config.api_url.rstrip("/")
        self.session = session or requests.Session()
        self._lock = threading.Lock()
        self.session.headers.update(
            {
                "X-N8N-API-KEY": config.api_key,
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        _log.debug(f"{method} {url}", extra={"event": "n8n_request", "method": method, "path": path})
        try:
            with self._lock:
                response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        except requests.RequestException as e:
            raise N8nApiError(f"Network error: {e}") from e

        if not response.ok:
            raise _error_from_response(response, path)
        if not response.content:
            return {}
        return response.json()

    def check_connectivity(self) -> None:
        """Raise N8nApiError unless the API answers a workflow listing."""
        data = self._request("GET", "/workflows", params={"limit": 1})
        if not isinstance(data, dict) or "data" not in data:
            raise N8nApiError("Unexpected response from n8n API while checking connectivity")

    def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        """Fetch a single workflow by ID."""
        return self._request("GET", f"/workflows/{_quote_id(workflow_id)}")

    def update_workflow(self, workflow_id: str, workflow: dict[str, Any]) -> dict[str, Any]:
        """Replace a workflow's editable fields and return the stored result."""
        return self._request("PUT", f"/workflows/{_quote_id(workflow_id)}", json=workflow)

    def close(self) -> None:
        self.session.close()


def _error_from_response(response: requests.Response, path: str) -> N8nApiError:
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = None
    remote_message = body.get("message") if isinstance(body, dict) else None

    if status == 401:
        message = "Authentication failed. Check your API key."
    elif status == 403:
        message = "Access denied."
    elif status == 404:
        message = f"Resource not found: {path}"
    else:
        message = f"n8n API error: {status}"
        if remote_message:
            message = f"{message} - {remote_message}"

    return N8nApiError(message, status_code=status, details=body)


def _quote_id(workflow_id: str) -> str:
    # IDs are opaque; a "/" or "?" must not reach another endpoint.
    return quote(str(workflow_id), safe="")
