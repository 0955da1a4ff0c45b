"""Tests for the n8n API client."""

from __future__ import annotations

import json
import threading
import time
from typing import Any
from unittest.mock import patch

import pytest
import requests

from n8n_gateway.gateway.client import N8nApiClient
from n8n_gateway.gateway.config import N8nConfig
from n8n_gateway.gateway.errors import N8nApiError


def make_response(status: int, body: Any = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = b"" if body is None else json.dumps(body).encode()
    return response


@pytest.fixture
def client() -> N8nApiClient:
    return N8nApiClient(N8nConfig(api_url="https://n8n.example.com/api/v1/", api_key="secret", timeout=5))


def test_session_headers(client: N8nApiClient) -> None:
    assert client.session.headers["X-N8N-API-KEY"] == "secret"
    assert client.session.headers["Content-Type"] == "application/json"
    assert client.base_url == "https://n8n.example.com/api/v1"


def test_get_workflow(client: N8nApiClient) -> None:
    with patch.object(client.session, "request", return_value=make_response(200, {"id": "wf-1"})) as request:
        assert client.get_workflow("wf-1") == {"id": "wf-1"}

    request.assert_called_once_with("GET", "https://n8n.example.com/api/v1/workflows/wf-1", timeout=5)


def test_update_workflow_sends_payload(client: N8nApiClient) -> None:
    payload = {"name": "B", "nodes": [], "connections": {}}
    stored = {"id": "wf-1", "active": False, **payload}
    with patch.object(client.session, "request", return_value=make_response(200, stored)) as request:
        assert client.update_workflow("wf-1", payload) == stored

    request.assert_called_once_with(
        "PUT",
        "https://n8n.example.com/api/v1/workflows/wf-1",
        timeout=5,
        json=payload,
    )


def test_empty_body_returns_empty_dict(client: N8nApiClient) -> None:
    with patch.object(client.session, "request", return_value=make_response(204)):
        assert client.get_workflow("wf-1") == {}


@pytest.mark.parametrize(
    ("status", "body", "message"),
    [
        (401, {"message": "unauthorized"}, "Authentication failed. Check your API key."),
        (403, None, "Access denied."),
        (404, {"message": "Not Found"}, "Resource not found: /workflows/wf-1"),
        (400, {"message": "request/body/nodes must be array"}, "n8n API error: 400 - request/body/nodes must be array"),
        (500, None, "n8n API error: 500"),
    ],
)
def test_http_errors(client: N8nApiClient, status: int, body: Any, message: str) -> None:
    with patch.object(client.session, "request", return_value=make_response(status, body)):
        with pytest.raises(N8nApiError) as exc_info:
            client.get_workflow("wf-1")

    assert str(exc_info.value) == message
    assert exc_info.value.status_code == status
    assert exc_info.value.details == body


def test_network_error(client: N8nApiClient) -> None:
    with patch.object(client.session, "request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(N8nApiError, match="Network error: refused") as exc_info:
            client.update_workflow("wf-1", {})

    assert exc_info.value.status_code is None


def test_check_connectivity(client: N8nApiClient) -> None:
    with patch.object(client.session, "request", return_value=make_response(200, {"data": []})) as request:
        client.check_connectivity()

    request.assert_called_once_with(
        "GET",
        "https://n8n.example.com/api/v1/workflows",
        timeout=5,
        params={"limit": 1},
    )


def test_check_connectivity_rejects_unexpected_body(client: N8nApiClient) -> None:
    with patch.object(client.session, "request", return_value=make_response(200, ["not", "a", "listing"])):
        with pytest.raises(N8nApiError, match="Unexpected response"):
            client.check_connectivity()


@pytest.mark.parametrize(
    ("workflow_id", "quoted"),
    [("wf-1/activate?x=", "wf-1%2Factivate%3Fx%3D"), ("../credentials", "..%2Fcredentials"), ("a b#c", "a%20b%23c")],
)
def test_workflow_id_is_escaped_in_path(client: N8nApiClient, workflow_id: str, quoted: str) -> None:
    with patch.object(client.session, "request", return_value=make_response(200, {"id": workflow_id})) as request:
        client.get_workflow(workflow_id)
        client.update_workflow(workflow_id, {})

    expected = f"https://n8n.example.com/api/v1/workflows/{quoted}"
    assert [c.args for c in request.call_args_list] == [("GET", expected), ("PUT", expected)]


def test_requests_from_threads_do_not_overlap(client: N8nApiClient) -> None:
    active = 0
    overlaps: list[int] = []
    guard = threading.Lock()

    def slow_request(*args: Any, **kwargs: Any) -> requests.Response:
        nonlocal active
        with guard:
            active += 1
            overlaps.append(active)
        time.sleep(0.01)
        with guard:
            active -= 1
        return make_response(200, {"id": "wf-1"})

    with patch.object(client.session, "request", side_effect=slow_request):
        threads = [threading.Thread(target=client.get_workflow, args=("wf-1",)) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    assert len(overlaps) == 4
    assert max(overlaps) == 1
