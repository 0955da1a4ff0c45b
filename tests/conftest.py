"""Shared fixtures: an in-memory stand-in for the n8n API client."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from n8n_gateway.gateway.errors import N8nApiError


class StubWorkflowApi:
    """Records calls and serves a single stored workflow."""

    def __init__(
        self,
        workflow: dict[str, Any] | None = None,
        *,
        get_error: Exception | None = None,
        update_error: Exception | None = None,
    ) -> None:
        self.workflow = workflow or {}
        self.get_error = get_error
        self.update_error = update_error
        self.calls: list[tuple[Any, ...]] = []

    def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        self.calls.append(("get", workflow_id))
        if self.get_error is not None:
            raise self.get_error
        return copy.deepcopy(self.workflow)

    def update_workflow(self, workflow_id: str, workflow: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update", workflow_id, workflow))
        if self.update_error is not None:
            raise self.update_error
        self.workflow = {**self.workflow, **workflow, "id": workflow_id}
        return copy.deepcopy(self.workflow)

    @property
    def update_calls(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == "update"]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def stored_workflow() -> dict[str, Any]:
    return {
        "id": "wf-1",
        "name": "A",
        "active": True,
        "nodes": [{"name": "Start", "type": "n8n-nodes-base.start", "parameters": {}}],
        "connections": {"Start": {"main": [[]]}},
        "settings": {"executionOrder": "v1"},
        "staticData": {"lastId": 7},
        "tags": [{"id": "t1", "name": "prod"}],
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }


@pytest.fixture
def api(stored_workflow: dict[str, Any]) -> StubWorkflowApi:
    return StubWorkflowApi(stored_workflow)


@pytest.fixture
def failing_fetch_api() -> StubWorkflowApi:
    return StubWorkflowApi(get_error=N8nApiError("Resource not found: /workflows/missing", status_code=404))
