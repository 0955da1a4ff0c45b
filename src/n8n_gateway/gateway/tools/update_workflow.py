"""Update an existing n8n workflow."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any, NotRequired, TypedDict

from anyio import to_thread

from ...logger import get_logger
from ..errors import ValidationError
from ..manager import ToolSpec
from .base import BaseWorkflowToolHandler, ToolCallResult

_log = get_logger("n8n_gateway.gateway.tools.update_workflow")

TOOL_NAME = "update_workflow"

# Fields the caller may change, in payload order.
UPDATABLE_FIELDS = ("name", "nodes", "connections", "settings", "staticData")


class UpdateWorkflowArgs(TypedDict):
    workflowId: str
    name: NotRequired[str]
    nodes: NotRequired[list[dict[str, Any]]]
    connections: NotRequired[dict[str, Any]]
    settings: NotRequired[dict[str, Any]]
    staticData: NotRequired[dict[str, Any]]


def supplied_fields(args: Mapping[str, Any]) -> dict[str, Any]:
    """Return the updatable fields the caller actually provided (None means not provided)."""
    return {key: args[key] for key in UPDATABLE_FIELDS if args.get(key) is not None}


def validate_update_args(args: Mapping[str, Any]) -> str:
    """Check argument shapes and return the workflow ID."""
    workflow_id = args.get("workflowId")
    if not workflow_id:
        raise ValidationError("Missing required parameter: workflowId")

    nodes = args.get("nodes")
    if nodes is not None and not isinstance(nodes, (list, tuple)):
        raise ValidationError('Parameter "nodes" must be an array')

    connections = args.get("connections")
    if connections is not None and not isinstance(connections, Mapping):
        raise ValidationError('Parameter "connections" must be an object')

    return str(workflow_id)


def build_update_payload(current: Mapping[str, Any], args: Mapping[str, Any]) -> dict[str, Any]:
    """Merge caller fields over the stored workflow.

    Only the updatable fields are sent. A field the caller left out keeps its
    stored value; a field neither side has is omitted.
    """
    supplied = supplied_fields(args)
    payload: dict[str, Any] = {}
    for key in UPDATABLE_FIELDS:
        if key in supplied:
            value = supplied[key]
            payload[key] = list(value) if key == "nodes" else value
        elif key in current:
            payload[key] = current[key]
    return payload


def summarize_changes(current: Mapping[str, Any], args: Mapping[str, Any]) -> str:
    """Describe what the update touched.

    The name is compared with the stored one; the other fields are reported
    whenever they were supplied, without comparing contents.
    """
    supplied = supplied_fields(args)
    changes: list[str] = []

    if "name" in supplied and supplied["name"] != current.get("name"):
        old_name = current.get("name") or ""
        changes.append(f'name: "{old_name}" → "{supplied["name"]}"')
    for key in UPDATABLE_FIELDS[1:]:
        if key in supplied:
            changes.append(f"{key} updated")

    if not changes:
        return "No changes were made"
    return f"Changes: {', '.join(changes)}"


class UpdateWorkflowHandler(BaseWorkflowToolHandler):
    """Handler for the update_workflow tool."""

    tool_name = TOOL_NAME

    async def execute(self, args: Mapping[str, Any]) -> ToolCallResult:
        return await self.handle_execution(self.update, args)

    async def update(self, args: Mapping[str, Any]) -> ToolCallResult:
        """Fetch, merge, write back. Raises on validation or API failure."""
        workflow_id = validate_update_args(args)

        start_time = time.perf_counter()
        current = await to_thread.run_sync(self.api_client.get_workflow, workflow_id)

        payload = build_update_payload(current, args)
        updated = await to_thread.run_sync(self.api_client.update_workflow, workflow_id, payload)
        duration_ms = (time.perf_counter() - start_time) * 1000

        summary = summarize_changes(current, args)
        _log.info(
            f"Workflow {workflow_id} updated [Duration: {duration_ms:.2f}ms]",
            extra={
                "event": "workflow_update_complete",
                "workflow_id": workflow_id,
                "fields": sorted(payload),
                "summary": summary,
                "duration_ms": duration_ms,
            },
        )

        return self.format_success(
            {
                "id": updated.get("id"),
                "name": updated.get("name"),
                "active": updated.get("active"),
            },
            f"Workflow updated successfully. {summary}",
        )


def get_update_workflow_tool_definition() -> ToolSpec:
    return ToolSpec(
        name=TOOL_NAME,
        description="Update an existing workflow in n8n",
        inputSchema={
            "type": "object",
            "properties": {
                "workflowId": {
                    "type": "string",
                    "description": "ID of the workflow to update",
                },
                "name": {
                    "type": "string",
                    "description": "New name for the workflow",
                },
                "nodes": {
                    "type": "array",
                    "description": "Updated array of node objects that define the workflow",
                    "items": {"type": "object"},
                },
                "connections": {
                    "type": "object",
                    "description": "Updated connection mappings between nodes",
                },
                "settings": {
                    "type": "object",
                    "description": "Updated settings for the workflow",
                },
                "staticData": {
                    "type": "object",
                    "description": "Updated static data for the workflow",
                },
            },
            "required": ["workflowId"],
        },
    )
