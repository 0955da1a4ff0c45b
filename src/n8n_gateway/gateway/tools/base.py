"""Shared plumbing for workflow tool handlers."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from ...logger import get_logger
from ..errors import N8nApiError

_log = get_logger("n8n_gateway.gateway.tools.base")


class WorkflowApi(Protocol):
    """The part of the n8n API client the workflow tools depend on."""

    def get_workflow(self, workflow_id: str) -> dict[str, Any]: ...

    def update_workflow(self, workflow_id: str, workflow: dict[str, Any]) -> dict[str, Any]: ...


@dataclass(frozen=True)
class ToolCallResult:
    """Result of a tool call, shaped like an MCP CallToolResult."""

    content: list[dict[str, Any]]
    is_error: bool = False
    data: Any = None
    message: str | None = None

    @property
    def text(self) -> str:
        return "\n".join(item["text"] for item in self.content if item.get("type") == "text")

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": self.content}
        if self.is_error:
            result["isError"] = True
        return result


class BaseWorkflowToolHandler:
    """Base class for tools that operate on n8n workflows.

    Subclasses implement ``execute`` and usually delegate to
    ``handle_execution`` so every failure comes back as an error result
    instead of an exception.
    """

    tool_name = "workflow_tool"

    def __init__(self, api_client: WorkflowApi) -> None:
        self.api_client = api_client

    async def execute(self, args: Mapping[str, Any]) -> ToolCallResult:
        raise NotImplementedError

    async def handle_execution(
        self,
        fn: Callable[[Mapping[str, Any]], Awaitable[ToolCallResult]],
        args: Mapping[str, Any],
    ) -> ToolCallResult:
        try:
            return await fn(args)
        except N8nApiError as exc:
            _log.warning(
                f"{self.tool_name} failed: {exc.message}",
                extra={
                    "event": "tool_handler_error",
                    "tool_name": self.tool_name,
                    "error_type": type(exc).__name__,
                    "status_code": exc.status_code,
                },
            )
            return self.format_error(exc.message)
        except Exception as exc:
            _log.error(
                f"{self.tool_name} crashed: {exc}",
                extra={"event": "tool_handler_crash", "tool_name": self.tool_name},
                exc_info=True,
            )
            return self.format_error(f"Error executing workflow tool: {exc}")

    @staticmethod
    def format_success(data: Any, message: str | None = None) -> ToolCallResult:
        rendered = json.dumps(data, indent=2, ensure_ascii=False) if isinstance(data, (dict, list)) else str(data)
        text = f"{message}\n\n{rendered}" if message else rendered
        return ToolCallResult(content=[{"type": "text", "text": text}], data=data, message=message)

    @staticmethod
    def format_error(message: str) -> ToolCallResult:
        return ToolCallResult(content=[{"type": "text", "text": message}], is_error=True, message=message)
