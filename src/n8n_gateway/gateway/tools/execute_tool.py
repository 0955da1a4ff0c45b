"""Execute a single registered tool."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ...logger import get_logger
from ..errors import ToolExecutionError

if TYPE_CHECKING:
    from ..manager import ToolManager
    from .base import ToolCallResult


_log = get_logger("n8n_gateway.gateway.tools.execute_tool")


async def execute_tool(manager: ToolManager, *, tool_name: str, args: Mapping[str, Any]) -> ToolCallResult:
    """Execute a single tool by name.

    Handlers report argument and API failures as error results; anything that
    escapes them (unknown tool, handler bug) is raised as ToolExecutionError.
    """
    _log.info(
        f"Tool: {tool_name}",
        extra={"event": "tool_execute_start", "tool_name": tool_name, "input_args": dict(args)},
    )

    start_time = time.perf_counter()
    try:
        result = await manager.call(tool_name, args)
    except Exception as exc:
        duration_ms = (time.perf_counter() - start_time) * 1000
        _log.error(
            f"Tool: {tool_name} FAILED [Duration: {duration_ms:.2f}ms]",
            extra={
                "event": "tool_execute_error",
                "tool_name": tool_name,
                "duration_ms": duration_ms,
                "error_type": type(exc).__name__,
                "error_message": str(exc),
            },
            exc_info=True,
        )
        raise ToolExecutionError(tool_name=tool_name, cause=exc) from exc

    duration_ms = (time.perf_counter() - start_time) * 1000
    _log.info(
        f"Tool: {tool_name} [Duration: {duration_ms:.2f}ms]{' ERROR' if result.is_error else ''}",
        extra={
            "event": "tool_execute_complete",
            "tool_name": tool_name,
            "duration_ms": duration_ms,
            "is_error": result.is_error,
            "output": result.text,
        },
    )
    return result
