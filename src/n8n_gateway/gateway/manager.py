"""Tool registry - storage, lookup and execution by name.

- ToolSpec: tool schema (MCP aligned)
- Tool: runtime tool representation
- ToolManager: storage, lookup, and handler registration
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import DuplicateToolError, ToolNotFoundError

if TYPE_CHECKING:
    from .tools.base import BaseWorkflowToolHandler, ToolCallResult


@dataclass(frozen=True)
class ToolSpec:
    """Tool schema - MCP aligned."""

    name: str
    description: str
    inputSchema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.inputSchema,
        }


@dataclass(frozen=True)
class Tool:
    """A registered tool: its schema plus the coroutine that runs it."""

    spec: ToolSpec
    execute: Callable[[Mapping[str, Any]], Awaitable[ToolCallResult]]

    async def call(self, args: Mapping[str, Any]) -> ToolCallResult:
        return await self.execute(args)


class ToolManager:
    """Manages tools - storage, lookup and dispatch."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    async def call(self, name: str, args: Mapping[str, Any]) -> ToolCallResult:
        """Execute a tool by name."""
        return await self.get(name).call(args)

    def add(self, tool: Tool) -> None:
        if tool.spec.name in self._tools:
            raise DuplicateToolError(tool.spec.name)
        self._tools[tool.spec.name] = tool

    def add_handler(self, spec: ToolSpec, handler: BaseWorkflowToolHandler) -> ToolSpec:
        """Register a workflow tool handler under the given definition."""
        self.add(Tool(spec=spec, execute=handler.execute))
        return spec

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            raise ToolNotFoundError(f"Tool not found: {name}")
        return self._tools[name]

    def has(self, name: str) -> bool:
        return name in self._tools

    def tool_names(self) -> frozenset[str]:
        return frozenset(self._tools)

    def specs(self) -> list[ToolSpec]:
        return [t.spec for t in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
