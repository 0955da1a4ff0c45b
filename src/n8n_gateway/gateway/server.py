"""n8n MCP gateway - FastMCP server exposing the workflow tools."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from anyio import to_thread
from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from ..logger import get_logger
from .client import N8nApiClient
from .config import N8nConfig, load_config
from .errors import N8nApiError, ToolExecutionError
from .manager import ToolManager
from .tools.base import WorkflowApi
from .tools.execute_tool import execute_tool as _execute_tool
from .tools.update_workflow import (
    UpdateWorkflowArgs,
    UpdateWorkflowHandler,
    get_update_workflow_tool_definition,
)

_log = get_logger("n8n_gateway.gateway.server")


@dataclass
class GatewayContext:
    """Lifespan context holding initialized resources."""

    manager: ToolManager


def build_tool_manager(api_client: WorkflowApi) -> ToolManager:
    """Register every workflow tool against the given API client."""
    manager = ToolManager()
    manager.add_handler(get_update_workflow_tool_definition(), UpdateWorkflowHandler(api_client))
    return manager


def create_gateway(
    config: N8nConfig | None = None,
    api_client: WorkflowApi | None = None,
    *,
    check_connectivity: bool = False,
) -> FastMCP[GatewayContext]:
    """Create the n8n MCP gateway server.

    Args:
        config: n8n connection settings; read from the environment when omitted
            and no api_client is given
        api_client: pre-built API client, mainly for tests
        check_connectivity: ping the n8n API on startup and log the outcome

    Returns:
        Configured FastMCP server ready to run
    """
    if api_client is None and config is None:
        config = load_config()

    @asynccontextmanager
    async def gateway_lifespan(_server: FastMCP) -> AsyncIterator[GatewayContext]:
        owned_client = N8nApiClient(config) if api_client is None else None
        client: WorkflowApi = owned_client if owned_client is not None else api_client  # type: ignore[assignment]

        if check_connectivity and owned_client is not None:
            try:
                await to_thread.run_sync(owned_client.check_connectivity)
                _log.info(f"Connected to n8n API at {owned_client.base_url}")
            except N8nApiError as e:
                # Keep serving; each tool call reports its own API error.
                _log.error(f"n8n API connectivity check failed: {e}")

        manager = build_tool_manager(client)
        _log.info(f"Gateway initialized with {len(manager)} tools")

        try:
            yield GatewayContext(manager=manager)
        finally:
            if owned_client is not None:
                owned_client.close()

    mcp: FastMCP[GatewayContext] = FastMCP("n8n-gateway", lifespan=gateway_lifespan)

    def _get_gateway_context(ctx: Context) -> GatewayContext:
        if ctx.request_context is None:
            raise RuntimeError("Request context not available")
        return ctx.request_context.lifespan_context  # type: ignore[return-value]

    async def _run(ctx: Context, tool_name: str, args: dict[str, Any]) -> dict[str, Any]:
        gateway_ctx = _get_gateway_context(ctx)
        try:
            result = await _execute_tool(gateway_ctx.manager, tool_name=tool_name, args=args)
        except ToolExecutionError as exc:
            raise RuntimeError(str(exc)) from exc
        if result.is_error:
            raise ToolError(result.text)
        return {**result.data, "message": result.message}

    definition = get_update_workflow_tool_definition()
    props = definition.inputSchema["properties"]

    @mcp.tool(name=definition.name, description=definition.description)
    async def update_workflow(
        ctx: Context,
        workflowId: str = Field(description=props["workflowId"]["description"]),
        name: str | None = Field(default=None, description=props["name"]["description"]),
        nodes: list[dict[str, Any]] | None = Field(default=None, description=props["nodes"]["description"]),
        connections: dict[str, Any] | None = Field(default=None, description=props["connections"]["description"]),
        settings: dict[str, Any] | None = Field(default=None, description=props["settings"]["description"]),
        staticData: dict[str, Any] | None = Field(default=None, description=props["staticData"]["description"]),
    ) -> dict[str, Any]:
        args: UpdateWorkflowArgs = {"workflowId": workflowId}
        optional = {
            "name": name,
            "nodes": nodes,
            "connections": connections,
            "settings": settings,
            "staticData": staticData,
        }
        args.update({key: value for key, value in optional.items() if value is not None})  # type: ignore[typeddict-item]
        return await _run(ctx, definition.name, dict(args))

    return mcp
