"""Gateway errors."""

from __future__ import annotations

from typing import Any


class N8nApiError(Exception):
    """Raised for any failure talking to the n8n API, or for bad tool arguments."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(N8nApiError):
    """Tool arguments have the wrong shape. Raised before any request is sent."""


class ConfigError(ValueError):
    """Missing or invalid environment configuration."""


class ToolExecutionError(RuntimeError):
    def __init__(self, *, tool_name: str, cause: BaseException):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"tool '{tool_name}': {type(cause).__name__}: {cause}")


class ToolNotFoundError(Exception):
    """Raised when a tool is not found."""


class DuplicateToolError(ValueError):
    """Raised when trying to add a tool with a name that already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already exists: {name}")
