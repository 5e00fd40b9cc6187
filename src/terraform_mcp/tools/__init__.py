"""
Terraform tool definitions and handlers.

Each tool is a ToolDefinition (name, annotations, parameter schema) bound to
an async handler that follows the contract in base.py. build_catalog()
returns every tool this server implements; which of them a session exposes
is decided by terraform_mcp.toolsets.
"""

from .applies import GET_APPLY_DETAILS, GET_APPLY_LOGS
from .base import (
    EncodingError,
    MissingParameterError,
    ToolCatalog,
    ToolContext,
    ToolDefinition,
    ToolParameter,
    ToolRequest,
    ToolResult,
    encode_document,
    encode_list,
    tool_error,
)
from .pagination import Pagination, PaginationError, optional_pagination_params
from .plans import GET_PLAN_DETAILS, GET_PLAN_JSON_OUTPUT, GET_PLAN_LOGS
from .runs import CREATE_RUN, GET_RUN_DETAILS, LIST_RUNS
from .workspaces import GET_WORKSPACE_DETAILS

ALL_TOOLS = (
    GET_WORKSPACE_DETAILS,
    LIST_RUNS,
    GET_RUN_DETAILS,
    CREATE_RUN,
    GET_PLAN_DETAILS,
    GET_PLAN_LOGS,
    GET_PLAN_JSON_OUTPUT,
    GET_APPLY_DETAILS,
    GET_APPLY_LOGS,
)


def build_catalog() -> ToolCatalog:
    """Return a catalog holding every implemented tool."""
    return ToolCatalog(ALL_TOOLS)


__all__ = [
    "ALL_TOOLS",
    "EncodingError",
    "MissingParameterError",
    "Pagination",
    "PaginationError",
    "ToolCatalog",
    "ToolContext",
    "ToolDefinition",
    "ToolParameter",
    "ToolRequest",
    "ToolResult",
    "build_catalog",
    "encode_document",
    "encode_list",
    "optional_pagination_params",
    "tool_error",
]
