"""
Tool dispatch: the enablement check in front of every handler.

The dispatcher owns the session's enabled-toolset list and the registry.
A tool call is checked with is_tool_enabled() before the handler runs, and
tool listing only returns enabled tools.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from terraform_mcp.client import ClientProvider
from terraform_mcp.tools import ToolCatalog, ToolContext, ToolDefinition, ToolRequest, ToolResult
from terraform_mcp.toolsets import ToolsetRegistry, default_registry, is_tool_enabled

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """
    Routes tool invocations to handlers for one server session configuration.

    Args:
        catalog: Implemented tools
        enabled_list: Enabled-toolset list (toolsets, "all", or individual-tool mode)
        client_provider: Source of Terraform API clients
        registry: Tool -> toolset table (default registry if omitted)
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        enabled_list: Sequence[str],
        client_provider: ClientProvider,
        registry: Optional[ToolsetRegistry] = None,
    ):
        self.catalog = catalog
        self.enabled_list = tuple(enabled_list)
        self.client_provider = client_provider
        self.registry = registry if registry is not None else default_registry()

    def is_enabled(self, tool_name: str) -> bool:
        return is_tool_enabled(tool_name, self.enabled_list, self.registry)

    def enabled_tools(self) -> List[ToolDefinition]:
        """Return the implemented tools this session exposes, in catalog order."""
        return [tool for tool in self.catalog if self.is_enabled(tool.name)]

    async def call(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        session_id: str = "default",
    ) -> ToolResult:
        """
        Invoke a tool by name.

        Disabled or unknown tools are rejected before any remote call.
        Handler failures become error results; cancellation propagates.
        """
        definition = self.catalog.get(name)
        if definition is None or not self.is_enabled(name):
            logger.warning("Rejected call to disabled or unknown tool: %s", name)
            return ToolResult(text=f"tool '{name}' is disabled or unknown", is_error=True)

        context = ToolContext(client_provider=self.client_provider, session_id=session_id)
        request = ToolRequest(name=name, arguments=dict(arguments or {}))

        try:
            return await definition.handler(context, request)
        except asyncio.CancelledError:
            logger.info("Tool call cancelled: %s", name)
            raise
        except Exception as e:
            logger.exception("Unhandled error in tool %s", name)
            return ToolResult(text=f"tool '{name}' failed: {e}", is_error=True)
