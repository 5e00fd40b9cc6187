"""
FastMCP server initialization and configuration.

Main server class that resolves the enabled tools for the session,
registers them with FastMCP and runs the configured transport.
"""

import logging
import socket
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Literal, Optional, Sequence

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_context
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult as MCPToolResult
from mcp.types import TextContent, ToolAnnotations
from pydantic import PrivateAttr

from terraform_mcp.client import ClientProvider
from terraform_mcp.client.tfe import DEFAULT_ADDRESS, DEFAULT_TIMEOUT
from terraform_mcp.config import TRANSPORTS
from terraform_mcp.dispatch import ToolDispatcher
from terraform_mcp.tools import ToolCatalog, ToolDefinition, build_catalog
from terraform_mcp.toolsets import (
    ToolsetRegistry,
    build_individual_mode_list,
    default_registry,
    expand_toolsets,
    parse_tool_names,
    parse_toolsets,
)
from terraform_mcp.toolsets.toolsets import clean_names

logger = logging.getLogger(__name__)


def resolve_enabled_list(
    toolsets: Sequence[str],
    tools: Sequence[str],
    registry: Optional[ToolsetRegistry] = None,
) -> List[str]:
    """
    Turn configured toolset and tool names into the session's enabled list.

    Individual tools take precedence over toolsets. Invalid names are logged
    and skipped; valid names still proceed.

    Raises:
        ValueError: If no valid name remains
    """
    if clean_names(tools):
        valid, invalid = parse_tool_names(tools, registry)
        if invalid:
            logger.warning("Ignoring unknown tool names: %s", ", ".join(invalid))
        if not valid:
            raise ValueError(f"No valid tool names provided: {', '.join(invalid)}")
        return build_individual_mode_list(valid)

    valid, invalid = parse_toolsets(toolsets)
    if invalid:
        logger.warning("Ignoring unknown toolsets: %s", ", ".join(invalid))
    if not valid:
        raise ValueError(f"No valid toolsets provided: {', '.join(invalid) or '(empty)'}")
    return expand_toolsets(valid)


def _current_session_id() -> str:
    try:
        return get_context().session_id or "default"
    except RuntimeError:
        # Called outside of an MCP request
        return "default"


class DispatchedTool(Tool):
    """FastMCP tool whose calls go through the ToolDispatcher."""

    _dispatcher: Optional[ToolDispatcher] = PrivateAttr(default=None)

    @classmethod
    def from_definition(cls, definition: ToolDefinition, dispatcher: ToolDispatcher) -> "DispatchedTool":
        tool = cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema(),
            annotations=ToolAnnotations(**definition.annotations()),
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: Dict[str, Any]) -> MCPToolResult:
        result = await self._dispatcher.call(self.name, arguments, session_id=_current_session_id())
        if result.is_error:
            raise ToolError(result.text)
        return MCPToolResult(content=[TextContent(type="text", text=result.text)])


@dataclass
class MCPServer:
    """
    Terraform MCP server instance.

    Attributes:
        host: Server bind address (network transports only)
        port: Server port (network transports only)
        transport: Transport mode ("stdio", "sse" or "streamable-http")
        toolsets: Enabled toolset names
        tools: Individual tool names; when non-empty, only these are enabled
        tfe_address: Terraform API address
        tfe_token: Terraform API token
        request_timeout: Terraform API request timeout in seconds
        http_transport: Optional httpx transport for the API client (tests)
    """

    host: str = "127.0.0.1"
    port: int = 8080
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
    toolsets: List[str] = field(default_factory=lambda: ["default"])
    tools: List[str] = field(default_factory=list)
    tfe_address: str = DEFAULT_ADDRESS
    tfe_token: Optional[str] = None
    request_timeout: float = DEFAULT_TIMEOUT
    http_transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)
    registry: ToolsetRegistry = field(default_factory=default_registry, repr=False)
    enabled_list: List[str] = field(default_factory=list, init=False)
    _app: Optional[FastMCP] = field(default=None, init=False, repr=False)
    _dispatcher: Optional[ToolDispatcher] = field(default=None, init=False, repr=False)
    _active_lifespans: int = field(default=0, init=False, repr=False)

    def __post_init__(self):
        """Validate configuration and register the enabled tools."""
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Invalid transport '{self.transport}'. "
                f"Must be one of: {', '.join(TRANSPORTS)}."
            )

        self.enabled_list = resolve_enabled_list(self.toolsets, self.tools, self.registry)

        self.client_provider = ClientProvider(
            address=self.tfe_address,
            token=self.tfe_token,
            timeout=self.request_timeout,
            transport=self.http_transport,
        )
        self._dispatcher = ToolDispatcher(
            catalog=build_catalog(),
            enabled_list=self.enabled_list,
            client_provider=self.client_provider,
            registry=self.registry,
        )

        self._app = FastMCP("Terraform MCP Server", lifespan=self._lifespan)
        self._register_tools()

    @asynccontextmanager
    async def _lifespan(self, app: FastMCP) -> AsyncIterator[Dict[str, Any]]:
        """
        Close the shared Terraform API connections when the server stops.

        Depending on the transport FastMCP may enter the lifespan once per
        session; connections close when the last one exits.
        """
        self._active_lifespans += 1
        try:
            yield {}
        finally:
            self._active_lifespans -= 1
            if self._active_lifespans == 0:
                await self.client_provider.aclose()
                logger.debug("Closed Terraform API clients")

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    @property
    def catalog(self) -> ToolCatalog:
        return self._dispatcher.catalog

    def _check_port_available(self, host: str, port: int) -> bool:
        """Check if port is available for binding."""
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind((host, port))
                return True
        except OSError:
            return False

    def _register_tools(self):
        """Register the tools enabled for this session with FastMCP."""
        enabled = self._dispatcher.enabled_tools()
        for definition in enabled:
            self._app.add_tool(DispatchedTool.from_definition(definition, self._dispatcher))
        logger.info(
            "Registered %d of %d tools (enabled: %s)",
            len(enabled),
            len(self.catalog),
            ", ".join(self.enabled_list),
        )

    def enabled_tool_names(self) -> List[str]:
        return [tool.name for tool in self._dispatcher.enabled_tools()]

    def start(self):
        """
        Start the MCP server with configured transport.

        Raises:
            RuntimeError: If the port is unavailable or FastMCP fails to start
        """
        if not self._app:
            raise RuntimeError("FastMCP app not initialized. This should not happen.")

        if self.transport == "stdio":
            try:
                self._app.run()
            except Exception as e:
                raise RuntimeError(f"Failed to start MCP server with stdio transport: {e}") from e
            return

        if not self._check_port_available(self.host, self.port):
            raise RuntimeError(
                f"Port {self.port} already in use. "
                f"Choose a different port or stop the conflicting service."
            )

        try:
            self._app.run(transport=self.transport, host=self.host, port=self.port)
        except Exception as e:
            raise RuntimeError(
                f"Failed to start MCP server on {self.host}:{self.port}: {e}"
            ) from e
