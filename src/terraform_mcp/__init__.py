"""
MCP (Model Context Protocol) server exposing HCP Terraform / Terraform
Enterprise operations as tools.

Architecture:
- server.py: FastMCP server initialization and tool registration
- config.py: Configuration loading (YAML file + environment)
- dispatch.py: Enablement check and routing of tool calls to handlers
- toolsets/: Tool -> toolset registry and enablement rules
- tools/: Tool definitions and handlers
- client/: Terraform API client
"""

__all__ = ["MCPServer", "MCPConfig", "ToolDispatcher"]

from .config import MCPConfig
from .dispatch import ToolDispatcher
from .server import MCPServer
