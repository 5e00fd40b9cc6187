"""
Toolset registry and tool enablement.

- mapping.py: immutable tool name -> toolset lookup table
- toolsets.py: toolset names, reserved sentinels and toolset parsing
- enablement.py: individual-tool selection and the allow/deny decision
"""

from .enablement import (
    EnablementMode,
    ToolEnablement,
    build_individual_mode_list,
    is_tool_enabled,
    parse_tool_names,
)
from .mapping import (
    TOOL_TO_TOOLSET,
    ToolsetRegistry,
    all_tool_names,
    default_registry,
    toolset_of,
)
from .toolsets import (
    ALL,
    AVAILABLE_TOOLSETS,
    DEFAULT,
    DEFAULT_TOOLSETS,
    INDIVIDUAL_TOOLS_MARKER,
    REGISTRY,
    REGISTRY_PRIVATE,
    TERRAFORM,
    Toolset,
    available_toolset_names,
    contains_toolset,
    expand_toolsets,
    parse_toolsets,
)

__all__ = [
    "ALL",
    "AVAILABLE_TOOLSETS",
    "DEFAULT",
    "DEFAULT_TOOLSETS",
    "INDIVIDUAL_TOOLS_MARKER",
    "REGISTRY",
    "REGISTRY_PRIVATE",
    "TERRAFORM",
    "TOOL_TO_TOOLSET",
    "EnablementMode",
    "ToolEnablement",
    "Toolset",
    "ToolsetRegistry",
    "all_tool_names",
    "available_toolset_names",
    "build_individual_mode_list",
    "contains_toolset",
    "default_registry",
    "expand_toolsets",
    "is_tool_enabled",
    "parse_tool_names",
    "parse_toolsets",
    "toolset_of",
]
