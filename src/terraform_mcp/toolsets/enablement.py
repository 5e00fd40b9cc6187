"""
Tool enablement: individual-tool selection and the allow/deny decision.

The enabled-toolset list of a session is an overloaded list of strings:
toolset names, the ``all`` sentinel, or the individual-tools marker
followed by tool names. ToolEnablement is the tagged form of that list;
is_tool_enabled() converts the list and matches on the tag.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .mapping import ToolsetRegistry, default_registry
from .toolsets import ALL, INDIVIDUAL_TOOLS_MARKER, clean_names, contains_toolset

logger = logging.getLogger(__name__)


class EnablementMode(str, Enum):
    """How an enabled-toolset list is interpreted."""

    ALL = "all"
    TOOLSET = "toolset"
    INDIVIDUAL = "individual"


@dataclass(frozen=True)
class ToolEnablement:
    """
    Tagged view of an enabled-toolset list.

    Attributes:
        mode: ALL (every tool), TOOLSET (names are toolsets) or
            INDIVIDUAL (names are tool names)
        names: Toolset or tool names in configured order (empty for ALL)
    """

    mode: EnablementMode
    names: Tuple[str, ...] = ()

    @classmethod
    def all_tools(cls) -> "ToolEnablement":
        return cls(EnablementMode.ALL)

    @classmethod
    def by_toolsets(cls, toolsets: Iterable[str]) -> "ToolEnablement":
        return cls(EnablementMode.TOOLSET, tuple(toolsets))

    @classmethod
    def by_tools(cls, tool_names: Iterable[str]) -> "ToolEnablement":
        return cls(EnablementMode.INDIVIDUAL, tuple(tool_names))

    @classmethod
    def from_list(cls, enabled_list: Sequence[str]) -> "ToolEnablement":
        """
        Interpret an enabled-toolset list.

        ``all`` anywhere wins. Otherwise the individual-tools marker anywhere
        switches to individual mode, where every other entry is a tool name.
        """
        if ALL in enabled_list:
            return cls.all_tools()
        if INDIVIDUAL_TOOLS_MARKER in enabled_list:
            return cls.by_tools(
                name for name in enabled_list if name != INDIVIDUAL_TOOLS_MARKER
            )
        return cls.by_toolsets(enabled_list)

    def to_list(self) -> List[str]:
        """Render back to the list form held in session configuration."""
        if self.mode is EnablementMode.ALL:
            return [ALL]
        if self.mode is EnablementMode.INDIVIDUAL:
            return build_individual_mode_list(self.names)
        return list(self.names)

    def allows(self, tool_name: str, registry: Optional[ToolsetRegistry] = None) -> bool:
        """Decide whether ``tool_name`` may be listed and invoked."""
        if self.mode is EnablementMode.ALL:
            if registry is not None and tool_name not in registry:
                # TODO: confirm with product whether "all" should admit
                # names missing from the registry; kept permissive for now.
                logger.debug("Allowing unregistered tool %r under 'all'", tool_name)
            return True

        if self.mode is EnablementMode.INDIVIDUAL:
            # Membership is over the whole list form, marker included.
            return tool_name == INDIVIDUAL_TOOLS_MARKER or tool_name in self.names

        if registry is None:
            registry = default_registry()
        toolset, found = registry.toolset_of(tool_name)
        if not found:
            return False
        return contains_toolset(self.names, toolset)


def parse_tool_names(
    raw_names: Iterable[str],
    registry: Optional[ToolsetRegistry] = None,
) -> Tuple[List[str], List[str]]:
    """
    Split raw tool names into valid and invalid names.

    Each name is trimmed; empty names are dropped; duplicates keep only the
    first occurrence. A name is valid iff it is registered.

    Args:
        raw_names: Candidate tool names (e.g. from ``--tools``)
        registry: Registry to validate against (default registry if omitted)

    Returns:
        Tuple of (valid, invalid), disjoint and in first-occurrence order
    """
    if registry is None:
        registry = default_registry()
    known = registry.all_tool_names()
    valid: List[str] = []
    invalid: List[str] = []
    for name in clean_names(raw_names):
        if name in known:
            valid.append(name)
        else:
            invalid.append(name)
    return valid, invalid


def build_individual_mode_list(tool_names: Iterable[str]) -> List[str]:
    """
    Build an enabled list for individual-tool mode.

    The names are not re-validated; run them through parse_tool_names() first.
    """
    return [INDIVIDUAL_TOOLS_MARKER, *tool_names]


def is_tool_enabled(
    tool_name: str,
    enabled_list: Sequence[str],
    registry: Optional[ToolsetRegistry] = None,
) -> bool:
    """
    Decide whether a tool is enabled for a session.

    First match wins:
    1. ``all`` in the list: always True, even for unregistered names.
    2. Individual-tools marker in the list: True iff the tool name appears
       in the list (the marker itself included).
    3. Otherwise: True iff the tool is registered and its toolset is listed.
    """
    return ToolEnablement.from_list(enabled_list).allows(tool_name, registry)
