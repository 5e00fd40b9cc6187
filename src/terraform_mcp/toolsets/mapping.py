"""
Toolset registry: the static mapping of tool name to toolset name.

The registry is built once at startup and is read-only afterwards. The
dispatcher and server receive it explicitly; module-level helpers use a
process-wide default instance built from TOOL_TO_TOOLSET.
"""

from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Iterator, List, Mapping, Tuple

from .toolsets import REGISTRY, REGISTRY_PRIVATE, TERRAFORM

TOOL_TO_TOOLSET: Mapping[str, str] = MappingProxyType({
    # Public registry (providers, modules, policies)
    "search_providers": REGISTRY,
    "get_provider_details": REGISTRY,
    "get_latest_provider_version": REGISTRY,
    "get_provider_capabilities": REGISTRY,
    "search_modules": REGISTRY,
    "get_module_details": REGISTRY,
    "get_latest_module_version": REGISTRY,
    "search_policies": REGISTRY,
    "get_policy_details": REGISTRY,

    # Private registry
    "search_private_modules": REGISTRY_PRIVATE,
    "get_private_module_details": REGISTRY_PRIVATE,
    "search_private_providers": REGISTRY_PRIVATE,
    "get_private_provider_details": REGISTRY_PRIVATE,

    # Workspaces, runs, variables, tags, stacks
    "list_terraform_orgs": TERRAFORM,
    "list_terraform_projects": TERRAFORM,
    "list_workspaces": TERRAFORM,
    "get_workspace_details": TERRAFORM,
    "create_workspace": TERRAFORM,
    "create_no_code_workspace": TERRAFORM,
    "update_workspace": TERRAFORM,
    "delete_workspace_safely": TERRAFORM,
    "list_runs": TERRAFORM,
    "get_run_details": TERRAFORM,
    "get_plan_details": TERRAFORM,
    "get_plan_logs": TERRAFORM,
    "get_plan_json_output": TERRAFORM,
    "get_apply_details": TERRAFORM,
    "get_apply_logs": TERRAFORM,
    "create_run": TERRAFORM,
    "action_run": TERRAFORM,
    "list_workspace_variables": TERRAFORM,
    "create_workspace_variable": TERRAFORM,
    "update_workspace_variable": TERRAFORM,
    "list_variable_sets": TERRAFORM,
    "create_variable_set": TERRAFORM,
    "create_variable_in_variable_set": TERRAFORM,
    "delete_variable_in_variable_set": TERRAFORM,
    "attach_variable_set_to_workspaces": TERRAFORM,
    "detach_variable_set_from_workspaces": TERRAFORM,
    "create_workspace_tags": TERRAFORM,
    "read_workspace_tags": TERRAFORM,
    "attach_policy_set_to_workspaces": TERRAFORM,
    "get_token_permissions": TERRAFORM,
    "list_stacks": TERRAFORM,
    "get_stack_details": TERRAFORM,
    "list_workspace_policy_sets": TERRAFORM,
})


class ToolsetRegistry:
    """
    Immutable lookup table from tool name to toolset name.

    Every registered tool belongs to exactly one toolset. Lookups never
    raise: an unregistered name is reported through the ``found`` flag.
    """

    __slots__ = ("_mapping", "_names")

    def __init__(self, mapping: Mapping[str, str]):
        for tool_name, toolset in mapping.items():
            if not tool_name or not toolset:
                raise ValueError(
                    f"Invalid registry entry: {tool_name!r} -> {toolset!r}"
                )
        self._mapping: Mapping[str, str] = MappingProxyType(dict(mapping))
        self._names: FrozenSet[str] = frozenset(self._mapping)

    def toolset_of(self, tool_name: str) -> Tuple[str, bool]:
        """
        Look up the toolset a tool belongs to.

        Returns:
            ``(toolset_name, True)`` for registered tools, ``("", False)`` otherwise
        """
        toolset = self._mapping.get(tool_name)
        if toolset is None:
            return "", False
        return toolset, True

    def all_tool_names(self) -> FrozenSet[str]:
        """Return the full set of registered tool names."""
        return self._names

    def tools_in(self, toolset: str) -> List[str]:
        """Return the sorted names of the tools in ``toolset``."""
        return sorted(name for name, owner in self._mapping.items() if owner == toolset)

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._mapping

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"ToolsetRegistry({len(self)} tools)"


@lru_cache(maxsize=None)
def default_registry() -> ToolsetRegistry:
    """Return the registry built from TOOL_TO_TOOLSET (built once)."""
    return ToolsetRegistry(TOOL_TO_TOOLSET)


def toolset_of(tool_name: str) -> Tuple[str, bool]:
    """Look up ``tool_name`` in the default registry."""
    return default_registry().toolset_of(tool_name)


def all_tool_names() -> FrozenSet[str]:
    """Return every tool name in the default registry."""
    return default_registry().all_tool_names()
