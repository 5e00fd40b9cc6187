"""
Toolset names and toolset configuration parsing.

A toolset is a named, fixed group of tools used for coarse-grained
enabling and disabling. The enabled-toolset list configured for a server
session holds toolset names, the reserved "all" sentinel, or the reserved
individual-tools marker followed by explicit tool names.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

REGISTRY = "registry"
REGISTRY_PRIVATE = "registry-private"
TERRAFORM = "terraform"

ALL = "all"
DEFAULT = "default"

# Entries after this marker are tool names, not toolset names.
INDIVIDUAL_TOOLS_MARKER = "__individual_tools__"


@dataclass(frozen=True)
class Toolset:
    """A named toolset and its human-readable description."""

    name: str
    description: str


AVAILABLE_TOOLSETS: Tuple[Toolset, ...] = (
    Toolset(REGISTRY, "Public Terraform Registry (providers, modules, policies)"),
    Toolset(REGISTRY_PRIVATE, "Private registry of an HCP Terraform / Terraform Enterprise organization"),
    Toolset(TERRAFORM, "HCP Terraform / Terraform Enterprise workspaces, runs, plans and applies"),
)

DEFAULT_TOOLSETS: Tuple[str, ...] = (REGISTRY, TERRAFORM)


def available_toolset_names() -> List[str]:
    """Return the names of all real toolsets in declaration order."""
    return [toolset.name for toolset in AVAILABLE_TOOLSETS]


def contains_toolset(enabled: Iterable[str], name: str) -> bool:
    """Return True if ``name`` appears verbatim in the enabled list."""
    return name in enabled


def clean_names(raw_names: Iterable[str]) -> List[str]:
    """Trim, drop blanks and deduplicate, keeping first-occurrence order."""
    seen = set()
    cleaned = []
    for name in raw_names:
        trimmed = name.strip()
        if not trimmed or trimmed in seen:
            continue
        seen.add(trimmed)
        cleaned.append(trimmed)
    return cleaned


def parse_toolsets(raw_names: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Split raw toolset names into valid and invalid names.

    Args:
        raw_names: Candidate toolset names (e.g. from ``--toolsets``)

    Returns:
        Tuple of (valid, invalid), both deduplicated in first-occurrence order.
        ``all`` and ``default`` count as valid.
    """
    known = set(available_toolset_names()) | {ALL, DEFAULT}
    valid: List[str] = []
    invalid: List[str] = []
    for name in clean_names(raw_names):
        if name in known:
            valid.append(name)
        else:
            invalid.append(name)
    return valid, invalid


def expand_toolsets(names: Iterable[str]) -> List[str]:
    """
    Expand the ``default`` keyword and collapse ``all``.

    ``default`` is replaced in place by DEFAULT_TOOLSETS. If ``all`` is
    present the whole list becomes ``["all"]``.
    """
    names = list(names)
    if ALL in names:
        return [ALL]

    expanded: List[str] = []
    for name in names:
        group = DEFAULT_TOOLSETS if name == DEFAULT else (name,)
        for item in group:
            if item not in expanded:
                expanded.append(item)
    return expanded
