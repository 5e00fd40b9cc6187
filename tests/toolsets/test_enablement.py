"""Tests for individual-tool selection and the enablement decision."""

import pytest

from terraform_mcp.toolsets import (
    ALL,
    INDIVIDUAL_TOOLS_MARKER,
    REGISTRY,
    REGISTRY_PRIVATE,
    TERRAFORM,
    EnablementMode,
    ToolEnablement,
    ToolsetRegistry,
    all_tool_names,
    build_individual_mode_list,
    is_tool_enabled,
    parse_tool_names,
    toolset_of,
)


class TestParseToolNames:
    """parse_tool_names splits raw names into valid and invalid."""

    def test_mixed_input(self):
        """Blank entries vanish, duplicates collapse, unknown names are invalid."""
        valid, invalid = parse_tool_names(["list_runs", " ", "list_runs", "not_a_tool"])

        assert valid == ["list_runs"]
        assert invalid == ["not_a_tool"]

    def test_whitespace_is_trimmed(self):
        valid, invalid = parse_tool_names(["  get_plan_logs\t", "\nget_apply_logs "])

        assert valid == ["get_plan_logs", "get_apply_logs"]
        assert invalid == []

    def test_first_occurrence_order(self):
        valid, invalid = parse_tool_names(
            ["get_apply_logs", "zzz", "list_runs", "aaa", "get_apply_logs", "zzz"]
        )

        assert valid == ["get_apply_logs", "list_runs"]
        assert invalid == ["zzz", "aaa"]

    def test_dedup_is_exact_match(self):
        """Case differs -> different names; neither is registered in upper case."""
        valid, invalid = parse_tool_names(["list_runs", "LIST_RUNS"])

        assert valid == ["list_runs"]
        assert invalid == ["LIST_RUNS"]

    def test_empty_input(self):
        assert parse_tool_names([]) == ([], [])
        assert parse_tool_names(["", "  ", "\t"]) == ([], [])

    def test_idempotent_on_valid_output(self):
        raw = ["create_run", "nope", " list_runs", "create_run", "", "get_plan_details"]
        valid, _ = parse_tool_names(raw)

        assert parse_tool_names(valid) == (valid, [])

    @pytest.mark.parametrize("raw", [
        ["list_runs", "list_runs", "list_runs"],
        [" ", "a", "a ", " a", "get_plan_logs", "get_plan_logs "],
        ["x", "", "y", "x", "search_modules", "\t", "y"],
    ])
    def test_outputs_have_no_duplicates_or_blanks(self, raw):
        valid, invalid = parse_tool_names(raw)
        combined = valid + invalid

        assert len(combined) == len(set(combined))
        assert all(name.strip() == name and name for name in combined)
        assert len(combined) <= len([name for name in raw if name.strip()])
        assert set(valid).isdisjoint(invalid)

    def test_custom_registry(self):
        registry = ToolsetRegistry({"tool_a": "alpha"})

        assert parse_tool_names(["tool_a", "list_runs"], registry) == (["tool_a"], ["list_runs"])


class TestBuildIndividualModeList:

    def test_marker_first_then_names(self):
        assert build_individual_mode_list(["get_plan_details", "list_runs"]) == [
            INDIVIDUAL_TOOLS_MARKER,
            "get_plan_details",
            "list_runs",
        ]

    def test_names_are_not_revalidated(self):
        assert build_individual_mode_list(["not_a_tool"]) == [INDIVIDUAL_TOOLS_MARKER, "not_a_tool"]

    def test_empty(self):
        assert build_individual_mode_list([]) == [INDIVIDUAL_TOOLS_MARKER]


class TestIsToolEnabled:
    """The three-branch decision."""

    @pytest.mark.parametrize("tool_name", ["list_runs", "search_modules", "not_a_tool", "", "anything"])
    def test_all_allows_everything(self, tool_name):
        """'all' short-circuits before the registry lookup."""
        assert is_tool_enabled(tool_name, [ALL]) is True
        assert is_tool_enabled(tool_name, [REGISTRY, ALL]) is True

    @pytest.mark.parametrize("tool_name", sorted(all_tool_names()) + ["not_a_tool"])
    def test_empty_list_denies_everything(self, tool_name):
        assert is_tool_enabled(tool_name, []) is False

    def test_individual_mode(self):
        enabled = build_individual_mode_list(["get_plan_details"])

        assert is_tool_enabled("get_plan_details", enabled) is True
        assert is_tool_enabled("create_run", enabled) is False

    def test_individual_mode_ignores_toolsets(self):
        """After the marker, a toolset name does not enable its tools."""
        enabled = build_individual_mode_list([TERRAFORM, "search_modules"])

        assert is_tool_enabled("list_runs", enabled) is False
        assert is_tool_enabled("search_modules", enabled) is True

    def test_individual_mode_with_unregistered_name(self):
        """Membership is verbatim; registration is not consulted."""
        enabled = build_individual_mode_list(["custom_tool"])

        assert is_tool_enabled("custom_tool", enabled) is True

    def test_marker_position_does_not_matter(self):
        enabled = ["get_plan_logs", INDIVIDUAL_TOOLS_MARKER]

        assert is_tool_enabled("get_plan_logs", enabled) is True
        assert is_tool_enabled("list_runs", enabled) is False

    def test_all_wins_over_individual_marker(self):
        enabled = build_individual_mode_list(["list_runs"]) + [ALL]

        assert is_tool_enabled("create_run", enabled) is True

    def test_toolset_mode(self):
        assert is_tool_enabled("list_runs", [TERRAFORM]) is True
        assert is_tool_enabled("list_runs", [REGISTRY]) is False
        assert is_tool_enabled("search_modules", [REGISTRY]) is True
        assert is_tool_enabled("search_private_modules", [REGISTRY, TERRAFORM]) is False
        assert is_tool_enabled("search_private_modules", [REGISTRY_PRIVATE]) is True

    def test_every_tool_is_enabled_only_by_its_own_toolset(self):
        toolsets = [REGISTRY, REGISTRY_PRIVATE, TERRAFORM]
        for tool_name in all_tool_names():
            owner, _ = toolset_of(tool_name)
            for toolset in toolsets:
                assert is_tool_enabled(tool_name, [toolset]) is (toolset == owner)

    def test_toolset_mode_denies_unregistered(self):
        assert is_tool_enabled("not_a_tool", [TERRAFORM, REGISTRY, REGISTRY_PRIVATE]) is False

    def test_toolset_name_is_not_a_tool_name(self):
        """Outside individual mode, a listed tool name does not enable it."""
        assert is_tool_enabled("list_runs", ["list_runs"]) is False

    def test_custom_registry(self):
        registry = ToolsetRegistry({"tool_a": "alpha"})

        assert is_tool_enabled("tool_a", ["alpha"], registry) is True
        assert is_tool_enabled("list_runs", [TERRAFORM], registry) is False


class TestToolEnablement:
    """Tagged form of the enabled list."""

    def test_from_list_all(self):
        enablement = ToolEnablement.from_list([TERRAFORM, ALL])

        assert enablement.mode is EnablementMode.ALL
        assert enablement.to_list() == [ALL]

    def test_from_list_individual(self):
        enablement = ToolEnablement.from_list(build_individual_mode_list(["list_runs", "get_plan_logs"]))

        assert enablement.mode is EnablementMode.INDIVIDUAL
        assert enablement.names == ("list_runs", "get_plan_logs")
        assert enablement.to_list() == [INDIVIDUAL_TOOLS_MARKER, "list_runs", "get_plan_logs"]

    def test_from_list_toolsets(self):
        enablement = ToolEnablement.from_list([TERRAFORM, REGISTRY])

        assert enablement.mode is EnablementMode.TOOLSET
        assert enablement.to_list() == [TERRAFORM, REGISTRY]

    def test_constructors_match_list_form(self):
        assert ToolEnablement.by_tools(["list_runs"]) == ToolEnablement.from_list(
            build_individual_mode_list(["list_runs"])
        )
        assert ToolEnablement.by_toolsets([TERRAFORM]) == ToolEnablement.from_list([TERRAFORM])
        assert ToolEnablement.all_tools() == ToolEnablement.from_list([ALL])

    def test_allows(self):
        assert ToolEnablement.all_tools().allows("not_a_tool") is True
        assert ToolEnablement.by_tools(["list_runs"]).allows("list_runs") is True
        assert ToolEnablement.by_tools(["list_runs"]).allows("create_run") is False
        assert ToolEnablement.by_toolsets([TERRAFORM]).allows("create_run") is True
        assert ToolEnablement.by_toolsets([]).allows("create_run") is False

    def test_is_immutable(self):
        enablement = ToolEnablement.by_toolsets([TERRAFORM])
        with pytest.raises(AttributeError):
            enablement.mode = EnablementMode.ALL


class TestInjectedRegistry:
    """An explicitly passed registry is used even when it is empty."""

    def test_parse_tool_names_with_empty_registry(self):
        assert parse_tool_names(["list_runs"], ToolsetRegistry({})) == ([], ["list_runs"])

    def test_is_tool_enabled_with_empty_registry(self):
        assert is_tool_enabled("list_runs", [TERRAFORM], ToolsetRegistry({})) is False

    def test_allows_with_empty_registry(self):
        assert ToolEnablement.by_toolsets([TERRAFORM]).allows("list_runs", ToolsetRegistry({})) is False


class TestIndividualModeMembership:
    """Individual mode tests membership against the full list, marker included."""

    def test_marker_is_a_member(self):
        enabled = build_individual_mode_list(["get_plan_details"])

        assert is_tool_enabled(INDIVIDUAL_TOOLS_MARKER, enabled) is True

    def test_marker_is_a_member_of_tagged_form(self):
        assert ToolEnablement.by_tools(["list_runs"]).allows(INDIVIDUAL_TOOLS_MARKER) is True

    def test_marker_is_not_a_member_in_toolset_mode(self):
        assert is_tool_enabled(INDIVIDUAL_TOOLS_MARKER, [TERRAFORM]) is False
