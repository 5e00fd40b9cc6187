"""
Tests for the terraform-mcp command line (start, tools, toolsets).

MCPServer is patched out for `start`; the listing commands run for real.
"""

from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from terraform_mcp import cli
from terraform_mcp.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_consoles(monkeypatch, tmp_path):
    """Render tables without wrapping and run outside any real config file."""
    monkeypatch.setattr(cli, "console", Console(width=200))
    monkeypatch.setattr(cli, "err_console", Console(stderr=True, width=200))
    monkeypatch.setattr(cli, "configure_logging", MagicMock())
    monkeypatch.chdir(tmp_path)
    for name in ("TFE_TOKEN", "ENABLE_TF_TOOLSETS", "ENABLE_TF_TOOLS", "MCP_SERVER_TRANSPORT"):
        monkeypatch.delenv(name, raising=False)


def table_rows(output):
    rows = {}
    for line in output.splitlines():
        cells = [cell.strip() for cell in line.split("│")[1:-1]]
        if cells:
            rows[cells[0]] = cells[1:]
    return rows


class TestStartCommand:

    @patch("terraform_mcp.cli.MCPServer")
    def test_start_default(self, mock_server_class):
        mock_server = MagicMock()
        mock_server.enabled_tool_names.return_value = ["list_runs"]
        mock_server_class.return_value = mock_server

        result = runner.invoke(app, ["start"])

        assert result.exit_code == 0
        assert "Starting Terraform MCP server" in result.output
        assert "Transport: stdio" in result.output
        assert "TFE_TOKEN not set" in result.output
        mock_server.start.assert_called_once()
        kwargs = mock_server_class.call_args.kwargs
        assert kwargs["toolsets"] == ["default"]
        assert kwargs["tools"] == []

    @patch("terraform_mcp.cli.MCPServer")
    def test_cli_options_override_config(self, mock_server_class, tmp_path, monkeypatch):
        (tmp_path / "terraform-mcp.yaml").write_text("toolsets: registry\nport: 9000\n")
        monkeypatch.setenv("TFE_TOKEN", "t")

        result = runner.invoke(app, [
            "start",
            "--transport", "sse",
            "--toolsets", "terraform",
            "--tools", "list_runs,get_plan_logs",
        ])

        assert result.exit_code == 0
        kwargs = mock_server_class.call_args.kwargs
        assert kwargs["transport"] == "sse"
        assert kwargs["port"] == 9000
        assert kwargs["toolsets"] == ["terraform"]
        assert kwargs["tools"] == ["list_runs", "get_plan_logs"]
        assert kwargs["tfe_token"] == "t"
        assert "Listening on 127.0.0.1:9000" in result.output

    @patch("terraform_mcp.cli.MCPServer")
    def test_configuration_error(self, mock_server_class):
        mock_server_class.side_effect = ValueError("No valid tool names provided: nope")

        result = runner.invoke(app, ["start", "--tools", "nope"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_invalid_transport(self):
        result = runner.invoke(app, ["start", "--transport", "carrier-pigeon"])

        assert result.exit_code == 1
        assert "Invalid transport" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["start", "--config", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    @patch("terraform_mcp.cli.MCPServer")
    def test_start_failure(self, mock_server_class):
        mock_server_class.return_value.start.side_effect = RuntimeError("Port 8080 already in use")
        mock_server_class.return_value.enabled_tool_names.return_value = []

        result = runner.invoke(app, ["start", "--transport", "streamable-http"])

        assert result.exit_code == 1
        assert "Error starting server" in result.output


class TestListingCommands:

    def test_tools_default_selection(self):
        result = runner.invoke(app, ["tools"])

        assert result.exit_code == 0
        rows = table_rows(result.output)
        assert rows["list_runs"][:2] == ["terraform", "Yes"]
        assert rows["create_run"] == ["terraform", "Yes", "No", "Yes"]

    def test_tools_individual_selection(self):
        result = runner.invoke(app, ["tools", "--tools", "get_plan_logs"])

        rows = table_rows(result.output)
        assert rows["get_plan_logs"][1] == "Yes"
        assert rows["list_runs"][1] == "No"

    def test_tools_registry_only(self):
        rows = table_rows(runner.invoke(app, ["tools", "--toolsets", "registry"]).output)

        assert all(cells[1] == "No" for cells in rows.values() if cells[0] == "terraform")

    def test_tools_invalid_selection(self):
        result = runner.invoke(app, ["tools", "--toolsets", "cloud"])

        assert result.exit_code == 1
        assert "No valid toolsets provided" in result.output

    def test_toolsets(self):
        result = runner.invoke(app, ["toolsets"])

        assert result.exit_code == 0
        rows = table_rows(result.output)
        assert rows["registry"][:2] == ["9", "Yes"]
        assert rows["registry-private"][:2] == ["4", "No"]
        assert rows["terraform"][:2] == ["33", "Yes"]
