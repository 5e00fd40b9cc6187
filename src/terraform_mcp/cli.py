"""Terraform MCP server command line."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from terraform_mcp.config import MCPConfig, split_csv
from terraform_mcp.logging_setup import configure_logging
from terraform_mcp.server import MCPServer, resolve_enabled_list
from terraform_mcp.tools import build_catalog
from terraform_mcp.toolsets import (
    AVAILABLE_TOOLSETS,
    DEFAULT_TOOLSETS,
    default_registry,
    is_tool_enabled,
)

app = typer.Typer(help="Terraform MCP server")
console = Console()
# stdout carries MCP messages under the stdio transport
err_console = Console(stderr=True)


def _load_config(config_file: Optional[Path]) -> MCPConfig:
    if config_file is not None and not config_file.exists():
        raise ValueError(f"Config file not found: {config_file}")
    return MCPConfig.load(config_file)


@app.command()
def start(
    transport: str = typer.Option(None, help="Transport: stdio, sse or streamable-http (overrides config)"),
    host: str = typer.Option(None, help="Server host (network transports only)"),
    port: int = typer.Option(None, help="Server port (network transports only)"),
    toolsets: str = typer.Option(None, help="Comma-separated toolsets to enable (e.g. terraform,registry or all)"),
    tools: str = typer.Option(None, help="Comma-separated individual tools to enable (overrides --toolsets)"),
    log_level: str = typer.Option(None, help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to terraform-mcp.yaml"),
):
    """
    Start the MCP server.

    Configuration is loaded from terraform-mcp.yaml if it exists, then
    environment variables, then command-line options.

    Examples:
        # Start with stdio transport and the default toolsets
        terraform-mcp start

        # Only expose plan tools
        terraform-mcp start --tools get_plan_details,get_plan_logs,get_plan_json_output

        # Streamable HTTP on all interfaces
        terraform-mcp start --transport streamable-http --host 0.0.0.0 --port 8080
    """
    try:
        config = _load_config(config_file)

        if transport is not None:
            config.transport = transport
        if host is not None:
            config.host = host
        if port is not None:
            config.port = port
        if toolsets is not None:
            config.toolsets = split_csv(toolsets)
        if tools is not None:
            config.tools = split_csv(tools)
        if log_level is not None:
            config.log_level = log_level
        config.validate()

        configure_logging(config.log_level)

        server = MCPServer(
            host=config.host,
            port=config.port,
            transport=config.transport,
            toolsets=config.toolsets,
            tools=config.tools,
            tfe_address=config.tfe_address,
            tfe_token=config.tfe_token,
            request_timeout=config.request_timeout,
        )

        err_console.print("[green]Starting Terraform MCP server...[/green]")
        err_console.print(f"Transport: {config.transport}")
        if config.transport != "stdio":
            err_console.print(f"Listening on {config.host}:{config.port}")
        err_console.print(f"Enabled tools: {', '.join(server.enabled_tool_names()) or '(none)'}")
        if not config.tfe_token:
            err_console.print("[yellow]TFE_TOKEN not set; Terraform tools will fail[/yellow]")

        server.start()
    except ValueError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)
    except RuntimeError as e:
        err_console.print(f"[red]Error starting server:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Server stopped by user[/yellow]")
        raise typer.Exit(0)


@app.command("tools")
def list_tools(
    toolsets: str = typer.Option(",".join(DEFAULT_TOOLSETS), help="Comma-separated toolsets to evaluate"),
    tools: str = typer.Option("", help="Comma-separated individual tools to evaluate (overrides --toolsets)"),
):
    """
    Show which implemented tools a toolset/tool selection exposes.

    Examples:
        terraform-mcp tools --toolsets registry
        terraform-mcp tools --tools list_runs,get_plan_logs
    """
    registry = default_registry()
    try:
        enabled_list = resolve_enabled_list(split_csv(toolsets), split_csv(tools), registry)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Terraform MCP Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Toolset")
    table.add_column("Enabled")
    table.add_column("Read-only")
    table.add_column("Destructive")

    for definition in build_catalog():
        toolset, _ = registry.toolset_of(definition.name)
        enabled = is_tool_enabled(definition.name, enabled_list, registry)
        table.add_row(
            definition.name,
            toolset,
            "[green]Yes[/green]" if enabled else "[red]No[/red]",
            "Yes" if definition.read_only else "No",
            "Yes" if definition.destructive else "No",
        )

    console.print(table)


@app.command("toolsets")
def list_toolsets():
    """Show the available toolsets."""
    registry = default_registry()

    table = Table(title="Terraform MCP Toolsets")
    table.add_column("Toolset", style="cyan")
    table.add_column("Tools", justify="right")
    table.add_column("Default")
    table.add_column("Description")

    for toolset in AVAILABLE_TOOLSETS:
        table.add_row(
            toolset.name,
            str(len(registry.tools_in(toolset.name))),
            "Yes" if toolset.name in DEFAULT_TOOLSETS else "No",
            toolset.description,
        )

    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
