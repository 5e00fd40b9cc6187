"""
Server configuration.

Loaded from an optional YAML file (terraform-mcp.yaml in the working
directory by default). Environment variables override file values.
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Literal, Optional

import yaml

from terraform_mcp.client.tfe import DEFAULT_ADDRESS, DEFAULT_TIMEOUT

CONFIG_FILE_NAME = "terraform-mcp.yaml"

TRANSPORTS = ("stdio", "sse", "streamable-http")


def split_csv(value: str) -> List[str]:
    """Split a comma-separated option into a list, keeping blanks for later cleanup."""
    return value.split(",") if value else []


@dataclass
class MCPConfig:
    """
    Terraform MCP server configuration.

    Attributes:
        host: Server bind address for network transports
        port: Server port for network transports
        transport: "stdio", "sse" or "streamable-http"
        toolsets: Enabled toolset names (may contain "all" or "default")
        tools: Individual tool names; when set, takes precedence over toolsets
        tfe_address: HCP Terraform / Terraform Enterprise address
        tfe_token: API token (never written back to the config file)
        request_timeout: Per-request timeout for the Terraform API, in seconds
        log_level: Logging level name
    """

    host: str = "127.0.0.1"
    port: int = 8080
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
    toolsets: List[str] = field(default_factory=lambda: ["default"])
    tools: List[str] = field(default_factory=list)
    tfe_address: str = DEFAULT_ADDRESS
    tfe_token: Optional[str] = None
    request_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "MCPConfig":
        """
        Load configuration from YAML, then apply environment overrides.

        Falls back to defaults if the file doesn't exist.

        Args:
            config_file: Path to the YAML file (default: ./terraform-mcp.yaml)

        Returns:
            MCPConfig instance with loaded/default values

        Raises:
            ValueError: If the file or an environment variable has an invalid value
        """
        config_file = config_file or Path.cwd() / CONFIG_FILE_NAME
        config_dict = {}

        if config_file.exists():
            try:
                with open(config_file) as f:
                    config_dict = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid {config_file.name}: {e}") from e
            if not isinstance(config_dict, dict):
                raise ValueError(f"Invalid {config_file.name}: expected a mapping")

        env = os.environ
        if "TFE_ADDRESS" in env:
            config_dict["tfe_address"] = env["TFE_ADDRESS"]
        if "TFE_TOKEN" in env:
            config_dict["tfe_token"] = env["TFE_TOKEN"]
        if "TFE_REQUEST_TIMEOUT" in env:
            try:
                config_dict["request_timeout"] = float(env["TFE_REQUEST_TIMEOUT"])
            except ValueError:
                raise ValueError(
                    f"Invalid TFE_REQUEST_TIMEOUT: {env['TFE_REQUEST_TIMEOUT']}. "
                    "Must be a number of seconds."
                )
        if "MCP_SERVER_HOST" in env:
            config_dict["host"] = env["MCP_SERVER_HOST"]
        if "MCP_SERVER_PORT" in env:
            try:
                config_dict["port"] = int(env["MCP_SERVER_PORT"])
            except ValueError:
                raise ValueError(
                    f"Invalid MCP_SERVER_PORT: {env['MCP_SERVER_PORT']}. "
                    "Must be an integer."
                )
        if "MCP_SERVER_TRANSPORT" in env:
            config_dict["transport"] = env["MCP_SERVER_TRANSPORT"]
        if "ENABLE_TF_TOOLSETS" in env:
            config_dict["toolsets"] = split_csv(env["ENABLE_TF_TOOLSETS"])
        if "ENABLE_TF_TOOLS" in env:
            config_dict["tools"] = split_csv(env["ENABLE_TF_TOOLS"])
        if "LOG_LEVEL" in env:
            config_dict["log_level"] = env["LOG_LEVEL"]

        for key in ("toolsets", "tools"):
            if isinstance(config_dict.get(key), str):
                config_dict[key] = split_csv(config_dict[key])

        config = cls(**{k: v for k, v in config_dict.items() if k in cls.__annotations__})
        config.validate()
        return config

    def validate(self) -> None:
        """
        Raises:
            ValueError: If transport, port or timeout is out of range
        """
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Invalid transport '{self.transport}'. "
                f"Must be one of: {', '.join(TRANSPORTS)}."
            )
        if not 0 < int(self.port) < 65536:
            raise ValueError(f"Invalid port {self.port}. Must be between 1 and 65535.")
        if self.request_timeout <= 0:
            raise ValueError(f"Invalid request timeout {self.request_timeout}. Must be positive.")

    def save(self, config_file: Optional[Path] = None) -> None:
        """
        Save configuration to YAML.

        Does NOT save tfe_token (tokens should come from env vars).
        """
        config_file = config_file or Path.cwd() / CONFIG_FILE_NAME
        config_file.parent.mkdir(parents=True, exist_ok=True)

        config_dict = asdict(self)
        config_dict.pop("tfe_token")

        with open(config_file, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
