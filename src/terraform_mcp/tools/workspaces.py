"""Workspace tools."""

from terraform_mcp.client import ClientUnavailableError, TfeError

from .base import (
    EncodingError,
    MissingParameterError,
    ToolContext,
    ToolDefinition,
    ToolParameter,
    ToolRequest,
    ToolResult,
    encode_document,
    tool_error,
)


async def get_workspace_details_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        org_name = request.require_string("terraform_org_name").strip()
    except MissingParameterError as e:
        return tool_error("missing required input: terraform_org_name", e)

    try:
        workspace_name = request.require_string("workspace_name").strip()
    except MissingParameterError as e:
        return tool_error("missing required input: workspace_name", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        workspace = await client.read_workspace(org_name, workspace_name)
    except TfeError as e:
        return tool_error(
            f"workspace '{workspace_name}' not found in org '{org_name}'", cause=e
        )

    try:
        return ToolResult(encode_document(workspace))
    except EncodingError as e:
        return tool_error("failed to marshal workspace details", e)


GET_WORKSPACE_DETAILS = ToolDefinition(
    name="get_workspace_details",
    title="Get detailed information about a Terraform workspace",
    description="Fetches detailed information about a specific Terraform workspace.",
    handler=get_workspace_details_handler,
    parameters=(
        ToolParameter("terraform_org_name", required=True, description="The Terraform organization name"),
        ToolParameter("workspace_name", required=True, description="The name of the workspace"),
    ),
)
