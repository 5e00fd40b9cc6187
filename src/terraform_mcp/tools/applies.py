"""Apply tools: details and logs."""

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


async def get_apply_details_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        apply_id = request.require_string("apply_id")
    except MissingParameterError as e:
        return tool_error("missing required input: apply_id", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        apply = await client.read_apply(apply_id)
    except TfeError as e:
        return tool_error(f"apply not found: {apply_id}", cause=e)

    try:
        return ToolResult(encode_document(apply))
    except EncodingError as e:
        return tool_error("failed to marshal apply details", e)


async def get_apply_logs_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        apply_id = request.require_string("apply_id")
    except MissingParameterError as e:
        return tool_error("missing required input: apply_id", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        logs = await client.apply_logs(apply_id)
    except TfeError as e:
        return tool_error(f"failed to retrieve apply logs: {apply_id}", cause=e)

    return ToolResult(logs)


GET_APPLY_DETAILS = ToolDefinition(
    name="get_apply_details",
    title="Get detailed information about a Terraform apply",
    description="Fetches detailed information about a specific Terraform apply.",
    handler=get_apply_details_handler,
    parameters=(
        ToolParameter("apply_id", required=True, description="The ID of the apply to get details for"),
    ),
)

GET_APPLY_LOGS = ToolDefinition(
    name="get_apply_logs",
    title="Get logs for a Terraform apply",
    description="Retrieves the logs of a specific Terraform apply.",
    handler=get_apply_logs_handler,
    parameters=(
        ToolParameter("apply_id", required=True, description="The ID of the apply to get logs for"),
    ),
)
