"""Plan tools: details, logs and structured JSON output."""

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


async def get_plan_details_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        plan_id = request.require_string("plan_id")
    except MissingParameterError as e:
        return tool_error("missing required input: plan_id", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        plan = await client.read_plan(plan_id)
    except TfeError as e:
        return tool_error(f"plan not found: {plan_id}", cause=e)

    try:
        return ToolResult(encode_document(plan))
    except EncodingError as e:
        return tool_error("failed to marshal plan details", e)


async def get_plan_logs_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        plan_id = request.require_string("plan_id")
    except MissingParameterError as e:
        return tool_error("missing required input: plan_id", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        logs = await client.plan_logs(plan_id)
    except TfeError as e:
        return tool_error(f"failed to retrieve plan logs: {plan_id}", cause=e)

    return ToolResult(logs)


async def get_plan_json_output_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        plan_id = request.require_string("plan_id")
    except MissingParameterError as e:
        return tool_error("missing required input: plan_id", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        output = await client.read_plan_json_output(plan_id)
    except TfeError as e:
        return tool_error(f"failed to retrieve plan JSON output: {plan_id}", cause=e)

    return ToolResult(output)


GET_PLAN_DETAILS = ToolDefinition(
    name="get_plan_details",
    title="Get detailed information about a Terraform plan",
    description="Fetches detailed information about a specific Terraform plan.",
    handler=get_plan_details_handler,
    parameters=(
        ToolParameter("plan_id", required=True, description="The ID of the plan to get details for"),
    ),
)

GET_PLAN_LOGS = ToolDefinition(
    name="get_plan_logs",
    title="Get logs for a Terraform plan",
    description="Retrieves the logs of a specific Terraform plan.",
    handler=get_plan_logs_handler,
    parameters=(
        ToolParameter("plan_id", required=True, description="The ID of the plan to get logs for"),
    ),
)

GET_PLAN_JSON_OUTPUT = ToolDefinition(
    name="get_plan_json_output",
    title="Get JSON output for a Terraform plan",
    description=(
        "Retrieves the structured JSON output of a specific Terraform plan. "
        "This includes detailed information about resource changes (create, update, delete), "
        "attribute values before and after, and plan metadata. This is more structured "
        "and easier to parse than plain logs."
    ),
    handler=get_plan_json_output_handler,
    parameters=(
        ToolParameter("plan_id", required=True, description="The ID of the plan to get JSON output for"),
    ),
)
