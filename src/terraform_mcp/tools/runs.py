"""
Run tools: list, inspect and create Terraform runs.

list_runs is workspace-scoped when ``workspace_name`` is supplied and
organization-scoped otherwise. Both variants return the run items merged
with the pagination metadata of the remote response.
"""

import logging

from terraform_mcp.client import ClientUnavailableError, TfeError
from terraform_mcp.client.tfe import RUN_TYPES

from .base import (
    EncodingError,
    MissingParameterError,
    ToolContext,
    ToolDefinition,
    ToolParameter,
    ToolRequest,
    ToolResult,
    encode_document,
    encode_list,
    tool_error,
)
from .pagination import PAGINATION_PARAMETERS, PaginationError, optional_pagination_params

logger = logging.getLogger(__name__)

RUN_STATUSES = (
    "pending",
    "fetching",
    "fetching_completed",
    "pre_plan_running",
    "pre_plan_completed",
    "queuing",
    "plan_queued",
    "planning",
    "planned",
    "cost_estimating",
    "cost_estimated",
    "policy_checking",
    "policy_override",
    "policy_soft_failed",
    "policy_checked",
    "confirmed",
    "post_plan_running",
    "post_plan_completed",
    "planned_and_finished",
    "planned_and_saved",
    "apply_queued",
    "applying",
    "applied",
    "discarded",
    "errored",
    "canceled",
    "force_canceled",
)


async def list_runs_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        org_name = request.require_string("terraform_org_name").strip()
    except MissingParameterError as e:
        return tool_error("missing required input: terraform_org_name", e)

    workspace_name = request.get_string("workspace_name").strip()
    vcs_username = request.get_string("vcs_username").strip()
    statuses = request.get_string_list("status")

    try:
        pagination = optional_pagination_params(request)
    except PaginationError as e:
        return tool_error("invalid pagination parameters", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    if workspace_name:
        try:
            workspace = await client.read_workspace(org_name, workspace_name)
        except TfeError as e:
            return tool_error(
                f"workspace '{workspace_name}' not found in org '{org_name}'", cause=e
            )

        try:
            runs = await client.list_runs(
                workspace["data"]["id"],
                page_number=pagination.page,
                page_size=pagination.page_size,
                statuses=statuses,
                user=vcs_username,
            )
        except TfeError as e:
            return tool_error("failed to list runs in workspace", e)
    else:
        try:
            runs = await client.list_runs_for_organization(
                org_name,
                page_number=pagination.page,
                page_size=pagination.page_size,
                statuses=statuses,
                user=vcs_username,
            )
        except TfeError as e:
            return tool_error(f"failed to list runs in org '{org_name}'", cause=e)

    logger.debug("Listed %d runs for %s", len(runs.get("data") or []), workspace_name or org_name)

    try:
        return ToolResult(encode_list(runs))
    except EncodingError as e:
        return tool_error("failed to marshal runs", e)


async def get_run_details_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        run_id = request.require_string("run_id")
    except MissingParameterError as e:
        return tool_error("missing required input: run_id", e)

    try:
        client = context.get_client()
    except ClientUnavailableError as e:
        return tool_error("failed to get Terraform client", e)

    try:
        run = await client.read_run(run_id)
    except TfeError as e:
        return tool_error(f"run not found: {run_id}", cause=e)

    try:
        return ToolResult(encode_document(run))
    except EncodingError as e:
        return tool_error("failed to marshal run details", e)


async def create_run_handler(context: ToolContext, request: ToolRequest) -> ToolResult:
    try:
        org_name = request.require_string("terraform_org_name").strip()
    except MissingParameterError as e:
        return tool_error("missing required input: terraform_org_name", e)

    try:
        workspace_name = request.require_string("workspace_name").strip()
    except MissingParameterError as e:
        return tool_error("missing required input: workspace_name", e)

    message = request.get_string("message", "Triggered via Terraform MCP Server")
    run_type = request.get_string("run_type", "plan_and_apply")
    if run_type not in RUN_TYPES:
        return tool_error(
            f"invalid run_type '{run_type}', must be one of: {', '.join(RUN_TYPES)}"
        )

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
        run = await client.create_run(
            workspace["data"]["id"], message=message, run_type=run_type
        )
    except TfeError as e:
        return tool_error(f"failed to create run in workspace '{workspace_name}'", cause=e)

    logger.info("Created %s run in %s/%s", run_type, org_name, workspace_name)

    try:
        return ToolResult(encode_document(run))
    except EncodingError as e:
        return tool_error("failed to marshal run", e)


LIST_RUNS = ToolDefinition(
    name="list_runs",
    title="List Terraform runs",
    description="List or search Terraform runs in a specific workspace with optional filtering.",
    handler=list_runs_handler,
    parameters=(
        ToolParameter(
            "terraform_org_name",
            required=True,
            description=(
                "Lists the runs in Terraform Cloud/Enterprise organization "
                "based on filters if no workspace is specified"
            ),
        ),
        ToolParameter(
            "workspace_name",
            description=(
                "If specified, lists the runs in the given workspace "
                "instead of the organization based on filters"
            ),
        ),
        ToolParameter(
            "vcs_username",
            description="Searches for runs that match the VCS username you supply",
        ),
        ToolParameter(
            "status",
            type="array",
            description="Optional run status filter",
            enum=RUN_STATUSES,
        ),
        *PAGINATION_PARAMETERS,
    ),
)

GET_RUN_DETAILS = ToolDefinition(
    name="get_run_details",
    title="Get detailed information about a Terraform run",
    description="Fetches detailed information about a specific Terraform run.",
    handler=get_run_details_handler,
    parameters=(
        ToolParameter("run_id", required=True, description="The ID of the run to get details for"),
    ),
)

CREATE_RUN = ToolDefinition(
    name="create_run",
    title="Create a Terraform run",
    description=(
        "Creates a new Terraform run in the specified workspace. "
        "Depending on the workspace settings the run may apply changes to real infrastructure."
    ),
    handler=create_run_handler,
    read_only=False,
    destructive=True,
    parameters=(
        ToolParameter("terraform_org_name", required=True, description="The Terraform organization name"),
        ToolParameter("workspace_name", required=True, description="The name of the workspace to run in"),
        ToolParameter("message", description="Optional message describing the run"),
        ToolParameter(
            "run_type",
            description="Type of run to create",
            enum=RUN_TYPES,
            default="plan_and_apply",
        ),
    ),
)
