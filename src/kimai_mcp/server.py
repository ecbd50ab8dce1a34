#!/usr/bin/env python3
"""
Kimai MCP Server.

This server exposes the Kimai time-tracking API as MCP tools.

Features:
    - Customer, project and activity listings
    - Timesheet listings (filtered, recent, active)
    - Starting, logging and stopping timesheet records
    - Current user information

Configuration:
    Credentials are read from the Kimai config file
    (``$XDG_CONFIG_HOME/kimai/config.toml``), or from the file named by
    KIMAI_CONFIG_PATH.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from mcp.server.fastmcp import Context, FastMCP

from kimai_mcp.client import KimaiClient
from kimai_mcp.constants import ErrorKind
from kimai_mcp.dates import parse_datetime
from kimai_mcp.exceptions import KimaiAPIError, KimaiError
from kimai_mcp.settings import get_settings
from kimai_mcp.tools.formatting import (
    error_message,
    format_activities_markdown,
    format_activity_json,
    format_customer_json,
    format_customers_markdown,
    format_json,
    format_project_json,
    format_projects_markdown,
    format_record_json,
    format_record_markdown,
    format_timesheet_markdown,
    format_user_json,
    format_user_markdown,
)
from kimai_mcp.tools.inputs import (
    ActivityListInput,
    CustomerListInput,
    ProjectListInput,
    RecentTimesheetInput,
    RecordBeginInput,
    RecordLogInput,
    RecordStopInput,
    ResponseFormat,
    TimesheetListInput,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(mcp: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """
    Resolve the Kimai config once and share the client between tool calls.
    """
    logger.info("Initializing Kimai MCP Server...")

    try:
        client = KimaiClient.from_config_file()
    except KimaiError as e:
        logger.error("Failed to load Kimai config: %s", e.describe())
        raise

    logger.info("Kimai client configured for %s", client.config.host)
    yield {"client": client}
    logger.info("Kimai MCP Server stopped")


mcp = FastMCP(
    "kimai_mcp",
    lifespan=lifespan,
)


def get_client(ctx: Context) -> KimaiClient:
    """Get the Kimai client from context."""
    return ctx.request_context.lifespan_context["client"]


# =============================================================================
# Error Handling
# =============================================================================


def handle_error(e: Exception, operation: str) -> str:
    """Handle exceptions and return user-friendly error messages."""
    logger.exception("Error in %s: %s", operation, e)

    if not isinstance(e, KimaiError):
        return error_message(f"Unexpected error: {e}")

    if isinstance(e, KimaiAPIError):
        if e.status_code in (401, 403):
            return error_message(
                f"Access denied by Kimai (HTTP {e.status_code}): {e}",
                "Check user and password (API token) in your Kimai config file.",
            )
        if e.status_code == 404:
            return error_message(
                f"Resource not found: {e}",
                "Verify the ID is correct and the resource exists.",
            )
        return error_message(f"Kimai API error (HTTP {e.status_code}): {e}")

    if e.kind in (ErrorKind.CONFIGURATION, ErrorKind.IO, ErrorKind.ENCODING):
        return error_message(
            e.describe(),
            "Check your Kimai config file and KIMAI_* environment variables.",
        )
    if e.kind == ErrorKind.TRANSPORT:
        return error_message(e.describe(), "Check that the Kimai host is reachable.")
    return error_message(e.describe())


# =============================================================================
# Listing Tools
# =============================================================================


@mcp.tool(
    name="kimai_list_customers",
    annotations={
        "title": "List Customers",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_list_customers(params: CustomerListInput, ctx: Context) -> str:
    """
    List Kimai customers.

    Args:
        params: Query parameters including:
            - term (str): Free search term

    Returns:
        Table of customer IDs and names, or error message.
    """
    try:
        client = get_client(ctx)
        customers = await client.get_customers(term=params.term)

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_customers_markdown(customers)
        return format_json([format_customer_json(c) for c in customers])

    except Exception as e:
        return handle_error(e, "list_customers")


@mcp.tool(
    name="kimai_list_projects",
    annotations={
        "title": "List Projects",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_list_projects(params: ProjectListInput, ctx: Context) -> str:
    """
    List Kimai projects, optionally limited to some customers.

    Args:
        params: Query parameters including:
            - customers (list[int]): Customer IDs
            - term (str): Free search term

    Returns:
        Table of projects with their customer, or error message.
    """
    try:
        client = get_client(ctx)
        projects = await client.get_projects(customers=params.customers, term=params.term)

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_projects_markdown(projects)
        return format_json([format_project_json(p) for p in projects])

    except Exception as e:
        return handle_error(e, "list_projects")


@mcp.tool(
    name="kimai_list_activities",
    annotations={
        "title": "List Activities",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_list_activities(params: ActivityListInput, ctx: Context) -> str:
    """
    List Kimai activities, optionally limited to some projects.

    Global activities (not bound to a project) are listed without project.

    Args:
        params: Query parameters including:
            - projects (list[int]): Project IDs
            - term (str): Free search term
    """
    try:
        client = get_client(ctx)
        activities = await client.get_activities(projects=params.projects, term=params.term)

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_activities_markdown(activities)
        return format_json([format_activity_json(a) for a in activities])

    except Exception as e:
        return handle_error(e, "list_activities")


# =============================================================================
# Timesheet Tools
# =============================================================================


@mcp.tool(
    name="kimai_list_timesheet",
    annotations={
        "title": "List Timesheet Records",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_list_timesheet(params: TimesheetListInput, ctx: Context) -> str:
    """
    List timesheet records.

    Durations are shown as H:MM. Running records have no end time.

    Args:
        params: Filters including:
            - user (int): User ID (defaults to the current user)
            - customers, projects, activities (list[int]): ID filters
            - term (str): Free search term
    """
    try:
        client = get_client(ctx)
        records = await client.get_timesheet(
            user=params.user,
            customers=params.customers,
            projects=params.projects,
            activities=params.activities,
            term=params.term,
        )

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_timesheet_markdown(records)
        return format_json([format_record_json(r) for r in records])

    except Exception as e:
        return handle_error(e, "list_timesheet")


@mcp.tool(
    name="kimai_recent_timesheet",
    annotations={
        "title": "Recent Timesheet Records",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_recent_timesheet(params: RecentTimesheetInput, ctx: Context) -> str:
    """
    List the most recent timesheet records.

    Args:
        params: Filters including:
            - user (int): User ID
            - begin (str): Only records after this time
    """
    try:
        client = get_client(ctx)
        begin = parse_datetime(params.begin) if params.begin else None
        records = await client.get_recent_timesheet(user=params.user, begin=begin)

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_timesheet_markdown(records)
        return format_json([format_record_json(r) for r in records])

    except Exception as e:
        return handle_error(e, "recent_timesheet")


@mcp.tool(
    name="kimai_active_timesheet",
    annotations={
        "title": "Active Timesheet Records",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_active_timesheet(
    ctx: Context, response_format: ResponseFormat = ResponseFormat.MARKDOWN
) -> str:
    """
    List the currently running timesheet records.

    Returns:
        Table of running records, or error message.
    """
    try:
        client = get_client(ctx)
        records = await client.get_active_timesheet()

        if response_format == ResponseFormat.MARKDOWN:
            return format_timesheet_markdown(records)
        return format_json([format_record_json(r) for r in records])

    except Exception as e:
        return handle_error(e, "active_timesheet")


# =============================================================================
# Record Tools
# =============================================================================


@mcp.tool(
    name="kimai_begin_record",
    annotations={
        "title": "Begin Timesheet Record",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def kimai_begin_record(params: RecordBeginInput, ctx: Context) -> str:
    """
    Start a new running timesheet record.

    Args:
        params: Record parameters including:
            - project (int): Project ID (required)
            - activity (int): Activity ID (required)
            - begin (str): Start time, defaults to now
            - description (str): Description
            - tags (list[str]): Tag names

    Examples:
        - Start now: project=3, activity=7
        - Start at nine: project=3, activity=7, begin="09:00"
    """
    try:
        client = get_client(ctx)
        begin = parse_datetime(params.begin) if params.begin else None
        record = await client.begin_timesheet_record(
            project=params.project,
            activity=params.activity,
            begin=begin,
            description=params.description,
            tags=params.tags,
            user=params.user,
        )

        if params.response_format == ResponseFormat.MARKDOWN:
            return f"# Started new timesheet record\n\n{format_record_markdown(record)}"
        return format_json({"success": True, "record": format_record_json(record)})

    except Exception as e:
        return handle_error(e, "begin_record")


@mcp.tool(
    name="kimai_log_record",
    annotations={
        "title": "Log Timesheet Record",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def kimai_log_record(params: RecordLogInput, ctx: Context) -> str:
    """
    Log a timesheet record with explicit begin and end.

    Args:
        params: Record parameters including:
            - project (int), activity (int): IDs (required)
            - begin (str): Start time (required)
            - end (str): End time
            - description (str), tags (list[str])
    """
    try:
        client = get_client(ctx)
        record = await client.log_timesheet_record(
            project=params.project,
            activity=params.activity,
            begin=parse_datetime(params.begin),
            end=parse_datetime(params.end) if params.end else None,
            description=params.description,
            tags=params.tags,
        )

        if params.response_format == ResponseFormat.MARKDOWN:
            return f"# Logged timesheet record\n\n{format_record_markdown(record)}"
        return format_json({"success": True, "record": format_record_json(record)})

    except Exception as e:
        return handle_error(e, "log_record")


@mcp.tool(
    name="kimai_stop_record",
    annotations={
        "title": "Stop Timesheet Record",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_stop_record(params: RecordStopInput, ctx: Context) -> str:
    """
    Stop a running timesheet record.

    Args:
        params: - record_id (int): ID of the running record
    """
    try:
        client = get_client(ctx)
        record = await client.end_timesheet_record(params.record_id)

        if params.response_format == ResponseFormat.MARKDOWN:
            return f"# Stopped timesheet record\n\n{format_record_markdown(record)}"
        return format_json({"success": True, "record": format_record_json(record)})

    except Exception as e:
        return handle_error(e, "stop_record")


# =============================================================================
# User Tools
# =============================================================================


@mcp.tool(
    name="kimai_get_current_user",
    annotations={
        "title": "Get Current User",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def kimai_get_current_user(
    ctx: Context, response_format: ResponseFormat = ResponseFormat.MARKDOWN
) -> str:
    """
    Get the authenticated Kimai user.

    Returns:
        User profile (username, roles, language, timezone, teams).
    """
    try:
        client = get_client(ctx)
        user = await client.get_current_user()

        if response_format == ResponseFormat.MARKDOWN:
            return format_user_markdown(user)
        return format_json(format_user_json(user))

    except Exception as e:
        return handle_error(e, "get_current_user")


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Main entry point for the Kimai MCP server."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()
