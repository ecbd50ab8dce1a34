"""
Response formatting for the CLI and the MCP tools.

Every entity has a markdown rendering (tables, readable in a terminal and in
chat) and a JSON-ready dict rendering.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from kimai_mcp.dates import format_datetime
from kimai_mcp.models import Activity, Customer, Project, TimesheetRecord, User


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("|", "\\|").replace("\n", " ")


def markdown_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(c) for c in row) + " |")
    return "\n".join(lines)


# =============================================================================
# Customers, Projects, Activities
# =============================================================================


def format_customers_markdown(customers: Sequence[Customer]) -> str:
    if not customers:
        return "No customers found."
    return markdown_table(["ID", "Name"], [(c.id, c.name) for c in customers])


def format_customer_json(customer: Customer) -> dict[str, Any]:
    return customer.model_dump(mode="json")


def format_projects_markdown(projects: Sequence[Project]) -> str:
    if not projects:
        return "No projects found."
    return markdown_table(
        ["ID", "Name", "Customer ID", "Customer Name"],
        [(p.id, p.name, p.customer_id, p.parent_title) for p in projects],
    )


def format_project_json(project: Project) -> dict[str, Any]:
    return project.model_dump(mode="json")


def format_activities_markdown(activities: Sequence[Activity]) -> str:
    if not activities:
        return "No activities found."
    return markdown_table(
        ["ID", "Name", "Project ID", "Project Name"],
        [(a.id, a.name, a.project_id, a.parent_title) for a in activities],
    )


def format_activity_json(activity: Activity) -> dict[str, Any]:
    return activity.model_dump(mode="json")


# =============================================================================
# Timesheet
# =============================================================================


def format_timesheet_markdown(records: Sequence[TimesheetRecord]) -> str:
    if not records:
        return "No timesheet records found."
    return markdown_table(
        ["ID", "Begin", "End", "Duration", "Project", "Activity", "Description"],
        [
            (
                r.id,
                format_datetime(r.begin),
                format_datetime(r.end) if r.end else "",
                r.formatted_duration,
                r.project_id,
                r.activity_id,
                r.description,
            )
            for r in records
        ],
    )


def format_record_markdown(record: TimesheetRecord) -> str:
    """Attribute/value table for a single record."""
    rows: list[tuple[str, Any]] = [
        ("ID", record.id),
        ("Project", record.project_id),
        ("Activity", record.activity_id),
        ("User", record.user_id),
        ("Begin", format_datetime(record.begin)),
    ]
    if record.end is not None:
        rows.append(("End", format_datetime(record.end)))
    rows.extend(
        [
            ("Duration", record.formatted_duration),
            ("Description", record.description),
            ("Tags", ", ".join(record.tags)),
        ]
    )
    return markdown_table(["Attribute", "Value"], rows)


def format_record_json(record: TimesheetRecord) -> dict[str, Any]:
    data = record.model_dump(mode="json")
    data["running"] = record.is_running
    data["duration"] = record.formatted_duration
    return data


# =============================================================================
# Users
# =============================================================================


def format_user_markdown(user: User) -> str:
    lines = [
        f"# {user.display_name}",
        "",
        f"- **ID**: {user.id}",
        f"- **Username**: {user.username}",
        f"- **Enabled**: {'yes' if user.enabled else 'no'}",
        f"- **Roles**: {', '.join(user.roles) or '-'}",
        f"- **Language**: {user.language}",
        f"- **Timezone**: {user.timezone}",
    ]
    if user.title:
        lines.append(f"- **Title**: {user.title}")
    if user.teams:
        lines.append(f"- **Teams**: {', '.join(f'{t.name} ({t.id})' for t in user.teams)}")
    return "\n".join(lines)


def format_user_json(user: User) -> dict[str, Any]:
    return user.model_dump(mode="json")


# =============================================================================
# Messages
# =============================================================================


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def error_message(message: str, hint: str | None = None) -> str:
    text = f"Error: {message}"
    if hint:
        text += f"\n\nHint: {hint}"
    return text
