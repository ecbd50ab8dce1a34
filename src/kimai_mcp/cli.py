"""
Kimai command line.

    kimai customers [-t TERM]
    kimai projects [-t TERM] [-c ID ...]
    kimai activities [-t TERM] [-p ID ...]
    kimai timesheet [-u ID] [-c ID ...] [-p ID ...] [-a ID ...] [-t TERM]
    kimai timesheet recent [-b TIME] [-u ID]
    kimai timesheet active
    kimai timesheet begin -p ID -a ID [-b TIME] [-d TEXT] [-t TAG ...]
    kimai timesheet end ID
    kimai timesheet log -b TIME [-e TIME] -p ID -a ID [-d TEXT] [-t TAG ...]

TIME is ``YYYY-MM-DD HH:MM`` or ``HH:MM`` (today).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from kimai_mcp import __version__
from kimai_mcp.client import KimaiClient
from kimai_mcp.dates import parse_datetime, resolve_datetime
from kimai_mcp.exceptions import KimaiError, KimaiParseError
from kimai_mcp.models import TimesheetRecord
from kimai_mcp.settings import get_settings
from kimai_mcp.tools.formatting import (
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
)

logger = logging.getLogger(__name__)


def _id(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("Input must be integer!")
    if parsed < 0:
        raise argparse.ArgumentTypeError("Input must be a non-negative integer!")
    return parsed


def _time(value: str) -> str:
    """Validate a TIME argument; parsing happens when the command runs."""
    try:
        parse_datetime(value)
    except KimaiParseError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config-path",
        "--config_path",
        dest="config_path",
        help="Path to a config file",
    )
    common.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="kimai",
        description="Command line client for the Kimai time-tracking API",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    customers = commands.add_parser(
        "customers", parents=[common], help="Get a list of all customers"
    )
    customers.add_argument("-t", "--term", help="A free search term")

    projects = commands.add_parser("projects", parents=[common], help="Get a list of all projects")
    projects.add_argument("-t", "--term", help="A free search term")
    projects.add_argument(
        "-c", "--customers", nargs="+", type=_id, help="Limit the returned customers"
    )

    activities = commands.add_parser(
        "activities", parents=[common], help="Get a list of all activities"
    )
    activities.add_argument("-t", "--term", help="A free search term")
    activities.add_argument(
        "-p", "--projects", nargs="+", type=_id, help="Limit the returned projects"
    )

    timesheet = commands.add_parser(
        "timesheet", parents=[common], help="Interact with the time sheet"
    )
    timesheet.add_argument(
        "-u", "--user", type=_id, help="ID of the user on whose behalf to act"
    )
    timesheet.add_argument("-c", "--customers", nargs="+", type=_id, help="Filter by customers")
    timesheet.add_argument("-p", "--projects", nargs="+", type=_id, help="Filter by projects")
    timesheet.add_argument("-a", "--activities", nargs="+", type=_id, help="Filter by activities")
    timesheet.add_argument("-t", "--term", help="A free search term")
    actions = timesheet.add_subparsers(dest="action")

    recent = actions.add_parser(
        "recent", parents=[common], help="View only recent timesheet records"
    )
    recent.add_argument("-b", "--begin", type=_time, help="A beginning time")
    recent.add_argument("-u", "--user", type=_id, help="ID of the user")

    actions.add_parser(
        "active", parents=[common], help="View only currently active timesheet records"
    )

    begin = actions.add_parser(
        "begin", aliases=["start"], parents=[common], help="Begin a new timesheet record"
    )
    begin.add_argument("-u", "--user", type=_id, help="ID of the user on whose behalf to act")
    begin.add_argument("-b", "--begin", type=_time, help="A beginning time (default: now)")
    begin.add_argument("-p", "--project", type=_id, required=True, help="ID of a project")
    begin.add_argument("-a", "--activity", type=_id, required=True, help="ID of an activity")
    begin.add_argument("-d", "--description", help="Description to be added to a record")
    begin.add_argument("-t", "--tags", nargs="+", help="Tags for a timesheet record")

    end = actions.add_parser(
        "end", aliases=["stop"], parents=[common], help="End a given timesheet record"
    )
    end.add_argument("id", type=_id, help="ID of a timesheet record")

    log = actions.add_parser("log", parents=[common], help="Log a new timesheet record")
    log.add_argument("-b", "--begin", type=_time, required=True, help="A beginning time")
    log.add_argument("-e", "--end", type=_time, help="An end time")
    log.add_argument("-p", "--project", type=_id, required=True, help="ID of a project")
    log.add_argument("-a", "--activity", type=_id, required=True, help="ID of an activity")
    log.add_argument("-d", "--description", help="Description to be added to a record")
    log.add_argument("-t", "--tags", nargs="+", help="Tags for a timesheet record")

    return parser


async def run(args: argparse.Namespace, client: KimaiClient) -> str:
    """Execute the parsed command and return the text to print."""
    if args.command == "customers":
        customers = await client.get_customers(term=args.term)
        if args.json:
            return format_json([format_customer_json(c) for c in customers])
        return format_customers_markdown(customers)

    if args.command == "projects":
        projects = await client.get_projects(customers=args.customers, term=args.term)
        if args.json:
            return format_json([format_project_json(p) for p in projects])
        return format_projects_markdown(projects)

    if args.command == "activities":
        activities = await client.get_activities(projects=args.projects, term=args.term)
        if args.json:
            return format_json([format_activity_json(a) for a in activities])
        return format_activities_markdown(activities)

    return await _run_timesheet(args, client)


async def _run_timesheet(args: argparse.Namespace, client: KimaiClient) -> str:
    action = getattr(args, "action", None)

    if action in ("begin", "start"):
        record = await client.begin_timesheet_record(
            project=args.project,
            activity=args.activity,
            begin=resolve_datetime(args.begin),
            description=args.description,
            tags=args.tags,
            user=args.user,
        )
        return _record_output(args, "Started new timesheet record:", record)

    if action in ("end", "stop"):
        record = await client.end_timesheet_record(args.id)
        return _record_output(args, "Stopped timesheet record:", record)

    if action == "log":
        record = await client.log_timesheet_record(
            project=args.project,
            activity=args.activity,
            begin=parse_datetime(args.begin),
            end=parse_datetime(args.end) if args.end else None,
            description=args.description,
            tags=args.tags,
        )
        return _record_output(args, "Logged timesheet record:", record)

    if action == "recent":
        begin = parse_datetime(args.begin) if args.begin else None
        records = await client.get_recent_timesheet(user=args.user, begin=begin)
    elif action == "active":
        records = await client.get_active_timesheet()
    else:
        records = await client.get_timesheet(
            user=args.user,
            customers=args.customers,
            projects=args.projects,
            activities=args.activities,
            term=args.term,
        )

    if args.json:
        return format_json([format_record_json(r) for r in records])
    return format_timesheet_markdown(records)


def _record_output(args: argparse.Namespace, title: str, record: TimesheetRecord) -> str:
    if args.json:
        return format_json(format_record_json(record))
    return f"{title}\n\n{format_record_markdown(record)}"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the ``kimai`` command."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        client = KimaiClient.from_config_file(args.config_path)
        output = asyncio.run(run(args, client))
    except KimaiError as e:
        logger.debug("Command failed", exc_info=True)
        print(e.describe(), file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
