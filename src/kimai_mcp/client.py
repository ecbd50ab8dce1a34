"""
Kimai Client.

:class:`KimaiClient` is the entry point used by the CLI and the MCP server.
Each method maps to one API call and returns decoded entities.

Usage:
    config = load_config()
    client = KimaiClient(config)

    customers = await client.get_customers(term="acme")
    record = await client.begin_timesheet_record(project=3, activity=7)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Optional

import httpx

from kimai_mcp.api.http import KimaiHTTPClient
from kimai_mcp.api.query import QueryParams
from kimai_mcp.config import Config, SecretResolver, load_config
from kimai_mcp.constants import Endpoint
from kimai_mcp.dates import format_api_datetime, now
from kimai_mcp.models import (
    Activity,
    Customer,
    NewTimesheetRecord,
    Project,
    TimesheetRecord,
    User,
)

logger = logging.getLogger(__name__)


class KimaiClient:
    """
    High-level Kimai operations.

    Args:
        config: Resolved connection settings.
        transport: Optional httpx transport passed to every request.
    """

    def __init__(
        self,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = KimaiHTTPClient(config, transport=transport)

    @classmethod
    def from_config_file(
        cls,
        path: str | Path | None = None,
        *,
        secret_resolver: Optional[SecretResolver] = None,
    ) -> KimaiClient:
        """Resolve the config (see :func:`~kimai_mcp.config.load_config`) and build a client."""
        return cls(load_config(path, secret_resolver=secret_resolver))

    @property
    def config(self) -> Config:
        return self._http.config

    # =========================================================================
    # Customers, Projects, Activities
    # =========================================================================

    async def get_customers(self, term: Optional[str] = None) -> list[Customer]:
        """
        List customers.

        Args:
            term: Free search term
        """
        params = QueryParams().text("term", term).build()
        return await self._http.get(Endpoint.CUSTOMERS, list[Customer], params)

    async def get_projects(
        self,
        customers: Optional[Sequence[int]] = None,
        term: Optional[str] = None,
    ) -> list[Project]:
        """
        List projects.

        Args:
            customers: Only projects of these customer IDs
            term: Free search term
        """
        params = QueryParams().ids("customers", customers).text("term", term).build()
        return await self._http.get(Endpoint.PROJECTS, list[Project], params)

    async def get_activities(
        self,
        projects: Optional[Sequence[int]] = None,
        term: Optional[str] = None,
    ) -> list[Activity]:
        """
        List activities.

        Args:
            projects: Only activities of these project IDs
            term: Free search term
        """
        params = QueryParams().ids("projects", projects).text("term", term).build()
        return await self._http.get(Endpoint.ACTIVITIES, list[Activity], params)

    # =========================================================================
    # Timesheet
    # =========================================================================

    async def get_timesheet(
        self,
        user: Optional[int] = None,
        customers: Optional[Sequence[int]] = None,
        projects: Optional[Sequence[int]] = None,
        activities: Optional[Sequence[int]] = None,
        term: Optional[str] = None,
    ) -> list[TimesheetRecord]:
        """
        List timesheet records.

        Args:
            user: Records of this user ID instead of the current user
            customers: Filter by customer IDs
            projects: Filter by project IDs
            activities: Filter by activity IDs
            term: Free search term
        """
        params = (
            QueryParams()
            .id("user", user)
            .ids("customers", customers)
            .ids("projects", projects)
            .ids("activities", activities)
            .text("term", term)
            .build()
        )
        return await self._http.get(Endpoint.TIMESHEETS, list[TimesheetRecord], params)

    async def get_recent_timesheet(
        self,
        user: Optional[int] = None,
        begin: Optional[datetime] = None,
    ) -> list[TimesheetRecord]:
        """
        List the most recent records.

        Args:
            user: Records of this user ID instead of the current user
            begin: Only records starting after this time
        """
        params = (
            QueryParams()
            .id("user", user)
            .text("begin", format_api_datetime(begin) if begin else None)
            .build()
        )
        return await self._http.get(Endpoint.TIMESHEETS_RECENT, list[TimesheetRecord], params)

    async def get_active_timesheet(self) -> list[TimesheetRecord]:
        """List the running records of the current user."""
        return await self._http.get(Endpoint.TIMESHEETS_ACTIVE, list[TimesheetRecord])

    async def begin_timesheet_record(
        self,
        project: int,
        activity: int,
        begin: Optional[datetime] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        user: Optional[int] = None,
    ) -> TimesheetRecord:
        """
        Start a new running record.

        Args:
            project: Project ID
            activity: Activity ID
            begin: Start time, defaults to now (whole seconds)
            description: Record description
            tags: Tag names
            user: Act on behalf of this user ID (needs permission)

        Returns:
            The created record
        """
        record = NewTimesheetRecord.create(
            project,
            activity,
            begin or now(),
            description=description,
            tags=tags,
            user_id=user,
        )
        logger.info("Starting record for project %d, activity %d", project, activity)
        return await self._http.post(Endpoint.TIMESHEETS, record, TimesheetRecord)

    async def log_timesheet_record(
        self,
        project: int,
        activity: int,
        begin: datetime,
        end: Optional[datetime] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        user: Optional[int] = None,
    ) -> TimesheetRecord:
        """
        Record a finished (or, without ``end``, running) interval.

        Returns:
            The created record
        """
        record = NewTimesheetRecord.create(
            project,
            activity,
            begin,
            end=end,
            description=description,
            tags=tags,
            user_id=user,
        )
        logger.info("Logging record for project %d, activity %d", project, activity)
        return await self._http.post(Endpoint.TIMESHEETS, record, TimesheetRecord)

    async def end_timesheet_record(self, record_id: int) -> TimesheetRecord:
        """
        Stop a running record.

        Returns:
            The stopped record
        """
        logger.info("Stopping record %d", record_id)
        return await self._http.patch(Endpoint.timesheet_stop(record_id), TimesheetRecord)

    # =========================================================================
    # Users
    # =========================================================================

    async def get_current_user(self) -> User:
        """Get the authenticated user."""
        return await self._http.get(Endpoint.CURRENT_USER, User)
