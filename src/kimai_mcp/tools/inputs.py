"""
Pydantic Input Models for Kimai MCP Tools.

This module defines the input validation models used by the MCP tools.
Date/time fields accept the same two forms as the command line:
``YYYY-MM-DD HH:MM`` or ``HH:MM`` (today).
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kimai_mcp.dates import parse_datetime
from kimai_mcp.exceptions import KimaiParseError


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


def _check_ids(v: Optional[List[int]]) -> Optional[List[int]]:
    if v is not None and any(i < 0 for i in v):
        raise ValueError("IDs must be non-negative")
    return v


def _check_datetime(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    try:
        parse_datetime(v)
    except KimaiParseError as e:
        raise ValueError(str(e)) from e
    return v


# =============================================================================
# Listing Input Models
# =============================================================================


class CustomerListInput(BaseMCPInput):
    """Input for listing customers."""

    term: Optional[str] = Field(
        default=None,
        description="Free search term (e.g., 'acme')",
        max_length=200,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'json' for machine-readable",
    )


class ProjectListInput(BaseMCPInput):
    """Input for listing projects."""

    customers: Optional[List[int]] = Field(
        default=None,
        description="Only projects of these customer IDs (e.g., [1, 4])",
    )
    term: Optional[str] = Field(
        default=None,
        description="Free search term",
        max_length=200,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("customers")
    @classmethod
    def validate_customers(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return _check_ids(v)


class ActivityListInput(BaseMCPInput):
    """Input for listing activities."""

    projects: Optional[List[int]] = Field(
        default=None,
        description="Only activities of these project IDs (e.g., [3, 7])",
    )
    term: Optional[str] = Field(
        default=None,
        description="Free search term",
        max_length=200,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("projects")
    @classmethod
    def validate_projects(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return _check_ids(v)


class TimesheetListInput(BaseMCPInput):
    """Input for listing timesheet records."""

    user: Optional[int] = Field(
        default=None,
        description="User ID whose records to list (defaults to the current user)",
        ge=0,
    )
    customers: Optional[List[int]] = Field(default=None, description="Filter by customer IDs")
    projects: Optional[List[int]] = Field(default=None, description="Filter by project IDs")
    activities: Optional[List[int]] = Field(default=None, description="Filter by activity IDs")
    term: Optional[str] = Field(
        default=None,
        description="Free search term",
        max_length=200,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("customers", "projects", "activities")
    @classmethod
    def validate_ids(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return _check_ids(v)


class RecentTimesheetInput(BaseMCPInput):
    """Input for listing recent timesheet records."""

    user: Optional[int] = Field(
        default=None,
        description="User ID whose records to list",
        ge=0,
    )
    begin: Optional[str] = Field(
        default=None,
        description="Only records after this time ('2025-01-15 09:00' or '09:00')",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("begin")
    @classmethod
    def validate_begin(cls, v: Optional[str]) -> Optional[str]:
        return _check_datetime(v)


# =============================================================================
# Record Input Models
# =============================================================================


class RecordBeginInput(BaseMCPInput):
    """Input for starting a new running record."""

    project: int = Field(..., description="Project ID", ge=0)
    activity: int = Field(..., description="Activity ID", ge=0)
    begin: Optional[str] = Field(
        default=None,
        description="Start time ('2025-01-15 09:00' or '09:00'); defaults to now",
    )
    description: Optional[str] = Field(
        default=None,
        description="Record description",
        max_length=5000,
    )
    tags: Optional[List[str]] = Field(
        default=None,
        description="Tag names (e.g., ['meeting', 'billable']); tags must not contain commas",
        max_length=20,
    )
    user: Optional[int] = Field(
        default=None,
        description="Act on behalf of this user ID",
        ge=0,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("begin")
    @classmethod
    def validate_begin(cls, v: Optional[str]) -> Optional[str]:
        return _check_datetime(v)


class RecordLogInput(BaseMCPInput):
    """Input for logging a (finished) record."""

    project: int = Field(..., description="Project ID", ge=0)
    activity: int = Field(..., description="Activity ID", ge=0)
    begin: str = Field(
        ...,
        description="Start time ('2025-01-15 09:00' or '09:00')",
    )
    end: Optional[str] = Field(
        default=None,
        description="End time; leave empty to log a running record",
    )
    description: Optional[str] = Field(
        default=None,
        description="Record description",
        max_length=5000,
    )
    tags: Optional[List[str]] = Field(
        default=None,
        description="Tag names; tags must not contain commas",
        max_length=20,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("begin", "end")
    @classmethod
    def validate_times(cls, v: Optional[str]) -> Optional[str]:
        return _check_datetime(v)


class RecordStopInput(BaseMCPInput):
    """Input for stopping a running record."""

    record_id: int = Field(..., description="Timesheet record ID to stop", ge=0)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )
