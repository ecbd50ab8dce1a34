"""
Timesheet record models.

:class:`TimesheetRecord` is what the server returns; :class:`NewTimesheetRecord`
is the body sent to create one.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, Field, NonNegativeInt, field_validator

from kimai_mcp.dates import format_duration, to_naive_local
from kimai_mcp.models.base import KimaiModel, reference_id

logger = logging.getLogger(__name__)

# Kimai renders offsets without a colon, e.g. "+0200"
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


class TimesheetRecord(KimaiModel):
    """
    One tracked work interval.

    A record without ``end`` is still running. ``duration_seconds`` comes
    from the server and is valid for running records too (elapsed time at
    fetch).
    """

    id: NonNegativeInt
    description: Optional[str] = None
    begin: AwareDatetime
    end: Optional[AwareDatetime] = None
    duration_seconds: int = Field(alias="duration")
    project_id: NonNegativeInt = Field(alias="project")
    activity_id: NonNegativeInt = Field(alias="activity")
    user_id: NonNegativeInt = Field(alias="user")
    tags: tuple[str, ...] = ()

    @field_validator("project_id", "activity_id", "user_id", mode="before")
    @classmethod
    def _entity_reference(cls, v):
        # The recent/active endpoints return expanded entities
        return reference_id(v)

    @field_validator("begin", "end", mode="before")
    @classmethod
    def _normalize_offset(cls, v):
        if isinstance(v, str):
            return _COMPACT_OFFSET.sub(r"\1:\2", v)
        return v

    @field_validator("begin", "end")
    @classmethod
    def _to_local(cls, v: Optional[datetime]) -> Optional[datetime]:
        return v.astimezone() if v is not None else None

    @property
    def is_running(self) -> bool:
        return self.end is None

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration_seconds)


class NewTimesheetRecord(KimaiModel):
    """
    Body for ``POST api/timesheets``.

    Times are sent as naive local datetimes. Tags travel as one
    comma-separated string, so a tag that itself contains a comma arrives at
    the server as two tags.
    """

    project_id: NonNegativeInt = Field(alias="project")
    activity_id: NonNegativeInt = Field(alias="activity")
    begin: datetime
    end: Optional[datetime] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    user_id: Optional[NonNegativeInt] = Field(default=None, alias="user")

    @field_validator("begin", "end")
    @classmethod
    def _naive_local(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_local(v) if v is not None else None

    @classmethod
    def create(
        cls,
        project_id: int,
        activity_id: int,
        begin: datetime,
        *,
        end: Optional[datetime] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        user_id: Optional[int] = None,
    ) -> NewTimesheetRecord:
        """Build a record body, joining ``tags`` with commas."""
        return cls(
            project_id=project_id,
            activity_id=activity_id,
            begin=begin,
            end=end,
            description=description,
            tags=join_tags(tags),
            user_id=user_id,
        )


def join_tags(tags: Optional[Sequence[str]]) -> Optional[str]:
    if tags is None:
        return None
    for tag in tags:
        if "," in tag:
            logger.warning("Tag %r contains a comma and will be split by the server", tag)
    return ",".join(tags)
