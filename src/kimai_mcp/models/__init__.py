"""
Kimai Data Models.

Frozen pydantic models for the entities exchanged with the Kimai API. They
are built from decoded responses and never mutated afterwards.

Models:
    - Customer: Customer
    - Project: Project of a customer
    - Activity: Activity, optionally bound to a project
    - TimesheetRecord: Tracked work interval
    - NewTimesheetRecord: Body for creating a record
    - User: Authenticated user
    - Team: Team membership of a user
"""

from kimai_mcp.models.activity import Activity
from kimai_mcp.models.base import KimaiModel
from kimai_mcp.models.customer import Customer
from kimai_mcp.models.project import Project
from kimai_mcp.models.timesheet import NewTimesheetRecord, TimesheetRecord
from kimai_mcp.models.user import Team, User

__all__ = [
    "KimaiModel",
    "Customer",
    "Project",
    "Activity",
    "TimesheetRecord",
    "NewTimesheetRecord",
    "User",
    "Team",
]
