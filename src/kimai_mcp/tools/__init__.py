"""
Kimai MCP Tools Package.

Input models and formatting helpers for the MCP tools of the Kimai server.
Tools are organized into logical groups:
    - Listing tools (customers, projects, activities)
    - Timesheet tools (list, recent, active)
    - Record tools (begin, log, stop)
    - User tools (current user)
"""

from kimai_mcp.tools.inputs import (
    ResponseFormat,
    CustomerListInput,
    ProjectListInput,
    ActivityListInput,
    TimesheetListInput,
    RecentTimesheetInput,
    RecordBeginInput,
    RecordLogInput,
    RecordStopInput,
)

__all__ = [
    "ResponseFormat",
    "CustomerListInput",
    "ProjectListInput",
    "ActivityListInput",
    "TimesheetListInput",
    "RecentTimesheetInput",
    "RecordBeginInput",
    "RecordLogInput",
    "RecordStopInput",
]
