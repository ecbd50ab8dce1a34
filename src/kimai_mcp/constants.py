"""
Constants shared across the Kimai client.
"""

from __future__ import annotations

from enum import Enum

# Application name used for the XDG config lookup
APP_NAME = "kimai"
CONFIG_FILE_NAME = "config.toml"

# Default external secret-store program for ``pass_path``
DEFAULT_PASS_COMMAND = "pass"

# Authentication headers
AUTH_USER_HEADER = "X-AUTH-USER"
AUTH_TOKEN_HEADER = "X-AUTH-TOKEN"

# Textual time formats accepted on input
DATETIME_FORMAT = "%Y-%m-%d %H:%M"
TIME_FORMAT = "%H:%M"

# HTML5 local datetime format understood by the API for query parameters
API_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


class Endpoint(str, Enum):
    """API endpoints, relative to the configured host."""

    CUSTOMERS = "api/customers"
    PROJECTS = "api/projects"
    ACTIVITIES = "api/activities"
    TIMESHEETS = "api/timesheets"
    TIMESHEETS_RECENT = "api/timesheets/recent"
    TIMESHEETS_ACTIVE = "api/timesheets/active"
    CURRENT_USER = "api/users/me"

    @staticmethod
    def timesheet_stop(record_id: int) -> str:
        return f"api/timesheets/{record_id}/stop"


class ErrorKind(str, Enum):
    """Closed set of error categories."""

    CONFIGURATION = "configuration"
    IO = "io"
    ENCODING = "encoding"
    PARSE = "parse"
    TRANSPORT = "transport"
    API = "api"
    DECODE = "decode"

    @property
    def label(self) -> str:
        return _ERROR_LABELS[self]


_ERROR_LABELS = {
    ErrorKind.CONFIGURATION: "Config Error",
    ErrorKind.IO: "IO Error",
    ErrorKind.ENCODING: "Encoding Error",
    ErrorKind.PARSE: "Parse Error",
    ErrorKind.TRANSPORT: "Transport Error",
    ErrorKind.API: "API Error",
    ErrorKind.DECODE: "Decode Error",
}
