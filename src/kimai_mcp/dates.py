"""
Date/time parsing and formatting.

Two textual forms are accepted wherever the user supplies a time:

    * ``YYYY-MM-DD HH:MM``  (full)
    * ``HH:MM``             (time on the current local date)

Both are interpreted in the local timezone and returned as aware datetimes.
"""

from __future__ import annotations

from datetime import date, datetime

from kimai_mcp.constants import API_DATETIME_FORMAT, DATETIME_FORMAT, TIME_FORMAT
from kimai_mcp.exceptions import KimaiParseError


def parse_datetime(value: str) -> datetime:
    """
    Parse a user-supplied time string.

    The full format is tried first, then the time-only format.

    Raises:
        KimaiParseError: If the string matches neither format.
    """
    try:
        naive = datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        try:
            parsed_time = datetime.strptime(value, TIME_FORMAT).time()
        except ValueError as e:
            raise KimaiParseError(
                f'Invalid date/time "{value}": '
                f'expected format "{DATETIME_FORMAT}" or "{TIME_FORMAT}"'
            ) from e
        naive = datetime.combine(date.today(), parsed_time)

    # astimezone() on a naive value treats it as local time
    return naive.astimezone()


def now() -> datetime:
    """Current local time with fractional seconds dropped."""
    return datetime.now().astimezone().replace(microsecond=0)


def resolve_datetime(value: str | None) -> datetime:
    """Parse ``value``, or fall back to :func:`now` when it is ``None``."""
    if value is None:
        return now()
    return parse_datetime(value)


def to_naive_local(value: datetime) -> datetime:
    """Drop the zone after converting to local time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def format_datetime(value: datetime) -> str:
    return value.astimezone().strftime(DATETIME_FORMAT)


def format_api_datetime(value: datetime) -> str:
    """Render as the naive local ``YYYY-MM-DDTHH:MM:SS`` form used in queries."""
    return to_naive_local(value).strftime(API_DATETIME_FORMAT)


def format_duration(seconds: int) -> str:
    """
    Format elapsed seconds as ``H:MM``.

    Hours are not capped at 24; minutes are always two digits.

    Examples:
        >>> format_duration(5400)
        '1:30'
        >>> format_duration(61)
        '0:01'
    """
    hours = seconds // 3600
    minutes = (seconds // 60) % 60
    return f"{hours}:{minutes:02d}"
