"""
Kimai client exceptions.

Every failure surfaced by the client is one of the subclasses below. Each
class is tagged with an :class:`~kimai_mcp.constants.ErrorKind`, so callers
can switch on ``error.kind`` instead of on class names. Errors coming from
third-party code (httpx, tomllib, subprocess, pydantic) are converted where
they are caught, with the original exception chained as ``__cause__``.

Nothing in this package retries: every error is terminal for the operation
that raised it.
"""

from __future__ import annotations

from typing import Any, ClassVar

from kimai_mcp.constants import ErrorKind


class KimaiError(Exception):
    """Base class for all Kimai client errors."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Message prefixed with the error category, for user-facing output."""
        return f"{self.kind.label}: {self.message}"


class KimaiConfigurationError(KimaiError):
    """Config file missing, incomplete or otherwise unusable."""

    kind = ErrorKind.CONFIGURATION


class KimaiIOError(KimaiError):
    """Filesystem or external process failure."""

    kind = ErrorKind.IO


class KimaiEncodingError(KimaiError):
    """Non-UTF-8 secret output or a header value with invalid characters."""

    kind = ErrorKind.ENCODING


class KimaiParseError(KimaiError):
    """Malformed config content or an unrecognised date/time string."""

    kind = ErrorKind.PARSE


class KimaiTransportError(KimaiError):
    """Network-level failure talking to the API host."""

    kind = ErrorKind.TRANSPORT


class KimaiAPIError(KimaiError):
    """The API host answered with a non-success status.

    The message is the raw response body.
    """

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, details={"status_code": status_code, "url": url})
        self.status_code = status_code
        self.url = url


class KimaiDecodeError(KimaiError):
    """A success response did not match the expected entity shape."""

    kind = ErrorKind.DECODE
