"""
Kimai - client for the Kimai time-tracking API.

This package provides an authenticated async client for Kimai together with
two thin front ends: the ``kimai`` command line and the ``kimai-mcp`` Model
Context Protocol server.

Architecture:
    CLI (kimai)        MCP Tools (kimai-mcp)
         │                    │
         └─────────┬──────────┘
                   ▼
            KimaiClient (operations)
                   │
                   ▼
    KimaiHTTPClient (auth, query, validation, decoding)
                   │
         ┌─────────┴─────────┐
         ▼                   ▼
      Config              Models
   (TOML + secret)      (pydantic)
"""

__version__ = "0.1.0"
__author__ = "Kimai MCP Contributors"

from kimai_mcp.exceptions import (
    KimaiError,
    KimaiConfigurationError,
    KimaiIOError,
    KimaiEncodingError,
    KimaiParseError,
    KimaiTransportError,
    KimaiAPIError,
    KimaiDecodeError,
)

__all__ = [
    "__version__",
    "KimaiError",
    "KimaiConfigurationError",
    "KimaiIOError",
    "KimaiEncodingError",
    "KimaiParseError",
    "KimaiTransportError",
    "KimaiAPIError",
    "KimaiDecodeError",
]
