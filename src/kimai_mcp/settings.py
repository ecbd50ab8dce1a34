"""
Process settings.

Settings come from the environment and only steer where things are found and
how much is logged. Credentials live in the TOML config file
(see :mod:`kimai_mcp.config`).

Environment variables:
    KIMAI_CONFIG_PATH   Explicit config file, skips the XDG lookup
    KIMAI_PASS_COMMAND  Secret-store program used for ``pass_path`` (default: pass)
    KIMAI_LOG_LEVEL     Logging level name (default: WARNING)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from kimai_mcp.constants import DEFAULT_PASS_COMMAND

ENV_PREFIX = "KIMAI_"


class Settings(BaseModel):
    """Environment-driven settings."""

    model_config = ConfigDict(frozen=True)

    config_path: Optional[Path] = None
    pass_command: str = DEFAULT_PASS_COMMAND
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> Settings:
        """Build settings from ``KIMAI_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for field in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{field.upper()}")
            if raw:
                values[field] = raw
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
