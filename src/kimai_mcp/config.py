"""
Credential resolution.

Turns a TOML config file into a :class:`Config`::

    host = "https://kimai.example.com"
    user = "jane"
    password = "api-token"      # or:
    pass_path = "work/kimai"    # looked up with the secret-store program

Without an explicit path the file is looked up as ``kimai/config.toml`` in
the XDG config directories.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tomllib
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kimai_mcp.constants import APP_NAME, CONFIG_FILE_NAME, DEFAULT_PASS_COMMAND
from kimai_mcp.exceptions import (
    KimaiConfigurationError,
    KimaiEncodingError,
    KimaiIOError,
    KimaiParseError,
)
from kimai_mcp.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """Resolved connection settings for one invocation."""

    model_config = ConfigDict(frozen=True)

    host: str
    user: str
    secret: str = Field(repr=False)


class ConfigFile(BaseModel):
    """Raw contents of the TOML config file."""

    model_config = ConfigDict(extra="ignore")

    host: str
    user: str
    password: Optional[str] = None
    pass_path: Optional[str] = None


class SecretResolver(Protocol):
    """Looks up a secret from an opaque reference."""

    def __call__(self, reference: str) -> str: ...


class PassSecretResolver:
    """
    Secret resolver backed by an external secret-store program.

    The program is invoked with the reference as its only argument; its
    standard output, decoded as UTF-8 and stripped, is the secret.
    """

    def __init__(self, command: str = DEFAULT_PASS_COMMAND) -> None:
        self.command = command

    def __call__(self, reference: str) -> str:
        logger.debug("Looking up secret %r with %s", reference, self.command)
        try:
            result = subprocess.run(
                [self.command, reference],
                capture_output=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise KimaiIOError(f"Secret command not found: {self.command}") from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
            raise KimaiIOError(
                f"{self.command} exited with status {e.returncode}: {stderr}",
                details={"returncode": e.returncode},
            ) from e
        except OSError as e:
            raise KimaiIOError(f"Failed to run {self.command}: {e}") from e

        try:
            return result.stdout.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise KimaiEncodingError(f"{self.command} output is not valid UTF-8: {e}") from e


def xdg_config_dirs(environ: Optional[dict[str, str]] = None) -> list[Path]:
    """Config directories in XDG search order, user directory first."""
    environ = os.environ if environ is None else environ

    config_home = environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    config_dirs = environ.get("XDG_CONFIG_DIRS") or "/etc/xdg"

    dirs = [Path(config_home)]
    dirs.extend(Path(d) for d in config_dirs.split(os.pathsep) if d)
    return dirs


def find_config_file(environ: Optional[dict[str, str]] = None) -> Path:
    """
    Locate ``kimai/config.toml`` in the XDG config directories.

    Raises:
        KimaiConfigurationError: If no directory contains the file.
    """
    for directory in xdg_config_dirs(environ):
        candidate = directory / APP_NAME / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    raise KimaiConfigurationError("config file not found!")


def read_config_file(path: Path) -> ConfigFile:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise KimaiIOError(f"Config file {path} is not valid UTF-8") from e
    except OSError as e:
        raise KimaiIOError(f"Cannot read config file {path}: {e}") from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise KimaiParseError(f"Invalid TOML in {path}: {e}") from e

    try:
        return ConfigFile.model_validate(data)
    except ValidationError as e:
        raise KimaiConfigurationError(f"Invalid config file {path}: {e}") from e


def config_from_file(
    config_file: ConfigFile,
    secret_resolver: Optional[SecretResolver] = None,
) -> Config:
    """Resolve the secret of a parsed config file."""
    if config_file.password is not None:
        if config_file.pass_path is not None:
            logger.warning("Both password and pass_path are set; using password")
        secret = config_file.password
    elif config_file.pass_path is not None:
        resolver = secret_resolver or PassSecretResolver()
        secret = resolver(config_file.pass_path)
    else:
        raise KimaiConfigurationError("No password given in config!")

    return Config(host=config_file.host, user=config_file.user, secret=secret)


def load_config(
    path: str | Path | None = None,
    *,
    secret_resolver: Optional[SecretResolver] = None,
    settings: Optional[Settings] = None,
) -> Config:
    """
    Resolve the configuration for one invocation.

    Args:
        path: Explicit config file. Falls back to ``KIMAI_CONFIG_PATH`` and
            then to the XDG lookup.
        secret_resolver: Used for ``pass_path``; defaults to a
            :class:`PassSecretResolver` running the configured command.
        settings: Process settings; defaults to :func:`get_settings`.

    Returns:
        The resolved config.
    """
    settings = settings or get_settings()

    if path is not None:
        config_path = Path(path)
    elif settings.config_path is not None:
        config_path = settings.config_path
    else:
        config_path = find_config_file()

    logger.debug("Loading config from %s", config_path)
    config_file = read_config_file(config_path)

    if secret_resolver is None:
        secret_resolver = PassSecretResolver(settings.pass_command)
    return config_from_file(config_file, secret_resolver)
