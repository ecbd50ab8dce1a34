"""
User and team models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import NonNegativeInt

from kimai_mcp.models.base import KimaiModel


class Team(KimaiModel):
    id: NonNegativeInt
    name: str


class User(KimaiModel):
    """The authenticated user, as returned by ``api/users/me``."""

    id: NonNegativeInt
    username: str
    enabled: bool
    roles: tuple[str, ...]
    language: str
    timezone: str
    alias: Optional[str] = None
    title: Optional[str] = None
    avatar: Optional[str] = None
    teams: tuple[Team, ...]

    @property
    def display_name(self) -> str:
        return self.alias or self.username
