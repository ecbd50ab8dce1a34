"""
Activity model.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, NonNegativeInt, field_validator

from kimai_mcp.models.base import KimaiModel, reference_id


class Activity(KimaiModel):
    """
    An activity.

    Global activities are not bound to a project and have neither
    ``project_id`` nor ``parent_title``.
    """

    id: NonNegativeInt
    name: str
    project_id: Optional[NonNegativeInt] = Field(default=None, alias="project")
    parent_title: Optional[str] = Field(default=None, alias="parentTitle")
    visible: bool
    color: Optional[str] = None

    @field_validator("project_id", mode="before")
    @classmethod
    def _project_reference(cls, v):
        return reference_id(v)

    @property
    def is_global(self) -> bool:
        return self.project_id is None
