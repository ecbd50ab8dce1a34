"""
Project model.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, NonNegativeInt, field_validator

from kimai_mcp.models.base import KimaiModel, reference_id


class Project(KimaiModel):
    """A project belonging to one customer."""

    id: NonNegativeInt
    name: str
    customer_id: NonNegativeInt = Field(alias="customer")
    parent_title: str = Field(alias="parentTitle")
    visible: bool
    color: Optional[str] = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_reference(cls, v):
        return reference_id(v)
