"""
Base model for Kimai entities.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class KimaiModel(BaseModel):
    """
    Immutable value object decoded from an API response.

    Wire names are declared as aliases; attributes are snake_case and may be
    passed by name as well. Fields the server adds beyond the declared ones
    are ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


def reference_id(value: Any) -> Any:
    """Accept either an id or an expanded ``{"id": ...}`` entity."""
    if isinstance(value, dict) and "id" in value:
        return value["id"]
    return value
