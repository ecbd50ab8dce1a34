"""
Customer model.
"""

from __future__ import annotations

from pydantic import NonNegativeInt

from kimai_mcp.models.base import KimaiModel


class Customer(KimaiModel):
    """A customer, the top of the customer > project > activity hierarchy."""

    id: NonNegativeInt
    name: str
    visible: bool
    color: str
