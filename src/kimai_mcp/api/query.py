"""
Query parameter encoding.

Filters are sent as flat string query parameters. Three value shapes are
supported, each with its own encoder:

    * a single id          -> ``"42"``
    * a free-text string   -> passed through
    * an ordered id list   -> ``"3,7,12"``

:class:`QueryParams` collects optional values and drops the absent ones, so
an unset filter never reaches the server as an empty string.
"""

from __future__ import annotations

from collections.abc import Sequence


def encode_id(value: int) -> str:
    if value < 0:
        raise ValueError(f"ids must be non-negative, got {value}")
    return str(value)


def encode_text(value: str) -> str:
    return value


def encode_ids(values: Sequence[int]) -> str | None:
    """Join ids with commas in order; ``None`` for an empty sequence."""
    if not values:
        return None
    return ",".join(encode_id(v) for v in values)


class QueryParams:
    """
    Builder for an optional set of query parameters.

    Usage:
        params = (
            QueryParams()
            .ids("customers", customers)
            .text("term", term)
            .build()
        )

    ``build()`` returns ``None`` when nothing was set, so the caller can omit
    the query string entirely.
    """

    def __init__(self) -> None:
        self._params: dict[str, str] = {}

    def id(self, key: str, value: int | None) -> QueryParams:
        if value is not None:
            self._params[key] = encode_id(value)
        return self

    def text(self, key: str, value: str | None) -> QueryParams:
        if value is not None:
            self._params[key] = encode_text(value)
        return self

    def ids(self, key: str, values: Sequence[int] | None) -> QueryParams:
        if values is not None:
            encoded = encode_ids(values)
            if encoded is not None:
                self._params[key] = encoded
        return self

    def build(self) -> dict[str, str] | None:
        if not self._params:
            return None
        return dict(self._params)
