"""
Authenticated HTTP access to the Kimai API.

:class:`KimaiHTTPClient` performs exactly one request per call:

    1. build the auth headers from the :class:`~kimai_mcp.config.Config`
    2. send the request with a fresh ``httpx.AsyncClient``
    3. validate the status (:func:`~kimai_mcp.api.response.check_response`)
    4. decode the JSON body into the requested type with pydantic

Nothing is pooled between calls and nothing is retried.
"""

from __future__ import annotations

import logging
import re
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from kimai_mcp.api.response import check_response
from kimai_mcp.config import Config
from kimai_mcp.constants import AUTH_TOKEN_HEADER, AUTH_USER_HEADER
from kimai_mcp.exceptions import (
    KimaiConfigurationError,
    KimaiDecodeError,
    KimaiEncodingError,
    KimaiTransportError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Printable ASCII plus horizontal tab
_VALID_HEADER_VALUE = re.compile(r"^[\t\x20-\x7e]*$")


def _header_value(name: str, value: str) -> str:
    if not _VALID_HEADER_VALUE.match(value):
        raise KimaiEncodingError(f"Invalid characters in value for header {name}")
    return value


def build_auth_headers(config: Config) -> dict[str, str]:
    """
    Build the authentication headers for ``config``.

    Raises:
        KimaiEncodingError: If the user or secret cannot be sent as a header.
    """
    return {
        AUTH_USER_HEADER: _header_value(AUTH_USER_HEADER, config.user),
        AUTH_TOKEN_HEADER: _header_value(AUTH_TOKEN_HEADER, config.secret),
    }


def _serialize_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return body


class KimaiHTTPClient:
    """
    Low-level authenticated client.

    Args:
        config: Resolved connection settings.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def config(self) -> Config:
        return self._config

    def url_for(self, endpoint: str) -> str:
        return f"{self._config.host.rstrip('/')}/{endpoint.lstrip('/')}"

    async def get(
        self,
        endpoint: str,
        response_type: type[T],
        params: dict[str, str] | None = None,
    ) -> T:
        return await self._request("GET", endpoint, response_type, params=params)

    async def post(
        self,
        endpoint: str,
        body: Any,
        response_type: type[T],
        params: dict[str, str] | None = None,
    ) -> T:
        return await self._request(
            "POST", endpoint, response_type, params=params, json=_serialize_body(body)
        )

    async def patch(
        self,
        endpoint: str,
        response_type: type[T],
        body: Any = None,
        params: dict[str, str] | None = None,
    ) -> T:
        return await self._request(
            "PATCH", endpoint, response_type, params=params, json=_serialize_body(body)
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        response_type: type[T],
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> T:
        headers = build_auth_headers(self._config)
        url = self.url_for(endpoint)
        logger.debug("%s %s params=%s", method, url, params)

        try:
            async with httpx.AsyncClient(
                headers=headers, transport=self._transport, follow_redirects=True
            ) as http:
                response = await http.request(method, url, params=params, json=json)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise KimaiConfigurationError(f"Invalid host URL {url!r}: {e}") from e
        except httpx.TransportError as e:
            raise KimaiTransportError(f"{method} {url} failed: {e}") from e

        check_response(response)
        return self._decode(response, response_type)

    @staticmethod
    def _decode(response: httpx.Response, response_type: type[T]) -> T:
        try:
            return TypeAdapter(response_type).validate_json(response.content)
        except ValidationError as e:
            raise KimaiDecodeError(
                f"Unexpected response from {response.request.url}: {e}",
            ) from e
