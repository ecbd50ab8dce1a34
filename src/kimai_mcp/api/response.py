"""
Response validation.
"""

from __future__ import annotations

import logging

import httpx

from kimai_mcp.exceptions import KimaiAPIError

logger = logging.getLogger(__name__)


def _request_url(response: httpx.Response) -> str | None:
    # Responses built by hand (e.g. in tests) carry no request
    try:
        return str(response.request.url)
    except RuntimeError:
        return None


def check_response(response: httpx.Response) -> httpx.Response:
    """
    Pass a 2xx response through unchanged.

    Raises:
        KimaiAPIError: For any other status, with the response body as message.
    """
    if response.is_success:
        return response

    url = _request_url(response)
    logger.debug("API request to %s failed with status %d", url, response.status_code)
    raise KimaiAPIError(response.text, status_code=response.status_code, url=url)
