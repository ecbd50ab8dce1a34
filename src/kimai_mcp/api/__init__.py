"""
Kimai HTTP API layer.

    - KimaiHTTPClient: authenticated single-request client
    - QueryParams: optional query parameter encoding
    - check_response: status classification
"""

from kimai_mcp.api.http import KimaiHTTPClient, build_auth_headers
from kimai_mcp.api.query import QueryParams, encode_id, encode_ids, encode_text
from kimai_mcp.api.response import check_response

__all__ = [
    "KimaiHTTPClient",
    "build_auth_headers",
    "QueryParams",
    "encode_id",
    "encode_ids",
    "encode_text",
    "check_response",
]
