"""
Tests for the MCP tools and their error mapping.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import TYPE_CHECKING

import httpx
import pytest

from kimai_mcp import server
from kimai_mcp.client import KimaiClient
from kimai_mcp.exceptions import (
    KimaiAPIError,
    KimaiConfigurationError,
    KimaiDecodeError,
    KimaiTransportError,
)
from kimai_mcp.tools.inputs import (
    ActivityListInput,
    CustomerListInput,
    ProjectListInput,
    RecentTimesheetInput,
    RecordBeginInput,
    RecordLogInput,
    RecordStopInput,
    ResponseFormat,
    TimesheetListInput,
)

if TYPE_CHECKING:
    from tests.conftest import MockKimaiServer


pytestmark = pytest.mark.unit


def make_ctx(client: KimaiClient):
    """Minimal stand-in for the MCP request context."""
    return SimpleNamespace(
        request_context=SimpleNamespace(lifespan_context={"client": client})
    )


# =============================================================================
# Error Mapping
# =============================================================================


@pytest.mark.errors
class TestHandleError:

    @pytest.mark.parametrize("status", [401, 403])
    def test_access_denied(self, status):
        text = server.handle_error(KimaiAPIError("denied", status_code=status), "op")

        assert text.startswith(f"Error: Access denied by Kimai (HTTP {status})")
        assert "Hint:" in text

    def test_not_found(self):
        text = server.handle_error(KimaiAPIError("gone", status_code=404), "op")

        assert text.startswith("Error: Resource not found: gone")

    def test_other_api_error(self):
        text = server.handle_error(KimaiAPIError("oops", status_code=500), "op")

        assert text == "Error: Kimai API error (HTTP 500): oops"

    def test_configuration(self):
        text = server.handle_error(KimaiConfigurationError("No password given in config!"), "op")

        assert text.startswith("Error: Config Error: No password given in config!")
        assert "config file" in text

    def test_transport(self):
        text = server.handle_error(KimaiTransportError("connection refused"), "op")

        assert "reachable" in text

    def test_decode_has_no_hint(self):
        text = server.handle_error(KimaiDecodeError("bad body"), "op")

        assert "Hint:" not in text

    def test_unexpected(self):
        text = server.handle_error(RuntimeError("boom"), "op")

        assert text == "Error: Unexpected error: boom"


# =============================================================================
# Tools
# =============================================================================


class TestTools:

    async def test_list_customers_json(self, seeded_client: KimaiClient):
        text = await server.kimai_list_customers(
            CustomerListInput(response_format=ResponseFormat.JSON), make_ctx(seeded_client)
        )

        assert [c["name"] for c in json.loads(text)] == ["Acme Corp", "Globex"]

    async def test_list_timesheet(self, seeded_client: KimaiClient, seeded_server: MockKimaiServer):
        text = await server.kimai_list_timesheet(
            TimesheetListInput(projects=[3]), make_ctx(seeded_client)
        )

        assert "| 100 |" in text
        assert seeded_server.last_request.url.params["projects"] == "3"

    async def test_recent(self, seeded_client: KimaiClient, seeded_server: MockKimaiServer):
        await server.kimai_recent_timesheet(
            RecentTimesheetInput(begin="2024-03-01 08:00"), make_ctx(seeded_client)
        )

        assert seeded_server.last_request.url.params["begin"] == "2024-03-01T08:00:00"

    async def test_active(self, seeded_client: KimaiClient):
        text = await server.kimai_active_timesheet(make_ctx(seeded_client))

        assert "| 101 |" in text
        assert "| 100 |" not in text

    async def test_begin_record(self, client: KimaiClient, mock_server: MockKimaiServer):
        text = await server.kimai_begin_record(
            RecordBeginInput(project=3, activity=12, begin="2024-03-01 09:00", tags=["x"]),
            make_ctx(client),
        )

        assert text.startswith("# Started new timesheet record")
        assert mock_server.last_json()["tags"] == "x"

    async def test_log_record_json(self, client: KimaiClient):
        text = await server.kimai_log_record(
            RecordLogInput(
                project=3,
                activity=12,
                begin="2024-03-01 09:00",
                end="2024-03-01 10:00",
                response_format=ResponseFormat.JSON,
            ),
            make_ctx(client),
        )

        data = json.loads(text)
        assert data["success"] is True
        assert data["record"]["duration"] == "1:00"

    async def test_stop_unknown_record(self, seeded_client: KimaiClient):
        text = await server.kimai_stop_record(RecordStopInput(record_id=999), make_ctx(seeded_client))

        assert text.startswith("Error: Resource not found")

    async def test_current_user(self, seeded_client: KimaiClient):
        text = await server.kimai_get_current_user(make_ctx(seeded_client))

        assert text.startswith("# Jane Doe")

    async def test_transport_failure(self, client: KimaiClient, mock_server: MockKimaiServer):
        mock_server.fail("GET", "/api/customers", httpx.ConnectError("refused"))

        text = await server.kimai_list_customers(CustomerListInput(), make_ctx(client))

        assert text.startswith("Error: Transport Error")


class TestInputs:

    def test_invalid_time_rejected(self):
        with pytest.raises(ValueError, match="Invalid date/time"):
            RecordLogInput(project=1, activity=2, begin="tomorrow")

    def test_negative_ids_rejected(self):
        with pytest.raises(ValueError):
            TimesheetListInput(customers=[1, -2])

    def test_negative_customer_ids_rejected_for_projects(self):
        with pytest.raises(ValueError, match="non-negative"):
            ProjectListInput(customers=[1, -2])

    def test_negative_project_ids_rejected_for_activities(self):
        with pytest.raises(ValueError, match="non-negative"):
            ActivityListInput(projects=[-3])

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValueError):
            CustomerListInput(unknown="x")
