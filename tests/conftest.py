"""
Pytest Configuration and Fixtures for Kimai Client Tests.

This module provides fixtures, payload factories, and a mock Kimai server for
testing the client without network access.

Architecture:
    - MockKimaiServer: in-memory Kimai API served through httpx.MockTransport
    - Factories: Generate API payloads (customers, projects, records, ...)
    - Fixtures: Provide configs, clients and config files
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from kimai_mcp.client import KimaiClient
from kimai_mcp.config import Config
from kimai_mcp.settings import Settings


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "dates: Date/time codec tests")
    config.addinivalue_line("markers", "query: Query encoding tests")
    config.addinivalue_line("markers", "config: Credential resolution tests")
    config.addinivalue_line("markers", "http: HTTP layer tests")
    config.addinivalue_line("markers", "models: Entity model tests")
    config.addinivalue_line("markers", "timesheet: Timesheet tests")
    config.addinivalue_line("markers", "errors: Error handling tests")
    config.addinivalue_line("markers", "cli: Command line tests")


# =============================================================================
# Time Utilities
# =============================================================================


KIMAI_TZ = timezone(timedelta(hours=2))


def kimai_time(dt: datetime) -> str:
    """Render a datetime the way Kimai does (offset without colon)."""
    return dt.strftime("%Y-%m-%dT%H:%M:%S%z")


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test payloads."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Reset counter (call in fixtures)."""
        cls._counter = 0

    @classmethod
    def next_id(cls) -> int:
        cls._counter += 1
        return cls._counter


# =============================================================================
# Payload Factories
# =============================================================================


class CustomerFactory:
    """Factory for customer payloads."""

    @staticmethod
    def payload(
        id: int | None = None,
        name: str = "Acme Corp",
        visible: bool = True,
        color: str = "#3c8dbc",
        **extra: Any,
    ) -> dict[str, Any]:
        return {
            "id": id or IDGenerator.next_id(),
            "name": name,
            "visible": visible,
            "color": color,
            **extra,
        }


class ProjectFactory:
    """Factory for project payloads."""

    @staticmethod
    def payload(
        id: int | None = None,
        name: str = "Website Relaunch",
        customer: int = 1,
        parent_title: str = "Acme Corp",
        visible: bool = True,
        color: str | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        return {
            "id": id or IDGenerator.next_id(),
            "name": name,
            "customer": customer,
            "parentTitle": parent_title,
            "visible": visible,
            "color": color,
            **extra,
        }


class ActivityFactory:
    """Factory for activity payloads."""

    @staticmethod
    def payload(
        id: int | None = None,
        name: str = "Development",
        project: int | None = None,
        parent_title: str | None = None,
        visible: bool = True,
        color: str | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        return {
            "id": id or IDGenerator.next_id(),
            "name": name,
            "project": project,
            "parentTitle": parent_title,
            "visible": visible,
            "color": color,
            **extra,
        }


class RecordFactory:
    """Factory for timesheet record payloads."""

    @staticmethod
    def payload(
        id: int | None = None,
        description: str | None = "Working on it",
        begin: datetime | None = None,
        end: datetime | None = None,
        duration: int | None = None,
        project: Any = 1,
        activity: Any = 1,
        user: Any = 1,
        tags: list[str] | None = None,
        running: bool = False,
        **extra: Any,
    ) -> dict[str, Any]:
        begin = begin or datetime(2024, 3, 1, 9, 0, tzinfo=KIMAI_TZ)
        if end is None and not running:
            end = begin + timedelta(minutes=90)
        if duration is None:
            duration = int((end - begin).total_seconds()) if end else 0
        return {
            "id": id or IDGenerator.next_id(),
            "description": description,
            "begin": kimai_time(begin),
            "end": kimai_time(end) if end else None,
            "duration": duration,
            "project": project,
            "activity": activity,
            "user": user,
            "tags": tags or [],
            **extra,
        }

    @staticmethod
    def running(**kwargs: Any) -> dict[str, Any]:
        return RecordFactory.payload(running=True, **kwargs)


class UserFactory:
    """Factory for user payloads."""

    @staticmethod
    def payload(
        id: int = 1,
        username: str = "jane",
        alias: str | None = "Jane Doe",
        teams: list[dict[str, Any]] | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        return {
            "id": id,
            "username": username,
            "enabled": True,
            "roles": ["ROLE_USER"],
            "language": "en",
            "timezone": "Europe/Berlin",
            "alias": alias,
            "title": None,
            "avatar": None,
            "teams": teams if teams is not None else [{"id": 1, "name": "Developers"}],
            **extra,
        }


# =============================================================================
# Mock Server
# =============================================================================


Handler = Callable[[httpx.Request], httpx.Response]

_STOP_PATH = re.compile(r"^/api/timesheets/(\d+)/stop$")


class MockKimaiServer:
    """
    In-memory Kimai API.

    Serves the stores below for the endpoints the client uses. Individual
    routes can be overridden with :meth:`respond` or made to raise with
    :meth:`fail`. Every request is kept in ``requests`` for verification.
    """

    def __init__(self) -> None:
        self.customers: list[dict[str, Any]] = []
        self.projects: list[dict[str, Any]] = []
        self.activities: list[dict[str, Any]] = []
        self.records: list[dict[str, Any]] = []
        self.user: dict[str, Any] = UserFactory.payload()

        self.requests: list[httpx.Request] = []
        self.overrides: dict[tuple[str, str], Handler] = {}

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def respond(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
    ) -> None:
        """Serve a fixed response for ``method path``."""

        def handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json_body)

        self.overrides[(method, path)] = handler

    def fail(self, method: str, path: str, error: Exception) -> None:
        """Raise ``error`` for ``method path``."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise error

        self.overrides[(method, path)] = handler

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        override = self.overrides.get((method, path))
        if override is not None:
            return override(request)

        if method == "GET":
            data = {
                "/api/customers": self.customers,
                "/api/projects": self.projects,
                "/api/activities": self.activities,
                "/api/timesheets": self.records,
                "/api/timesheets/recent": self.records,
                "/api/timesheets/active": [r for r in self.records if r["end"] is None],
                "/api/users/me": self.user,
            }.get(path)
            if data is not None:
                return httpx.Response(200, json=data)

        if method == "POST" and path == "/api/timesheets":
            return self._create_record(request)

        match = _STOP_PATH.match(path)
        if method == "PATCH" and match:
            return self._stop_record(int(match.group(1)))

        return httpx.Response(404, json={"code": 404, "message": "Not found"})

    def _create_record(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        begin = datetime.fromisoformat(body["begin"]).replace(tzinfo=KIMAI_TZ)
        end = datetime.fromisoformat(body["end"]).replace(tzinfo=KIMAI_TZ) if "end" in body else None
        record = RecordFactory.payload(
            description=body.get("description"),
            begin=begin,
            end=end,
            running=end is None,
            project=body["project"],
            activity=body["activity"],
            user=body.get("user", self.user["id"]),
            tags=body["tags"].split(",") if body.get("tags") else [],
        )
        self.records.append(record)
        return httpx.Response(200, json=record)

    def _stop_record(self, record_id: int) -> httpx.Response:
        for index, record in enumerate(self.records):
            if record["id"] == record_id:
                begin = datetime.strptime(record["begin"], "%Y-%m-%dT%H:%M:%S%z")
                end = begin + timedelta(hours=2, minutes=1)
                stopped = {**record, "end": kimai_time(end), "duration": 7260}
                self.records[index] = stopped
                return httpx.Response(200, json=stopped)
        return httpx.Response(404, json={"code": 404, "message": "Not found"})


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def config() -> Config:
    return Config(host="https://kimai.example.com", user="jane", secret="s3cr3t-token")


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def mock_server() -> MockKimaiServer:
    """Create a fresh, empty mock server."""
    return MockKimaiServer()


@pytest.fixture
def seeded_server() -> MockKimaiServer:
    """Mock server with a small customer/project/activity tree and records."""
    server = MockKimaiServer()
    server.customers = [
        CustomerFactory.payload(id=1, name="Acme Corp"),
        CustomerFactory.payload(id=2, name="Globex", visible=False, color="#ff0000"),
    ]
    server.projects = [
        ProjectFactory.payload(id=3, name="Website", customer=1, parent_title="Acme Corp"),
        ProjectFactory.payload(id=7, name="Billing", customer=2, parent_title="Globex", color="#00ff00"),
    ]
    server.activities = [
        ActivityFactory.payload(id=12, name="Design", project=3, parent_title="Website"),
        ActivityFactory.payload(id=13, name="Meetings"),
    ]
    server.records = [
        RecordFactory.payload(id=100, project=3, activity=12, tags=["billable"]),
        RecordFactory.running(id=101, project=7, activity=13, duration=600, description=None),
    ]
    return server


@pytest.fixture
def client(config: Config, mock_server: MockKimaiServer) -> KimaiClient:
    """KimaiClient talking to the empty mock server."""
    return KimaiClient(config, transport=mock_server.transport)


@pytest.fixture
def seeded_client(config: Config, seeded_server: MockKimaiServer) -> KimaiClient:
    """KimaiClient talking to the seeded mock server."""
    return KimaiClient(config, transport=seeded_server.transport)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write a config file and return its path."""

    def _write(content: str, name: str = "config.toml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class StubSecretResolver:
    """Secret resolver returning canned secrets and recording lookups."""

    def __init__(self, secrets: dict[str, str] | None = None) -> None:
        self.secrets = secrets or {}
        self.lookups: list[str] = []

    def __call__(self, reference: str) -> str:
        self.lookups.append(reference)
        return self.secrets[reference]


@pytest.fixture
def secret_resolver() -> StubSecretResolver:
    return StubSecretResolver({"work/kimai": "token-from-pass"})
