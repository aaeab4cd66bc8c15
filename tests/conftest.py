"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Remote API:
    Tests never reach a real Synse Server. FakeSynseServer answers requests
    through httpx.MockTransport with canned JSON bodies keyed by URL path:

        def test_scan(synse_server):
            client = synse_server.client()
            synse_server.respond("/synse/test", {"status": "ok"})

Environment:
    Every test runs from an empty temporary working directory with HOME
    pointed at a second empty directory and no SYNSE_* variables set, so a
    developer's own .synse.yaml or environment never leaks into a result.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import httpx
import pytest
import structlog

from synse_cli.cli.client import SynseClient

FAKE_ADDRESS = "synse.test:5000"

SCAN_PAYLOAD: dict[str, Any] = {
    "racks": [
        {
            "id": "rack-1",
            "boards": [
                {
                    "id": "vec",
                    "devices": [
                        {"id": "0001", "info": "PSU A", "type": "power"},
                        {"id": "0002", "info": "Inlet Temp", "type": "temperature"},
                    ],
                },
                {
                    "id": "40000000",
                    "devices": [
                        {"id": "0003", "info": "PSU B", "type": "power"},
                    ],
                },
            ],
        },
        {
            "id": "rack-2",
            "boards": [
                {
                    "id": "vec",
                    "devices": [
                        {"id": "0004", "info": "PSU C", "type": "power"},
                        {"id": "0005", "info": "Fan 1", "type": "fan_speed"},
                    ],
                },
            ],
        },
    ]
}


def power_reading(
    input_power: float = 12.5,
    over_current: bool = False,
    power_ok: bool = True,
    power_status: str = "on",
) -> dict[str, Any]:
    """Body of a power read or power action response."""
    return {
        "input_power": input_power,
        "over_current": over_current,
        "power_ok": power_ok,
        "power_status": power_status,
    }


def error_body(http_code: int, description: str, context: str = "") -> dict[str, Any]:
    """Body of a Synse Server error response."""
    return {
        "http_code": http_code,
        "error_id": 4000,
        "description": description,
        "timestamp": "2026-01-01T00:00:00Z",
        "context": context,
    }


class FakeSynseServer:
    """
    In-process Synse Server backed by httpx.MockTransport.

    Unknown paths answer 404 with a Synse error body.
    """

    def __init__(self, scan: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.errors: dict[str, Exception] = {}
        self.requests: list[httpx.Request] = []
        if scan is not None:
            self.respond("/synse/2.0/scan", scan)

    def respond(self, path: str, body: Any, status: int = 200) -> None:
        """Answer GET {path} with a JSON body (raw text if a str, no body if None)."""
        self.routes[path] = (status, body)

    def fail(self, path: str, error: Exception) -> None:
        """Raise a transport-level error for GET {path}."""
        self.errors[path] = error

    def paths(self) -> list[str]:
        """Paths requested so far, in order."""
        return [request.url.path for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.errors:
            raise self.errors[path]
        if path not in self.routes:
            return httpx.Response(404, json=error_body(404, "resource not found", path))
        status, body = self.routes[path]
        if body is None:
            return httpx.Response(status)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self, timeout: float = 10.0) -> SynseClient:
        return SynseClient(FAKE_ADDRESS, timeout=timeout, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def scan_payload() -> dict[str, Any]:
    """A fresh copy of the sample scan: two racks, three power devices."""
    return copy.deepcopy(SCAN_PAYLOAD)


@pytest.fixture
def synse_server(scan_payload: dict[str, Any]) -> FakeSynseServer:
    """Fake server serving the sample scan and healthy power readings."""
    server = FakeSynseServer(scan=scan_payload)
    server.respond("/synse/2.0/power/rack-1/vec/0001", power_reading(10.0))
    server.respond("/synse/2.0/power/rack-1/40000000/0003", power_reading(20.25))
    server.respond("/synse/2.0/power/rack-2/vec/0004", power_reading(30.5, power_status="off", power_ok=False))
    return server


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty cwd with an empty HOME and no SYNSE_* variables."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for name in list(os.environ):
        if name.upper().startswith("SYNSE_"):
            monkeypatch.delenv(name, raising=False)
    return work


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by setup_logging so streams do not outlive a test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
