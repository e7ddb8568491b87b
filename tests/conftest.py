"""
Pytest fixtures for gateway tests
"""

import asyncio
import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from app import create_app
from core.config import Config, UpstreamSettings
from core.headers import HeaderBuilder
from services.gateway import Gateway
from services.upstream import UpstreamClient

UPSTREAM_BASE = "http://backend.test"


class FakeUpstream:
    """Upstream test double: records every request and answers as configured."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.content: bytes = b"{}"
        self.delay: float | None = None
        self.error: Exception | None = None

    def respond_with(
        self,
        status: int = 200,
        json_body: Any = None,
        *,
        content: bytes | None = None,
        delay: float | None = None,
        error: Exception | None = None,
    ) -> None:
        self.status = status
        if content is not None:
            self.content = content
        elif json_body is not None:
            self.content = json.dumps(json_body).encode()
        self.delay = delay
        self.error = error

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.delay:
            await asyncio.sleep(self.delay)
        return httpx.Response(
            self.status,
            content=self.content,
            headers={"content-type": "application/json"},
        )


class RecordingLogger:
    """RequestLogger that keeps every event for assertions."""

    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self.responses: list[tuple[str, int]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_request(self, method, url, headers, body=None, *, route, correlation_id):
        self.requests.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "body": body,
                "route": route,
                "correlation_id": correlation_id,
            }
        )

    def log_response(self, route, status, elapsed_ms):
        self.responses.append((route, status))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


def make_request(
    method: str = "GET",
    path: str = "/",
    *,
    headers: dict[str, str] | None = None,
    body: bytes = b"",
    path_params: dict[str, Any] | None = None,
    query_string: bytes = b"",
) -> Request:
    """Build a Starlette request without running a server."""
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query_string,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "path_params": path_params or {},
        "server": ("testserver", 80),
        "client": ("testclient", 50000),
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def config():
    return Config(upstream=UpstreamSettings(base_url=UPSTREAM_BASE))


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def gateway(config, upstream, recording_logger):
    """Gateway wired to the fake upstream, for direct ``proxy`` calls."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    return Gateway(
        upstream=UpstreamClient(client, config.upstream_target()),
        logger=recording_logger,
        header_builder=HeaderBuilder(),
        max_body_size=1024,
    )


@pytest.fixture
def client(config, upstream, recording_logger):
    """TestClient for the full app with the fake upstream behind it."""
    app = create_app(config, recording_logger, transport=httpx.MockTransport(upstream))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer t1", "x-correlation-id": "corr-1"}
