"""
Tests for the upstream health check
"""

import httpx

import health
from core.config import Config, UpstreamSettings


def _config():
    return Config(upstream=UpstreamSettings(base_url="http://backend.test"))


def test_healthy(monkeypatch):
    seen = {}

    def fake_get(url, timeout):
        seen["url"] = url
        return httpx.Response(200, json={"success": True, "message": "RestaurantIQ API is running"})

    monkeypatch.setattr(health.httpx, "get", fake_get)

    healthy, detail = health.check_upstream(_config())

    assert healthy is True
    assert seen["url"] == "http://backend.test/api/v1/health"
    assert "RestaurantIQ API is running" in detail


def test_unreachable(monkeypatch):
    def fake_get(url, timeout):
        raise httpx.ConnectError("Connection refused")

    monkeypatch.setattr(health.httpx, "get", fake_get)

    healthy, detail = health.check_upstream(_config())

    assert healthy is False
    assert "unreachable" in detail


def test_bad_status(monkeypatch):
    monkeypatch.setattr(health.httpx, "get", lambda url, timeout: httpx.Response(503, json={}))

    healthy, _ = health.check_upstream(_config())

    assert healthy is False


def test_reported_failure(monkeypatch):
    monkeypatch.setattr(health.httpx, "get", lambda url, timeout: httpx.Response(200, json={"success": False}))

    healthy, _ = health.check_upstream(_config())

    assert healthy is False
