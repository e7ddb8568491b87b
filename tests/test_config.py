"""
Tests for configuration loading
"""

import json

import pytest
from pydantic import ValidationError

from core.config import (
    DEFAULT_UPSTREAM_URL,
    UPSTREAM_URL_ENV,
    Config,
    UpstreamTarget,
    apply_env_overrides,
    load_config,
)


def test_defaults():
    config = Config()

    assert config.upstream.base_url == DEFAULT_UPSTREAM_URL
    assert config.upstream.api_prefix == "/api/v1"
    assert config.proxy.port == 8080
    assert config.gateway.generate_correlation_id is False


def test_load_creates_default_file(tmp_path, monkeypatch):
    monkeypatch.delenv(UPSTREAM_URL_ENV, raising=False)
    config_file = tmp_path / "gateway" / "config.json"

    config = load_config(config_file)

    assert config == Config()
    assert json.loads(config_file.read_text())["upstream"]["base_url"] == DEFAULT_UPSTREAM_URL


def test_load_reads_existing_file(tmp_path, monkeypatch):
    monkeypatch.delenv(UPSTREAM_URL_ENV, raising=False)
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"upstream": {"base_url": "http://api.internal:4000"}}))

    config = load_config(config_file)

    assert config.upstream.base_url == "http://api.internal:4000"
    assert config.proxy.port == 8080


def test_corrupt_file_backed_up(tmp_path, monkeypatch):
    monkeypatch.delenv(UPSTREAM_URL_ENV, raising=False)
    config_file = tmp_path / "config.json"
    config_file.write_text("{broken")

    config = load_config(config_file)

    assert config == Config()
    assert (tmp_path / "config.json.bak").read_text() == "{broken"


def test_env_overrides_base_url(tmp_path, monkeypatch):
    monkeypatch.setenv(UPSTREAM_URL_ENV, "http://backend:3000")

    config = load_config(tmp_path / "config.json")

    assert config.upstream.base_url == "http://backend:3000"


def test_empty_env_value_ignored():
    config = apply_env_overrides(Config(), {UPSTREAM_URL_ENV: ""})

    assert config.upstream.base_url == DEFAULT_UPSTREAM_URL


def test_upstream_target_is_frozen():
    target = Config().upstream_target()

    with pytest.raises(ValidationError):
        target.base_url = "http://elsewhere"


def test_upstream_target_url_for():
    target = UpstreamTarget(base_url="http://backend.test/", api_prefix="/api/v1")

    assert target.url_for("/restaurants/r1/roles") == "http://backend.test/api/v1/restaurants/r1/roles"
