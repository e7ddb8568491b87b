"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "restaurantiq-gateway"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Read once by load_config(), never per request
UPSTREAM_URL_ENV = "RESTAURANTIQ_API_URL"
DEFAULT_UPSTREAM_URL = "http://localhost:3000"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = True


class UpstreamSettings(BaseModel):
    base_url: str = DEFAULT_UPSTREAM_URL
    api_prefix: str = "/api/v1"
    timeout: float = 300.0


class GatewaySettings(BaseModel):
    generate_correlation_id: bool = False


class LimitSettings(BaseModel):
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keep_alive_timeout: int = 5
    max_body_size: int = 50 * 1024 * 1024  # 50MB


class UpstreamTarget(BaseModel):
    """Where proxied requests go. Fixed for the lifetime of the process."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_prefix: str = "/api/v1"

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{self.api_prefix}{path}"


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)

    def upstream_target(self) -> UpstreamTarget:
        return UpstreamTarget(
            base_url=self.upstream.base_url,
            api_prefix=self.upstream.api_prefix,
        )


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config = Config()
        config_file.write_text(config.model_dump_json(indent=2))
    else:
        try:
            data = json.loads(config_file.read_text())
            config = Config.model_validate(data)
        except (json.JSONDecodeError, ValidationError):
            # Backup corrupted config and recreate default
            backup = config_file.with_suffix(".json.bak")
            config_file.rename(backup)
            config = Config()
            config_file.write_text(config.model_dump_json(indent=2))

    return apply_env_overrides(config)


def apply_env_overrides(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    """Let the environment point the gateway at a different upstream."""
    environ = os.environ if environ is None else environ
    base_url = environ.get(UPSTREAM_URL_ENV)
    if not base_url:
        return config
    upstream = config.upstream.model_copy(update={"base_url": base_url})
    return config.model_copy(update={"upstream": upstream})
