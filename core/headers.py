"""Header lookup and construction for upstream requests."""

from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from core.envelope import CORRELATION_HEADER


def get_header(headers: Mapping[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup that works on plain dicts too."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return str(value)
    return None


class HeaderBuilder:
    """Build upstream headers from the inbound request."""

    def __init__(self, generate_correlation_id: bool = False) -> None:
        self.generate_correlation_id = generate_correlation_id

    def correlation_id(self, headers: Mapping[str, Any]) -> str:
        """Forward the caller's correlation id, or default it."""
        value = get_header(headers, CORRELATION_HEADER)
        if value:
            return value
        return uuid4().hex if self.generate_correlation_id else ""

    def authorization(self, headers: Mapping[str, Any]) -> str | None:
        value = get_header(headers, "authorization")
        if value is None or not value.strip():
            return None
        return value.strip()

    def build_upstream_headers(
        self,
        headers: Mapping[str, Any],
        correlation_id: str,
    ) -> dict[str, str]:
        """Pass through auth and correlation headers only."""
        upstream: dict[str, str] = {
            "Content-Type": "application/json",
            CORRELATION_HEADER: correlation_id,
        }
        auth = self.authorization(headers)
        if auth:
            upstream["Authorization"] = auth
        return upstream
