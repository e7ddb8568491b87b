"""Shared protocol definitions."""

from typing import Any, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, PlainLogger)."""

    def log_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any = None,
        *,
        route: str,
        correlation_id: str,
    ) -> None: ...
    def log_response(self, route: str, status: int, elapsed_ms: float) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
