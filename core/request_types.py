"""Shared request data types."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

BODYLESS_METHODS = frozenset({"GET", "DELETE", "HEAD"})


class ProxyOptions(BaseModel):
    """Per-call overrides. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    method: str | None = None
    body: Any = None
    timeout_ms: int | None = Field(default=None, alias="timeoutMs", gt=0)

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str | None) -> str | None:
        return value.upper() if value else None

    @property
    def has_body(self) -> bool:
        """True when body was passed explicitly, even as None."""
        return "body" in self.model_fields_set


@dataclass(frozen=True)
class ProxyRequest:
    """Prepared data for an upstream request."""

    method: str
    path: str
    headers: dict[str, str]
    correlation_id: str
    query: list[tuple[str, str]] = field(default_factory=list)
    body: Any = None
    send_body: bool = False
    timeout_ms: int | None = None

    @property
    def timeout(self) -> float | None:
        return self.timeout_ms / 1000 if self.timeout_ms else None
