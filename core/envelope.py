"""JSON response envelopes shared by every gateway-authored response."""

from typing import Any, Literal

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import GatewayError

CORRELATION_HEADER = "x-correlation-id"


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    message: str
    correlation_id: str = Field(default="", alias="correlationId")


class Failure(BaseModel):
    success: Literal[False] = False
    error: ErrorDetail


class Success(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: Literal[True] = True
    data: Any = None
    correlation_id: str = Field(default="", alias="correlationId")


def error_response(
    code: str,
    message: str,
    correlation_id: str,
    status: int = 500,
) -> JSONResponse:
    """Standard failure envelope."""
    envelope = Failure(error=ErrorDetail(code=code, message=message, correlation_id=correlation_id))
    return JSONResponse(
        envelope.model_dump(by_alias=True),
        status_code=status,
        headers={CORRELATION_HEADER: correlation_id},
    )


def success_response(data: Any, correlation_id: str, status: int = 200) -> JSONResponse:
    """Standard success envelope for responses the gateway writes itself."""
    envelope = Success(data=data, correlation_id=correlation_id)
    return JSONResponse(
        envelope.model_dump(by_alias=True, mode="json"),
        status_code=status,
        headers={CORRELATION_HEADER: correlation_id},
    )


def failure_from_error(error: GatewayError, correlation_id: str) -> JSONResponse:
    return error_response(error.code, error.message, correlation_id, error.status_code)
