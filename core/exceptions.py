"""Custom exception hierarchy for the RestaurantIQ gateway."""


class GatewayError(Exception):
    """Base exception for errors the gateway reports to its caller.

    Attributes:
        code: Machine-readable error code placed in the failure envelope
        message: Human-readable description
        status_code: HTTP status returned to the caller
    """

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(GatewayError):
    """Raised when configuration is missing or invalid."""


class MissingParameterError(GatewayError):
    """A path parameter required by the upstream path is absent or empty."""

    code = "MISSING_PARAMETER"
    status_code = 400

    def __init__(self, name: str) -> None:
        super().__init__(f"Path parameter '{name}' is required")
        self.name = name


class InvalidQueryError(GatewayError):
    """A required query parameter is absent."""

    code = "INVALID_QUERY"
    status_code = 400


class UnauthorizedError(GatewayError):
    code = "UNAUTHORIZED"
    status_code = 401


class InvalidJSON(GatewayError):
    """Request body is not valid JSON."""

    code = "INVALID_JSON"
    status_code = 400


class RequestTooLarge(GatewayError):
    """Request body exceeds size limit."""

    code = "REQUEST_TOO_LARGE"
    status_code = 413


class UpstreamTimeoutError(GatewayError):
    """Raised when the upstream does not answer before the deadline."""

    code = "UPSTREAM_TIMEOUT"
    status_code = 504


class UpstreamBadResponseError(GatewayError):
    """Raised when the upstream answers with a body that is not JSON."""

    code = "UPSTREAM_BAD_RESPONSE"
    status_code = 500


class InternalGatewayError(GatewayError):
    """Raised for local failures: connection errors, malformed options."""
