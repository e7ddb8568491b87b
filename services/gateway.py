"""Backend proxy gateway: validate, forward, relay."""

import inspect
import json
import time
from collections.abc import Awaitable, Mapping
from typing import Any

from fastapi import Request, Response
from pydantic import ValidationError

from core.envelope import CORRELATION_HEADER, error_response, failure_from_error
from core.exceptions import (
    GatewayError,
    InternalGatewayError,
    InvalidJSON,
    RequestTooLarge,
    UnauthorizedError,
    UpstreamBadResponseError,
)
from core.headers import HeaderBuilder
from core.paths import PathTemplate
from core.protocols import RequestLogger
from core.request_types import BODYLESS_METHODS, ProxyOptions, ProxyRequest
from services.upstream import UpstreamClient

Params = Mapping[str, Any] | Awaitable[Mapping[str, Any]]
Query = Mapping[str, Any] | list[tuple[str, str]]


class Gateway:
    """Forward one inbound request to the upstream API and relay the answer.

    Holds no per-request state; concurrent calls share only the pooled
    upstream client.
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        logger: RequestLogger,
        header_builder: HeaderBuilder | None = None,
        max_body_size: int = 50 * 1024 * 1024,
    ) -> None:
        self._upstream = upstream
        self._logger = logger
        self._headers = header_builder or HeaderBuilder()
        self._max_body_size = max_body_size

    def correlation_id(self, request: Request) -> str:
        return self._headers.correlation_id(request.headers)

    async def proxy(
        self,
        request: Request,
        path_template: str,
        options: ProxyOptions | Mapping[str, Any] | None = None,
        *,
        params: Params | None = None,
        query: Query | None = None,
        creates: bool = False,
        require_auth: bool = True,
        correlation_id: str | None = None,
    ) -> Response:
        """Proxy ``request`` to ``path_template`` and return the response to send.

        Never raises: local failures come back as failure envelopes,
        upstream answers are relayed unchanged.
        """
        if correlation_id is None:
            correlation_id = self.correlation_id(request)
        route = f"{request.method} {path_template}"

        try:
            prepared = await self.prepare(
                request,
                path_template,
                options,
                params=params,
                query=query,
                require_auth=require_auth,
                correlation_id=correlation_id,
            )
            return await self._relay(prepared, route, creates)
        except GatewayError as e:
            return self.failure(route, e, correlation_id)
        except Exception as e:  # noqa: BLE001
            self._logger.log_error(route, 500, f"Unhandled gateway error: {e!r}")
            return error_response("INTERNAL_ERROR", "Internal server error", correlation_id, 500)

    async def prepare(
        self,
        request: Request,
        path_template: str,
        options: ProxyOptions | Mapping[str, Any] | None = None,
        *,
        params: Params | None = None,
        query: Query | None = None,
        require_auth: bool = True,
        correlation_id: str = "",
    ) -> ProxyRequest:
        """Validate the inbound request and build the upstream request."""
        resolved = await self._resolve_params(request, params)
        options = self._coerce_options(options)
        path = PathTemplate(path_template).resolve(resolved)

        self.authorize(request, require_auth)

        method = options.method or request.method.upper()
        if options.has_body:
            body, send_body = options.body, True
        elif method in BODYLESS_METHODS:
            body, send_body = None, False
        else:
            body = await self.read_body(request)
            send_body = body is not None

        return ProxyRequest(
            method=method,
            path=path,
            headers=self._headers.build_upstream_headers(request.headers, correlation_id),
            correlation_id=correlation_id,
            query=self._query_items(request, query),
            body=body,
            send_body=send_body,
            timeout_ms=options.timeout_ms,
        )

    def authorize(self, request: Request, require_auth: bool = True) -> None:
        """Reject the request when it must carry credentials and does not."""
        if require_auth and not self._headers.authorization(request.headers):
            raise UnauthorizedError("Authorization header required")

    def failure(self, route: str, error: GatewayError, correlation_id: str) -> Response:
        """Log a locally detected failure and build its envelope."""
        self._logger.log_error(route, error.status_code, f"{error.code}: {error.message}")
        return failure_from_error(error, correlation_id)

    async def read_body(self, request: Request) -> Any:
        """Parse the inbound JSON body; an empty body yields None."""
        raw_body = await request.body()
        if len(raw_body) > self._max_body_size:
            raise RequestTooLarge("Request body too large")
        if not raw_body.strip():
            return None
        try:
            return json.loads(raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidJSON(f"Invalid JSON: {e}") from e

    async def _relay(self, prepared: ProxyRequest, route: str, creates: bool) -> Response:
        self._logger.log_request(
            prepared.method,
            self._upstream.url_for(prepared),
            prepared.headers,
            prepared.body,
            route=route,
            correlation_id=prepared.correlation_id,
        )
        start = time.perf_counter()
        response = await self._upstream.send(prepared)
        elapsed_ms = (time.perf_counter() - start) * 1000

        try:
            response.json()
        except ValueError as e:
            raise UpstreamBadResponseError(
                f"Upstream returned a non-JSON body (status {response.status_code})"
            ) from e

        if response.is_success:
            status = 201 if creates else 200
        else:
            status = response.status_code
            self._logger.log_error(route, status, response.text)

        self._logger.log_response(route, status, elapsed_ms)
        return Response(
            content=response.content,
            status_code=status,
            media_type="application/json",
            headers={CORRELATION_HEADER: prepared.correlation_id},
        )

    @staticmethod
    def _coerce_options(options: ProxyOptions | Mapping[str, Any] | None) -> ProxyOptions:
        if options is None:
            return ProxyOptions()
        if isinstance(options, ProxyOptions):
            return options
        try:
            return ProxyOptions.model_validate(dict(options))
        except (ValidationError, TypeError, ValueError) as e:
            raise InternalGatewayError(f"Invalid proxy options: {e}") from e

    @staticmethod
    async def _resolve_params(request: Request, params: Params | None) -> dict[str, Any]:
        if params is None:
            return dict(request.path_params)
        if inspect.isawaitable(params):
            params = await params
        return dict(params)

    @staticmethod
    def _query_items(request: Request, query: Query | None) -> list[tuple[str, str]]:
        if query is None:
            return list(request.query_params.multi_items())
        if isinstance(query, Mapping):
            return [(str(k), str(v)) for k, v in query.items() if v is not None]
        return list(query)
