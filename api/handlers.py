"""FastAPI route handlers."""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from api.routes import RouteSpec, route_name
from core.config import Config
from core.envelope import success_response
from core.exceptions import GatewayError, InvalidJSON
from core.request_types import BODYLESS_METHODS, ProxyOptions
from services.gateway import Gateway

Endpoint = Callable[[Request], Awaitable[Response]]


async def _path_params(request: Request) -> dict[str, str]:
    return dict(request.path_params)


def make_proxy_handler(route: RouteSpec, method: str) -> Endpoint:
    """Build the endpoint that proxies ``method`` on ``route``."""
    creates = method in route.creates

    async def handle(request: Request) -> Response:
        gateway: Gateway = request.app.state.gateway
        correlation_id = gateway.correlation_id(request)

        try:
            gateway.authorize(request, route.require_auth)
            query = route.build_query(request.query_params) if method == "GET" else None
            options = ProxyOptions(timeout_ms=route.timeout_ms)
            if route.body_fields and method not in BODYLESS_METHODS:
                body = await gateway.read_body(request)
                if body is None:
                    raise InvalidJSON("Request body is required")
                options = ProxyOptions(timeout_ms=route.timeout_ms, body=route.pick_body(body))
        except GatewayError as e:
            return gateway.failure(f"{method} {route.upstream_path}", e, correlation_id)

        return await gateway.proxy(
            request,
            route.upstream_path,
            options,
            params=_path_params(request),
            query=query,
            creates=creates,
            require_auth=route.require_auth,
            correlation_id=correlation_id,
        )

    handle.__name__ = route_name(route, method)
    return handle


async def handle_health(request: Request, config: Config) -> Response:
    """Report that the gateway is up and where it forwards to."""
    gateway: Gateway = request.app.state.gateway
    return success_response(
        {"status": "healthy", "upstream": config.upstream.base_url},
        gateway.correlation_id(request),
    )
