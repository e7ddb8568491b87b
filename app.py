"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_health, make_proxy_handler
from api.routes import ROUTES, route_name
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.gateway import Gateway
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the upstream client,
    which lets tests answer upstream calls in-process.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
        )
        app.state.gateway = Gateway(
            upstream=UpstreamClient(client, config.upstream_target()),
            logger=logger,
            header_builder=HeaderBuilder(config.gateway.generate_correlation_id),
            max_body_size=config.limits.max_body_size,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="RestaurantIQ Gateway", version="0.1.0", lifespan=lifespan)

    @app.get("/api/health")
    async def health(request: Request):
        return await handle_health(request, config)

    for route in ROUTES:
        for method in route.methods:
            app.add_api_route(
                route.path,
                make_proxy_handler(route, method),
                methods=[method],
                name=route_name(route, method),
            )

    return app
