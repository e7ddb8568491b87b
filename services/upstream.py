"""HTTP client wrapper for upstream requests."""

import asyncio
import json

import httpx

from core.config import UpstreamTarget
from core.exceptions import InternalGatewayError, UpstreamTimeoutError
from core.request_types import ProxyRequest


class UpstreamClient:
    """Send prepared requests to the upstream API over a shared client."""

    def __init__(self, client: httpx.AsyncClient, target: UpstreamTarget) -> None:
        self._client = client
        self.target = target

    def url_for(self, prepared: ProxyRequest) -> str:
        return self.target.url_for(prepared.path)

    async def send(self, prepared: ProxyRequest) -> httpx.Response:
        """Issue the call, translating transport failures into gateway errors."""
        content = json.dumps(prepared.body).encode() if prepared.send_body else None
        request = self._client.build_request(
            prepared.method,
            self.url_for(prepared),
            params=prepared.query,
            headers=prepared.headers,
            content=content,
        )

        try:
            if prepared.timeout is None:
                return await self._client.send(request)
            # Total deadline; httpx timeouts only bound individual phases
            return await asyncio.wait_for(self._client.send(request), prepared.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            if prepared.timeout_ms:
                message = f"Upstream did not respond within {prepared.timeout_ms} ms"
            else:
                message = "Upstream timeout"
            raise UpstreamTimeoutError(message) from e
        except httpx.RequestError as e:
            raise InternalGatewayError(f"Upstream connection error: {e}") from e
