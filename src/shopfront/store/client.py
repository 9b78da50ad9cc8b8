"""HTTP client for the catalog/order backends.

One ``SourceClient`` per backend. Each request opens its own
``httpx.AsyncClient`` with the configured base URL, JSON headers and an
explicit timeout, so a hung backend cannot stall a page forever.
"""

import logging
from typing import Any

import httpx

from .conf import SourceConfig
from .exceptions import MalformedPayload, SourceUnavailable

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def _get_async_client(
    source: SourceConfig,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Get a configured async httpx client."""
    return httpx.AsyncClient(
        base_url=source.base_url,
        timeout=timeout,
        headers=DEFAULT_HEADERS,
        transport=transport,
    )


def _handle_response(response: httpx.Response, source: SourceConfig) -> Any:
    """Return the decoded body of a 2xx response.

    Empty bodies (typical for DELETE) decode to None.

    Raises:
        SourceUnavailable: On a non-2xx status
        MalformedPayload: On a 2xx body that is not JSON
    """
    if not response.is_success:
        raise SourceUnavailable(
            source.label,
            f"HTTP {response.status_code}",
            http_status=response.status_code,
        )

    if not response.content.strip():
        return None

    try:
        return response.json()
    except ValueError as e:
        raise MalformedPayload(source.label, str(e)) from e


class SourceClient:
    """Async JSON client for one backend."""

    def __init__(
        self,
        source: SourceConfig,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.source = source
        self.timeout = timeout
        self.transport = transport

    def __repr__(self):
        return f"<SourceClient {self.source.name} {self.source.base_url}>"

    @property
    def label(self) -> str:
        return self.source.label

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        payload: Any = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body.

        Raises:
            SourceUnavailable: If the backend is unreachable or answers non-2xx
            MalformedPayload: If a 2xx body is not JSON
        """
        try:
            async with _get_async_client(self.source, self.timeout, self.transport) as client:
                response = await client.request(
                    method,
                    path,
                    params=params or None,
                    json=payload,
                )
        except httpx.TimeoutException as e:
            logger.warning("%s API timed out on %s %s: %s", self.label, method, path, e)
            raise SourceUnavailable(self.label, "timed out") from e
        except httpx.RequestError as e:
            logger.warning("%s API unavailable on %s %s: %s", self.label, method, path, e)
            raise SourceUnavailable(self.label, str(e) or e.__class__.__name__) from e

        return _handle_response(response, self.source)

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: Any) -> Any:
        return await self.request("POST", path, payload=payload)

    async def put(self, path: str, payload: Any) -> Any:
        return await self.request("PUT", path, payload=payload)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def check_health(self) -> bool:
        """Check that the backend answers its product collection with 2xx."""
        try:
            await self.get(self.source.collection_path("products"), params={"limit": 1})
        except (SourceUnavailable, MalformedPayload) as e:
            logger.warning("%s API health check failed: %s", self.label, e)
            return False
        return True
