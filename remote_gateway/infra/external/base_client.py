"""Base HTTP client for external API integrations.

Provides a base class for external service clients with:
- Connection pooling
- Request/response logging
- Timeout configuration
- Error mapping to ``RemoteFetchError``

Requests are never retried: a failed upstream call is reported once.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from remote_gateway.core.exceptions import RemoteFetchError

logger = logging.getLogger(__name__)


class BaseHTTPClient:
    """Base HTTP client for external API integrations.

    Example:
        ```python
        class StatusClient(BaseHTTPClient):
            async def status(self) -> dict:
                return await self.post("/status", json={})
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Base URL for the API.
            timeout: Request timeout in seconds.
            headers: Default headers to include in all requests.
            max_connections: Connection pool size.
            max_keepalive_connections: Idle connections kept open.
            transport: Optional transport override (tests use httpx.MockTransport).
        """
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or {}

        # Create async client with connection pooling
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=self.default_headers,
            limits=httpx.Limits(
                max_keepalive_connections=max_keepalive_connections,
                max_connections=max_connections,
            ),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self.client.aclose()

    async def __aenter__(self) -> BaseHTTPClient:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager and close client."""
        await self.close()

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Make POST request to external API.

        Args:
            path: API endpoint path.
            json: JSON body data.
            headers: Additional headers for this request.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            Decoded JSON response body.

        Raises:
            RemoteFetchError: On transport errors, non-2xx statuses or
                undecodable bodies.
        """
        url = f"{self.base_url}{path}"
        logger.info(f"POST request to {url}", extra={"path": path})
        started = time.perf_counter()

        try:
            response = await self.client.post(path, json=json, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            msg = f"Request to {url} timed out after {self.timeout}s"
            raise RemoteFetchError(msg, instance=url) from exc
        except httpx.HTTPError as exc:
            msg = f"Request to {url} failed: {exc}"
            raise RemoteFetchError(msg, instance=url) from exc

        logger.info(
            f"POST response from {url}",
            extra={
                "path": path,
                "status_code": response.status_code,
                "duration_ms": (time.perf_counter() - started) * 1000,
            },
        )

        if response.is_error:
            msg = f"Remote returned HTTP {response.status_code}"
            raise RemoteFetchError(msg, upstream_status=response.status_code, instance=url)

        try:
            return response.json()
        except ValueError as exc:
            msg = "Remote returned a body that is not JSON"
            raise RemoteFetchError(
                msg, upstream_status=response.status_code, instance=url
            ) from exc
