"""Async HTTP client for all outbound calls, via httpx.

One UpstreamClient is created at startup and shared by every route. Each
inbound request results in at most one outbound call per upstream; there is
no retry policy at this layer.
"""

from typing import Any, Self

import httpx

from gateway.config import UpstreamSettings
from gateway.exceptions import UpstreamError
from gateway.logging import get_logger

logger = get_logger(__name__)


class UpstreamClient:
    """Owns the shared httpx.AsyncClient and maps failures to UpstreamError.

    Usage:
        async with UpstreamClient(settings.upstream) as client:
            data = await client.get_json(url)
    """

    def __init__(
        self,
        settings: UpstreamSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def http(self) -> httpx.AsyncClient:
        """Access the underlying httpx client.

        Raises RuntimeError if not connected.
        """
        if self._client is None:
            raise RuntimeError("Upstream client not connected. Call connect() first.")
        return self._client

    @property
    def backend_headers(self) -> dict[str, str]:
        """Headers for Synthos backend calls (X-API-Key when configured)."""
        api_key = self._settings.api_key.get_secret_value()
        return {"X-API-Key": api_key} if api_key else {}

    async def connect(self) -> None:
        """Create the pooled httpx client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )
        logger.info("upstream_client_connected", timeout=self._settings.timeout_seconds)

    async def close(self) -> None:
        """Close pooled connections if open."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("upstream_client_closed")

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: Any = None,
        authenticated: bool = False,
    ) -> httpx.Response:
        """Send one request and return the raw response.

        Transport-level failures (DNS, connect, timeout) become an
        UpstreamError with status 500 and no reason.
        """
        headers = self.backend_headers if authenticated else None
        try:
            response = await self.http.request(
                method, url, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("upstream_request_failed", method=method, url=url, error=str(e))
            raise UpstreamError(f"Upstream request failed: {e}") from e

        logger.debug(
            "upstream_response",
            method=method,
            url=url,
            status=response.status_code,
        )
        return response

    async def get_json(
        self, url: str, *, params: Any = None, authenticated: bool = False
    ) -> Any:
        """GET ``url`` and return the decoded JSON body."""
        response = await self.request(
            "GET", url, params=params, authenticated=authenticated
        )
        return self._decode(response)

    async def post_json(
        self, url: str, payload: Any, *, authenticated: bool = False
    ) -> Any:
        """POST ``payload`` as JSON to ``url`` and return the decoded JSON body."""
        response = await self.request(
            "POST", url, json=payload, authenticated=authenticated
        )
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Return the JSON body of a success response or raise UpstreamError.

        Non-success responses keep their status, reason phrase, parsed JSON
        body (when there is one) and raw text. A success response whose body
        is not JSON is treated like a transport failure.
        """
        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                logger.error(
                    "upstream_invalid_json",
                    url=str(response.request.url),
                    status=response.status_code,
                )
                raise UpstreamError("Upstream returned an invalid JSON body") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        logger.warning(
            "upstream_error_response",
            url=str(response.request.url),
            status=response.status_code,
            reason=response.reason_phrase,
            body=body,
        )
        raise UpstreamError(
            f"Upstream returned {response.status_code}",
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=body,
            details=response.text,
        )

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        """Async context manager exit."""
        await self.close()
