"""HTTP client helper."""

from __future__ import annotations

import base64
from typing import Any

import aiohttp

from ...core.enums import SERVICE_VERSION_HEADER
from .response import ResponseContainer

# Enterprise gateways can take minutes to answer large pages
CONNECTION_TIMEOUT = 300.0


def basic_credentials(username: str, password: str) -> str:
    """Value of a Basic ``Authorization`` or ``Proxy-Authorization`` header."""
    encoded = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {encoded}"


class HTTPClient:
    """Async HTTP client wrapper.

    Owns one ``aiohttp.ClientSession``; every response is read in full and
    released before it is returned as a ``ResponseContainer``.
    """

    def __init__(
        self,
        timeout: float = CONNECTION_TIMEOUT,
        proxy_url: str | None = None,
        proxy_username: str | None = None,
        proxy_password: str | None = None,
    ) -> None:
        # aiohttp has no write timeout; total is left unbounded so slow
        # bodies are limited per read instead
        self.timeout = aiohttp.ClientTimeout(
            total=None,
            connect=timeout,
            sock_connect=timeout,
            sock_read=timeout,
        )
        self.proxy_url = proxy_url or None
        # Sent with every proxied request rather than in answer to a 407
        self.proxy_headers: dict[str, str] | None = None
        if self.proxy_url and proxy_username and proxy_password:
            self.proxy_headers = {
                "Proxy-Authorization": basic_credentials(proxy_username, proxy_password)
            }
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> ResponseContainer:
        """GET request."""
        return await self._request("GET", url, headers=headers)

    async def post_form(
        self,
        url: str,
        data: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> ResponseContainer:
        """POST an ``application/x-www-form-urlencoded`` body."""
        return await self._request("POST", url, headers=headers, data=data)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ResponseContainer:
        async with self.session.request(
            method,
            url,
            headers=headers,
            data=data,
            proxy=self.proxy_url,
            proxy_headers=self.proxy_headers,
        ) as response:
            body = await response.read()
            return ResponseContainer(
                status_code=response.status,
                status_message=response.reason or "",
                service_version=response.headers.get(SERVICE_VERSION_HEADER),
                body=body or b"",
            )

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
