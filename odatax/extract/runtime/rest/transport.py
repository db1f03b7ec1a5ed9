"""Authenticated single-call transport for the OData service."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import aiohttp

from ...core.enums import AuthType, MediaType
from ...core.exceptions import ConnectionFailedError, TransportError
from .auth import AuthScheme, BasicAuthScheme, BearerAuthScheme
from .http_client import CONNECTION_TIMEOUT, HTTPClient
from .response import ResponseContainer
from .token import TokenCache, TokenManager

if TYPE_CHECKING:
    from ...config import ConnectorConfig

logger = logging.getLogger(__name__)


class ODataTransport:
    """Performs one authenticated GET and normalizes the response.

    Errors raised by the HTTP stack are wrapped in ``TransportError``;
    connection-level failures use the ``ConnectionFailedError`` subtype so
    the retry layer can tell them apart from a malformed URL.
    """

    def __init__(self, http: HTTPClient, auth: AuthScheme) -> None:
        self._http = http
        self._auth = auth

    @classmethod
    def from_config(
        cls,
        config: ConnectorConfig,
        token_cache: TokenCache | None = None,
        timeout: float = CONNECTION_TIMEOUT,
    ) -> ODataTransport:
        """Build a transport for the configured auth scheme and proxy."""
        http = HTTPClient(
            timeout=timeout,
            proxy_url=config.proxy_url,
            proxy_username=config.proxy_username,
            proxy_password=config.proxy_password,
        )
        auth: AuthScheme
        if config.auth_type == AuthType.BASIC:
            auth = BasicAuthScheme(config.username or "", config.password or "")
        else:
            auth = BearerAuthScheme(TokenManager.from_config(config, http, cache=token_cache))
        return cls(http, auth)

    @property
    def http(self) -> HTTPClient:
        return self._http

    @property
    def auth(self) -> AuthScheme:
        return self._auth

    async def call(
        self,
        endpoint: str,
        accept_media_type: MediaType | str = MediaType.JSON,
    ) -> ResponseContainer:
        """Call the endpoint and return its fully-read response.

        Args:
            endpoint: Absolute URL
            accept_media_type: Value of the Accept header

        Raises:
            TransportError: On connection, timeout, URL or protocol errors
        """
        accept = accept_media_type.value if isinstance(accept_media_type, MediaType) else accept_media_type

        async def send(auth_headers: dict[str, str]) -> ResponseContainer:
            return await self._http.get(endpoint, headers={**auth_headers, "Accept": accept})

        try:
            response = await self._auth.send(send)
        except aiohttp.InvalidURL as e:
            raise TransportError(f"Invalid service URL: {endpoint}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise ConnectionFailedError(f"Call to the service failed: {endpoint}") from e
        except ValueError as e:
            raise TransportError(f"Invalid request for {endpoint}") from e

        logger.debug(
            "transport_call_completed",
            extra={"endpoint": endpoint, "status_code": response.status_code},
        )
        return response

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> ODataTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
