"""Unit tests for ODataTransport and the auth schemes.

Tests focus on header handling, the refresh-once path and error wrapping.
"""

from __future__ import annotations

import asyncio
import base64
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from odatax.extract.config import ConnectorConfig
from odatax.extract.core import AuthError, MediaType, TransportError
from odatax.extract.runtime.rest import (
    BasicAuthScheme,
    BearerAuthScheme,
    ConnectionFailedError,
    HTTPClient,
    InMemoryTokenCache,
    ODataTransport,
    ResponseContainer,
)


def make_http(*responses) -> HTTPClient:
    http = HTTPClient()
    http.get = AsyncMock(side_effect=list(responses))
    return http


def make_tokens(*tokens: str) -> MagicMock:
    tokens_mock = MagicMock()
    tokens_mock.get_token = AsyncMock(side_effect=list(tokens))
    return tokens_mock


class TestBasicAuth:
    """Test Basic authentication."""

    @pytest.mark.asyncio
    async def test_basic_header_and_accept(self):
        """Test every request carries Basic credentials and the Accept type."""
        http = make_http(ResponseContainer(status_code=200, body=b"ok"))
        transport = ODataTransport(http, BasicAuthScheme("user", "p:ss"))

        response = await transport.call("https://svc/odata/User", MediaType.XML)

        expected = "Basic " + base64.b64encode(b"user:p:ss").decode()
        http.get.assert_awaited_once_with(
            "https://svc/odata/User",
            headers={"Authorization": expected, "Accept": "application/xml"},
        )
        assert response.body == b"ok"

    @pytest.mark.asyncio
    async def test_basic_auth_does_not_retry_on_403(self):
        """Test a 403 under Basic auth is returned as-is."""
        http = make_http(ResponseContainer(status_code=403))
        transport = ODataTransport(http, BasicAuthScheme("user", "pw"))

        response = await transport.call("https://svc/odata/User")

        assert response.status_code == 403
        assert http.get.await_count == 1


class TestBearerAuth:
    """Test Bearer authentication with refresh-once on 403."""

    @pytest.mark.asyncio
    async def test_bearer_header(self):
        """Test the cached token is sent."""
        http = make_http(ResponseContainer(status_code=200))
        tokens = make_tokens("tok-1")
        transport = ODataTransport(http, BearerAuthScheme(tokens))

        await transport.call("https://svc/odata/User", "application/json")

        tokens.get_token.assert_awaited_once_with()
        http.get.assert_awaited_once_with(
            "https://svc/odata/User",
            headers={"Authorization": "Bearer tok-1", "Accept": "application/json"},
        )

    @pytest.mark.asyncio
    async def test_403_refreshes_once_and_retries_once(self):
        """Test a 403 triggers exactly one refresh and one repeated request."""
        http = make_http(ResponseContainer(status_code=403), ResponseContainer(status_code=200))
        tokens = make_tokens("stale", "fresh")
        transport = ODataTransport(http, BearerAuthScheme(tokens))

        response = await transport.call("https://svc/odata/User")

        assert response.status_code == 200
        assert tokens.get_token.await_count == 2
        assert tokens.get_token.await_args_list[1].kwargs == {"refresh": True}
        assert http.get.await_count == 2
        second_headers = http.get.await_args_list[1].kwargs["headers"]
        assert second_headers["Authorization"] == "Bearer fresh"

    @pytest.mark.asyncio
    async def test_second_403_is_returned(self):
        """Test the repeated request's result is returned even if still 403."""
        http = make_http(ResponseContainer(status_code=403), ResponseContainer(status_code=403))
        tokens = make_tokens("stale", "still-bad")
        transport = ODataTransport(http, BearerAuthScheme(tokens))

        response = await transport.call("https://svc/odata/User")

        assert response.status_code == 403
        assert tokens.get_token.await_count == 2
        assert http.get.await_count == 2

    @pytest.mark.asyncio
    async def test_401_does_not_refresh(self):
        """Test only 403 triggers a refresh."""
        http = make_http(ResponseContainer(status_code=401))
        tokens = make_tokens("tok")
        transport = ODataTransport(http, BearerAuthScheme(tokens))

        response = await transport.call("https://svc/odata/User")

        assert response.status_code == 401
        assert tokens.get_token.await_count == 1

    @pytest.mark.asyncio
    async def test_auth_error_propagates(self):
        """Test token failures surface as AuthError (a TransportError)."""
        http = make_http()
        tokens = MagicMock()
        tokens.get_token = AsyncMock(side_effect=AuthError("no token"))
        transport = ODataTransport(http, BearerAuthScheme(tokens))

        with pytest.raises(TransportError) as exc_info:
            await transport.call("https://svc/odata/User")

        assert isinstance(exc_info.value, AuthError)
        http.get.assert_not_awaited()


class TestErrorWrapping:
    """Test HTTP stack errors become TransportError."""

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self):
        cause = aiohttp.ClientConnectionError("refused")
        transport = ODataTransport(make_http(cause), BasicAuthScheme("u", "p"))

        with pytest.raises(ConnectionFailedError) as exc_info:
            await transport.call("https://svc/odata/User")

        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        transport = ODataTransport(make_http(asyncio.TimeoutError()), BasicAuthScheme("u", "p"))

        with pytest.raises(ConnectionFailedError):
            await transport.call("https://svc/odata/User")

    @pytest.mark.asyncio
    async def test_invalid_url_is_not_a_connection_failure(self):
        transport = ODataTransport(
            make_http(aiohttp.InvalidURL("nope")), BasicAuthScheme("u", "p")
        )

        with pytest.raises(TransportError) as exc_info:
            await transport.call("nope")

        assert not isinstance(exc_info.value, ConnectionFailedError)


class TestFromConfig:
    """Test building transports from settings."""

    def test_basic_config(self):
        config = ConnectorConfig(baseURL="https://svc/odata", username="u", password="p")

        transport = ODataTransport.from_config(config)

        assert isinstance(transport.auth, BasicAuthScheme)
        assert transport.http.proxy_url is None

    def test_oauth_config_with_proxy(self):
        config = ConnectorConfig(
            baseURL="https://svc/odata",
            authType="oAuth2",
            tokenURL="https://svc/oauth/token",
            clientId="client",
            companyId="company",
            assertionTokenType="enterToken",
            assertionToken="assertion",
            proxyUrl="http://proxy.local:3128",
            proxyUsername="pu",
            proxyPassword="pp",
        )

        transport = ODataTransport.from_config(config, token_cache=InMemoryTokenCache())

        assert isinstance(transport.auth, BearerAuthScheme)
        assert transport.http.proxy_url == "http://proxy.local:3128"
        assert transport.http.proxy_headers == {
            "Proxy-Authorization": "Basic " + base64.b64encode(b"pu:pp").decode()
        }

    def test_oauth_config_missing_inputs(self):
        config = ConnectorConfig(baseURL="https://svc/odata", authType="oAuth2")

        with pytest.raises(AuthError, match="token_url"):
            ODataTransport.from_config(config)
