"""Unit tests for HTTPClient.

Tests focus on session management, timeouts, proxy settings and response
normalization.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from odatax.extract.runtime.rest import CONNECTION_TIMEOUT, HTTPClient


def mock_session(status: int = 200, reason: str = "OK", body: bytes = b"", headers=None) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.headers = headers or {}
    response.read = AsyncMock(return_value=body)

    session = MagicMock()
    session.closed = False
    session.request.return_value.__aenter__.return_value = response
    session.request.return_value.__aexit__.return_value = False
    return session


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init_timeouts(self):
        """Test connect and read timeouts default to five minutes."""
        client = HTTPClient()

        assert client.timeout.total is None
        assert client.timeout.connect == CONNECTION_TIMEOUT
        assert client.timeout.sock_connect == CONNECTION_TIMEOUT
        assert client.timeout.sock_read == CONNECTION_TIMEOUT
        assert client._session is None

    def test_proxy_credentials(self):
        """Test proxy auth is only set when a proxy and both credentials are given."""
        client = HTTPClient(proxy_url="http://proxy:8080", proxy_username="u", proxy_password="p")
        assert client.proxy_headers == {"Proxy-Authorization": "Basic dTpw"}

        assert HTTPClient(proxy_url="http://proxy:8080", proxy_username="u").proxy_headers is None
        assert HTTPClient(proxy_username="u", proxy_password="p").proxy_headers is None

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test HTTPClient as async context manager."""
        async with HTTPClient() as client:
            session = client.session

        assert session.closed


class TestHTTPClientRequests:
    """Test requests go through the session and come back normalized."""

    @pytest.mark.asyncio
    async def test_get_reads_body_and_version(self):
        client = HTTPClient(proxy_url="http://proxy:8080", proxy_username="u", proxy_password="p")
        client._session = mock_session(
            body=b'{"d": []}', headers={"DataServiceVersion": "2.0"}
        )

        response = await client.get("https://svc/odata/User", headers={"Accept": "application/json"})

        assert response.status_code == 200
        assert response.status_message == "OK"
        assert response.service_version == "2.0"
        assert response.json() == {"d": []}
        client._session.request.assert_called_once_with(
            "GET",
            "https://svc/odata/User",
            headers={"Accept": "application/json"},
            data=None,
            proxy="http://proxy:8080",
            proxy_headers={"Proxy-Authorization": "Basic dTpw"},
        )

    @pytest.mark.asyncio
    async def test_post_form(self):
        client = HTTPClient()
        client._session = mock_session(status=201, reason="Created", body=b"")

        response = await client.post_form("https://svc/oauth/token", {"a": "1"})

        assert response.status_code == 201
        assert response.body == b""
        assert response.service_version is None
        args = client._session.request.call_args
        assert args.args == ("POST", "https://svc/oauth/token")
        assert args.kwargs["data"] == {"a": "1"}
        assert args.kwargs["proxy"] is None
