"""Authentication schemes applied around a single request.

A scheme receives a ``send`` callable that performs the request with the
headers it is given. Bearer auth may call ``send`` twice (refresh-once on
403); it knows nothing about the outer retry policy.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from http import HTTPStatus

from .http_client import basic_credentials
from .response import ResponseContainer
from .token import TokenManager

logger = logging.getLogger(__name__)

SendFn = Callable[[dict[str, str]], Awaitable[ResponseContainer]]


class AuthScheme(ABC):
    """Attaches credentials to a request."""

    @abstractmethod
    async def send(self, send: SendFn) -> ResponseContainer:
        """Perform the request through ``send`` with credentials attached."""


class BasicAuthScheme(AuthScheme):
    """HTTP Basic credentials on every request."""

    def __init__(self, username: str, password: str) -> None:
        self._header = basic_credentials(username, password)

    async def send(self, send: SendFn) -> ResponseContainer:
        return await send({"Authorization": self._header})


class BearerAuthScheme(AuthScheme):
    """Bearer token from a TokenManager, refreshed once on 403 Forbidden."""

    def __init__(self, tokens: TokenManager) -> None:
        self._tokens = tokens

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    async def send(self, send: SendFn) -> ResponseContainer:
        token = await self._tokens.get_token()
        response = await send(self._headers(token))
        if response.status_code == HTTPStatus.FORBIDDEN:
            logger.info("access_token_rejected", extra={"status_code": response.status_code})
            token = await self._tokens.get_token(refresh=True)
            response = await send(self._headers(token))
        return response

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
