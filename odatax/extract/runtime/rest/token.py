"""OAuth2 access token acquisition and caching.

Architecture:
    - TokenCache: single-slot store for the current access token. One
      process-wide instance is shared by default; tests inject their own.
    - AssertionProvider: supplies the SAML assertion exchanged for a token,
      either a pre-built one from configuration or one issued by the
      service's identity provider endpoint.
    - TokenManager: returns the cached token or exchanges an assertion for
      a new one at the token endpoint.

Concurrency:
    Tokens are never expired by a timer. A caller that gets a 403 refreshes
    and overwrites the slot; concurrent refreshes are last-write-wins, and a
    caller holding a stale token recovers through its own refresh.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Protocol

import aiohttp

from ...core.enums import SAML2_BEARER_GRANT_TYPE, AssertionTokenType, MediaType
from ...core.exceptions import AuthConnectionError, AuthError
from .http_client import HTTPClient

if TYPE_CHECKING:
    from ...config import ConnectorConfig

logger = logging.getLogger(__name__)


class TokenCache(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def invalidate(self) -> None: ...


class InMemoryTokenCache:
    """Thread-safe single-slot token cache."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._lock = threading.Lock()

    def get(self) -> str | None:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token

    def invalidate(self) -> None:
        with self._lock:
            self._token = None


_default_cache = InMemoryTokenCache()


def default_token_cache() -> InMemoryTokenCache:
    """Process-wide token slot shared by transports built without a cache."""
    return _default_cache


class AssertionProvider(Protocol):
    async def get_assertion(self) -> str: ...


class StaticAssertionProvider:
    """Returns a user-supplied assertion."""

    def __init__(self, assertion: str) -> None:
        if not assertion:
            raise AuthError("Assertion token is empty")
        self._assertion = assertion

    async def get_assertion(self) -> str:
        return self._assertion


class IdpAssertionProvider:
    """Asks the service's identity provider endpoint to sign an assertion.

    The IdP signs with the registered private key and returns the assertion
    as the response body. Each assertion is used for exactly one token
    exchange.
    """

    def __init__(
        self,
        http: HTTPClient,
        idp_url: str,
        *,
        client_id: str,
        user_id: str,
        token_url: str,
        private_key: str,
        expire_in_minutes: int = 24 * 60,
    ) -> None:
        self._http = http
        self._idp_url = idp_url
        self._form = {
            "client_id": client_id,
            "user_id": user_id,
            "token_url": token_url,
            "private_key": private_key,
            "expire_in_minutes": str(expire_in_minutes),
        }

    @staticmethod
    def idp_url_for(token_url: str) -> str:
        """Derive the IdP endpoint from the token endpoint (``.../oauth/token``)."""
        return token_url.rstrip("/").rsplit("/", 1)[0] + "/idp"

    async def get_assertion(self) -> str:
        try:
            response = await self._http.post_form(
                self._idp_url, self._form, headers={"Accept": MediaType.TEXT.value}
            )
        except aiohttp.InvalidURL as e:
            raise AuthError(f"Invalid assertion endpoint URL: {self._idp_url}") from e
        except (aiohttp.ClientError, TimeoutError, OSError) as e:
            raise AuthConnectionError("Unable to reach the assertion endpoint") from e
        except ValueError as e:
            raise AuthError("Invalid assertion request") from e

        if not response.is_success:
            raise AuthError(
                f"Assertion endpoint returned {response.status_code} {response.status_message}",
                status_code=response.status_code,
                response=response,
            )
        assertion = response.text().strip()
        if not assertion:
            raise AuthError("Assertion endpoint returned an empty assertion", response=response)
        return assertion


class TokenManager:
    """Hands out bearer tokens, fetching a new one when asked or when empty."""

    def __init__(
        self,
        http: HTTPClient,
        *,
        token_url: str,
        client_id: str,
        company_id: str,
        assertion_provider: AssertionProvider,
        cache: TokenCache | None = None,
    ) -> None:
        self._http = http
        self._token_url = token_url
        self._client_id = client_id
        self._company_id = company_id
        self._assertions = assertion_provider
        self._cache = cache if cache is not None else default_token_cache()

    @classmethod
    def from_config(
        cls,
        config: ConnectorConfig,
        http: HTTPClient,
        cache: TokenCache | None = None,
    ) -> TokenManager:
        """Build a token manager from OAuth2 connector settings.

        Raises:
            AuthError: If a setting needed to obtain tokens is missing
        """
        missing = [
            name
            for name in ("token_url", "client_id", "company_id")
            if not getattr(config, name)
        ]
        use_static = (
            config.assertion_token_type == AssertionTokenType.ENTER_TOKEN
            or bool(config.assertion_token)
        )
        if use_static:
            if not config.assertion_token:
                missing.append("assertion_token")
        else:
            missing.extend(
                name for name in ("user_id", "private_key") if not getattr(config, name)
            )
        if missing:
            raise AuthError("Missing settings for token generation: " + ", ".join(missing))

        provider: AssertionProvider
        if use_static:
            provider = StaticAssertionProvider(config.assertion_token)
        else:
            provider = IdpAssertionProvider(
                http,
                IdpAssertionProvider.idp_url_for(config.token_url),
                client_id=config.client_id,
                user_id=config.user_id,
                token_url=config.token_url,
                private_key=config.private_key,
                expire_in_minutes=config.expire_in_minutes,
            )
        return cls(
            http,
            token_url=config.token_url,
            client_id=config.client_id,
            company_id=config.company_id,
            assertion_provider=provider,
            cache=cache,
        )

    async def get_token(self, refresh: bool = False) -> str:
        """Return the cached token, or a fresh one.

        Args:
            refresh: Always fetch a new token and replace the cached one

        Raises:
            AuthError: If the token endpoint is unreachable or rejects the assertion
        """
        if not refresh:
            token = self._cache.get()
            if token:
                return token

        token = await self._fetch_token()
        self._cache.set(token)
        logger.debug("access_token_refreshed" if refresh else "access_token_created")
        return token

    async def _fetch_token(self) -> str:
        assertion = await self._assertions.get_assertion()
        form = {
            "company_id": self._company_id,
            "client_id": self._client_id,
            "grant_type": SAML2_BEARER_GRANT_TYPE,
            "assertion": assertion,
        }
        try:
            response = await self._http.post_form(
                self._token_url, form, headers={"Accept": MediaType.JSON.value}
            )
        except aiohttp.InvalidURL as e:
            raise AuthError(f"Invalid token endpoint URL: {self._token_url}") from e
        except (aiohttp.ClientError, TimeoutError, OSError) as e:
            raise AuthConnectionError("Unable to fetch access token") from e
        except ValueError as e:
            raise AuthError("Invalid token request") from e

        if not response.is_success:
            raise AuthError(
                f"Token endpoint returned {response.status_code} {response.status_message}",
                status_code=response.status_code,
                response=response,
            )
        try:
            token = response.json().get("access_token")
        except (ValueError, AttributeError) as e:
            raise AuthError("Token endpoint returned an unreadable body", response=response) from e
        if not token:
            raise AuthError("Token endpoint response has no access_token", response=response)
        return token
