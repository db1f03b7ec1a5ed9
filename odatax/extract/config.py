"""Connection and extraction settings.

Both models accept the camelCase property names used in pipeline
configuration (``baseURL``, ``authType``, ``skipRowCount`` ...) as well as
the snake_case field names.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.enums import AssertionTokenType, AuthType
from .core.exceptions import ConfigurationError
from .runtime.rest.retry import (
    DEFAULT_INITIAL_RETRY_DURATION,
    DEFAULT_MAX_RETRY_COUNT,
    DEFAULT_MAX_RETRY_DURATION,
    DEFAULT_RETRY_MULTIPLIER,
    RetryPolicy,
)

DEFAULT_EXPIRE_IN_MINUTES = 24 * 60


class ConnectorConfig(BaseModel):
    """Where the service lives and how to authenticate against it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    base_url: str = Field(..., min_length=1, alias="baseURL")
    auth_type: AuthType = Field(default=AuthType.BASIC, alias="authType")

    username: str | None = None
    password: str | None = Field(default=None, repr=False)

    token_url: str | None = Field(default=None, alias="tokenURL")
    client_id: str | None = Field(default=None, alias="clientId")
    company_id: str | None = Field(default=None, alias="companyId")
    user_id: str | None = Field(default=None, alias="userId")
    private_key: str | None = Field(default=None, alias="privateKey", repr=False)
    expire_in_minutes: int = Field(default=DEFAULT_EXPIRE_IN_MINUTES, gt=0, alias="expireInMinutes")
    assertion_token_type: AssertionTokenType | None = Field(default=None, alias="assertionTokenType")
    assertion_token: str | None = Field(default=None, alias="assertionToken", repr=False)

    proxy_url: str | None = Field(default=None, alias="proxyUrl")
    proxy_username: str | None = Field(default=None, alias="proxyUsername")
    proxy_password: str | None = Field(default=None, alias="proxyPassword", repr=False)

    @field_validator("auth_type", mode="before")
    @classmethod
    def default_auth_type(cls, v):
        """Blank auth type means basic auth."""
        return v or AuthType.BASIC

    @field_validator("expire_in_minutes", mode="before")
    @classmethod
    def default_expiry(cls, v):
        return DEFAULT_EXPIRE_IN_MINUTES if v is None else v

    @field_validator("proxy_url")
    @classmethod
    def validate_proxy_url(cls, v: str | None) -> str | None:
        """Proxy URL must carry a protocol, address and port."""
        if not v:
            return None
        parts = urlsplit(v)
        try:
            port = parts.port
        except ValueError as e:
            raise ValueError(f"proxy URL has an invalid port: {v}") from e
        if not parts.scheme or not parts.hostname or port is None:
            raise ValueError(f"proxy URL must contain a protocol, address and port: {v}")
        return v

    def validate_auth_credentials(self) -> None:
        """Check that the chosen auth scheme has everything it needs.

        Raises:
            ConfigurationError: Listing every missing setting
        """
        if self.auth_type == AuthType.BASIC:
            required = ["username", "password"]
        else:
            required = ["client_id", "company_id", "token_url"]
            if self.assertion_token_type == AssertionTokenType.ENTER_TOKEN:
                required.append("assertion_token")
            elif not self.assertion_token:
                required.extend(["user_id", "private_key"])

        missing = [name for name in required if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Missing required settings for {self.auth_type.value}: " + ", ".join(missing),
                fields=missing,
            )


class ExtractionConfig(BaseModel):
    """What to extract and how to split and retry it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    entity_name: str = Field(..., min_length=1, alias="entityName")
    associated_entity_name: str | None = Field(default=None, alias="associatedEntityName")
    filter_option: str | None = Field(default=None, alias="filterOption")
    select_option: str | None = Field(default=None, alias="selectOption")
    expand_option: str | None = Field(default=None, alias="expandOption")

    skip_row_count: int = Field(default=0, ge=0, alias="skipRowCount")
    fetch_row_count: int = Field(default=0, ge=0, alias="fetchRowCount")
    split_count: int = Field(default=0, ge=0, alias="splitCount")
    batch_size: int = Field(default=0, ge=0, alias="batchSize")

    initial_retry_duration: float = Field(
        default=DEFAULT_INITIAL_RETRY_DURATION, gt=0, alias="initialRetryDuration"
    )
    max_retry_duration: float = Field(
        default=DEFAULT_MAX_RETRY_DURATION, gt=0, alias="maxRetryDuration"
    )
    retry_multiplier: float = Field(default=DEFAULT_RETRY_MULTIPLIER, ge=1, alias="retryMultiplier")
    max_retry_count: int = Field(default=DEFAULT_MAX_RETRY_COUNT, gt=0, alias="maxRetryCount")

    @field_validator(
        "skip_row_count",
        "fetch_row_count",
        "split_count",
        "batch_size",
        "initial_retry_duration",
        "max_retry_duration",
        "retry_multiplier",
        "max_retry_count",
        mode="before",
    )
    @classmethod
    def unset_means_default(cls, v, info):
        """Null numeric settings fall back to their defaults."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            initial_delay=self.initial_retry_duration,
            max_delay=self.max_retry_duration,
            multiplier=self.retry_multiplier,
            max_attempts=self.max_retry_count,
        )
