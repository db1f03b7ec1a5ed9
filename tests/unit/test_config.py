"""Unit tests for connector and extraction settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from odatax.extract import AssertionTokenType, AuthType, ConfigurationError, ConnectorConfig, ExtractionConfig
from odatax.extract.runtime.rest import RetryPolicy


class TestConnectorConfig:
    """Test ConnectorConfig."""

    def test_camel_case_and_snake_case_names(self):
        """Test pipeline property names and field names are both accepted."""
        camel = ConnectorConfig(baseURL="https://svc", authType="oAuth2", clientId="c")
        snake = ConnectorConfig(base_url="https://svc", auth_type="oAuth2", client_id="c")

        assert camel == snake
        assert camel.auth_type is AuthType.OAUTH2

    def test_blank_auth_type_is_basic(self):
        config = ConnectorConfig(baseURL="https://svc", authType="")

        assert config.auth_type is AuthType.BASIC

    def test_defaults(self):
        config = ConnectorConfig(baseURL="https://svc", expireInMinutes=None)

        assert config.expire_in_minutes == 1440
        assert config.proxy_url is None

    def test_secrets_not_in_repr(self):
        config = ConnectorConfig(baseURL="https://svc", username="u", password="hunter2")

        assert "hunter2" not in repr(config)

    @pytest.mark.parametrize("proxy", ["proxy.local:3128", "http://proxy.local", "http://:3128"])
    def test_proxy_url_needs_protocol_address_and_port(self, proxy):
        with pytest.raises(ValidationError, match="proxy URL"):
            ConnectorConfig(baseURL="https://svc", proxyUrl=proxy)

    def test_valid_proxy_url(self):
        config = ConnectorConfig(baseURL="https://svc", proxyUrl="http://proxy.local:3128")

        assert config.proxy_url == "http://proxy.local:3128"

    def test_frozen(self):
        config = ConnectorConfig(baseURL="https://svc")

        with pytest.raises(ValidationError):
            config.base_url = "https://other"


class TestValidateAuthCredentials:
    """Test required settings per auth scheme."""

    def test_basic_missing_password(self):
        config = ConnectorConfig(baseURL="https://svc", username="u")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_auth_credentials()

        assert exc_info.value.fields == ["password"]

    def test_basic_complete(self):
        ConnectorConfig(baseURL="https://svc", username="u", password="p").validate_auth_credentials()

    def test_oauth_entered_token(self):
        config = ConnectorConfig(
            baseURL="https://svc",
            authType="oAuth2",
            clientId="c",
            companyId="co",
            tokenURL="https://svc/oauth/token",
            assertionTokenType="enterToken",
        )

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_auth_credentials()

        assert config.assertion_token_type is AssertionTokenType.ENTER_TOKEN
        assert exc_info.value.fields == ["assertion_token"]

    def test_oauth_created_token(self):
        config = ConnectorConfig(baseURL="https://svc", authType="oAuth2")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_auth_credentials()

        assert exc_info.value.fields == [
            "client_id",
            "company_id",
            "token_url",
            "user_id",
            "private_key",
        ]

    def test_oauth_complete_with_key(self):
        ConnectorConfig(
            baseURL="https://svc",
            authType="oAuth2",
            clientId="c",
            companyId="co",
            tokenURL="https://svc/oauth/token",
            userId="admin",
            privateKey="key",
        ).validate_auth_credentials()


class TestExtractionConfig:
    """Test ExtractionConfig."""

    def test_defaults(self):
        config = ExtractionConfig(entityName="User")

        assert (config.skip_row_count, config.fetch_row_count) == (0, 0)
        assert (config.split_count, config.batch_size) == (0, 0)
        assert config.retry_policy() == RetryPolicy()

    def test_null_numbers_fall_back_to_defaults(self):
        config = ExtractionConfig(entityName="User", splitCount=None, maxRetryCount=None)

        assert config.split_count == 0
        assert config.max_retry_count == 3

    def test_retry_policy(self):
        config = ExtractionConfig(
            entityName="User",
            initialRetryDuration=1,
            maxRetryDuration=30,
            retryMultiplier=3,
            maxRetryCount=5,
        )

        assert config.retry_policy() == RetryPolicy(1, 30, 3, 5)

    @pytest.mark.parametrize(
        "field",
        [
            {"skipRowCount": -1},
            {"batchSize": -5},
            {"initialRetryDuration": 0},
            {"retryMultiplier": 0.5},
            {"maxRetryCount": 0},
        ],
    )
    def test_rejects_invalid_numbers(self, field):
        with pytest.raises(ValidationError):
            ExtractionConfig(entityName="User", **field)

    def test_entity_required(self):
        with pytest.raises(ValidationError):
            ExtractionConfig(entityName="  ")
