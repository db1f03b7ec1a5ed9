"""High-level facade over one entity set of an OData service.

Architecture:
    ODataService ties the URL builder, the transport stack and the
    partition planner together:

        ODataUrlBuilder -> RetryingTransport -> ODataTransport -> AuthScheme -> HTTPClient

    Connection tests, counts and metadata are single calls; data pages go
    through the retry policy.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from ..config import ConnectorConfig, ExtractionConfig
from ..core.enums import MediaType
from ..core.exceptions import ServiceError
from ..runtime.partitioning import PartitionPlan, PartitionPlanner, PartitionPolicy, PlanRequest
from ..runtime.rest import (
    ODataTransport,
    ODataUrlBuilder,
    ResponseContainer,
    RetryingTransport,
    TokenCache,
    raise_for_service_error,
)

logger = logging.getLogger(__name__)


class ODataService:
    """Calls against one entity set: test, count, metadata, data pages."""

    def __init__(
        self,
        transport: RetryingTransport,
        urls: ODataUrlBuilder,
        planner: PartitionPlanner | None = None,
    ) -> None:
        self._transport = transport
        self._urls = urls
        self._planner = planner or PartitionPlanner()

    @classmethod
    def from_config(
        cls,
        connector: ConnectorConfig,
        extraction: ExtractionConfig,
        *,
        non_navigational_properties: Sequence[str] = (),
        token_cache: TokenCache | None = None,
        partition_policy: PartitionPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> ODataService:
        """Build the full transport stack from settings.

        Args:
            connector: Service location and credentials
            extraction: Entity, query options, split and retry settings
            non_navigational_properties: Property names selected by data
                fetches when no select option is configured
            token_cache: Token slot (defaults to the process-wide one)
            partition_policy: Split/batch limits
            sleep: Awaitable sleep used between retries

        Raises:
            ConfigurationError: If the auth settings are incomplete
        """
        connector.validate_auth_credentials()
        transport = ODataTransport.from_config(connector, token_cache=token_cache)
        retrying = RetryingTransport(transport, extraction.retry_policy(), sleep=sleep)
        urls = ODataUrlBuilder.from_config(
            connector.base_url, extraction, non_navigational_properties
        )
        return cls(retrying, urls, PartitionPlanner(partition_policy))

    @property
    def urls(self) -> ODataUrlBuilder:
        return self._urls

    @property
    def planner(self) -> PartitionPlanner:
        return self._planner

    async def test_connection(self) -> ResponseContainer:
        """Fetch one record to prove the URL, entity and credentials work.

        Raises:
            ServiceError: If the service rejects the call
        """
        response = await self._transport.transport.call(self._urls.tester_url(), MediaType.JSON)
        return raise_for_service_error(response, "test the connection")

    async def get_total_record_count(self) -> int:
        """Return the ``$count`` of the entity set (filter applied)."""
        response = await self._transport.transport.call(self._urls.count_url(), MediaType.TEXT)
        raise_for_service_error(response, "fetch the total record count")
        text = response.text().strip()
        try:
            count = int(text)
        except ValueError as e:
            raise ServiceError(
                f"Record count is not a number: {text[:50]!r}",
                status_code=response.status_code,
                response=response,
            ) from e
        logger.info("record_count_fetched", extra={"count": count})
        return count

    async def fetch_metadata(self) -> bytes:
        """Return the raw ``$metadata`` document."""
        response = await self._transport.transport.call(self._urls.metadata_url(), MediaType.XML)
        return raise_for_service_error(response, "fetch the service metadata").body

    async def list_entities(self) -> list[str]:
        """Entity set names from the service document."""
        response = await self._transport.transport.call(
            self._urls.service_root_url(), MediaType.JSON
        )
        raise_for_service_error(response, "list the entity sets")
        try:
            payload = response.json()
        except ValueError as e:
            raise ServiceError(
                "Service document is not valid JSON",
                status_code=response.status_code,
                response=response,
            ) from e
        # OData v2 JSON wraps the document in "d"
        document = payload.get("d", payload) if isinstance(payload, dict) else None
        if not isinstance(document, dict):
            raise ServiceError(
                "Service document is not a JSON object",
                status_code=response.status_code,
                response=response,
            )
        return list(document.get("EntitySets", []))

    async def plan(
        self,
        fetch_row_count: int = 0,
        skip_row_count: int = 0,
        split_count: int = 0,
        batch_size: int = 0,
    ) -> PartitionPlan:
        """Count the remote records and plan splits over them."""
        available = await self.get_total_record_count()
        return self._planner.build(
            PlanRequest(
                available_record_count=available,
                fetch_row_count=fetch_row_count,
                skip_row_count=skip_row_count,
                requested_split_count=split_count,
                requested_batch_size=batch_size,
            )
        )

    async def plan_for(self, config: ExtractionConfig) -> PartitionPlan:
        """``plan`` with the skip/fetch/split/batch values from settings."""
        return await self.plan(
            fetch_row_count=config.fetch_row_count,
            skip_row_count=config.skip_row_count,
            split_count=config.split_count,
            batch_size=config.batch_size,
        )

    async def fetch_page(self, skip: int, top: int) -> ResponseContainer:
        """Fetch ``top`` records after skipping ``skip``, with retries.

        Raises:
            RetryExhaustedError: If transient failures outlast the retry policy
            ServiceError: If the service answers with a non-success status
        """
        response = await self._transport.call(self._urls.data_url(skip=skip, top=top), MediaType.JSON)
        return raise_for_service_error(response, f"fetch records {skip + 1}-{skip + top}")

    async def close(self) -> None:
        await self._transport.transport.close()

    async def __aenter__(self) -> ODataService:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
