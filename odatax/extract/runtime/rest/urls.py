"""Service URL construction.

Query options are passed through as opaque strings; they are only
percent-encoded, never parsed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode

from ...core.enums import (
    COUNT_SEGMENT,
    EXPAND_OPTION,
    FILTER_OPTION,
    METADATA_SEGMENT,
    PROPERTY_SEPARATOR,
    SELECT_OPTION,
    SKIP_OPTION,
    TOP_OPTION,
)

if TYPE_CHECKING:
    from ...config import ExtractionConfig

logger = logging.getLogger(__name__)

_SAFE_QUERY = "$,()'/:"
_SAFE_SEGMENT = ",()'=:"


class ODataUrlBuilder:
    """Builds tester, metadata, count and data URLs for one entity set."""

    def __init__(
        self,
        base_url: str,
        entity_name: str,
        *,
        associated_entity_name: str | None = None,
        filter_option: str | None = None,
        select_option: str | None = None,
        expand_option: str | None = None,
        non_navigational_properties: Sequence[str] = (),
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.entity_name = entity_name
        self.associated_entity_name = associated_entity_name or None
        self.filter_option = filter_option or None
        self.select_option = select_option or None
        self.expand_option = expand_option or None
        self.non_navigational_properties = list(non_navigational_properties)

    @classmethod
    def from_config(
        cls,
        base_url: str,
        config: ExtractionConfig,
        non_navigational_properties: Sequence[str] = (),
    ) -> ODataUrlBuilder:
        return cls(
            base_url,
            config.entity_name,
            associated_entity_name=config.associated_entity_name,
            filter_option=config.filter_option,
            select_option=config.select_option,
            expand_option=config.expand_option,
            non_navigational_properties=non_navigational_properties,
        )

    def service_root_url(self) -> str:
        return self.base_url

    def tester_url(self) -> str:
        """Entity URL with the configured options and ``$top=1``."""
        params = self._query_options(data_fetch=False)
        params.append((TOP_OPTION, "1"))
        url = self._build(self._segment(self.entity_name), params)
        logger.debug("tester_url_built", extra={"url": url})
        return url

    def metadata_url(self) -> str:
        """``$metadata`` URL, scoped to the entity (and associated entity)."""
        entity = self.entity_name
        if self.associated_entity_name:
            entity = f"{entity}{PROPERTY_SEPARATOR}{self.associated_entity_name}"
        path = "/".join(self._segment(part) for part in entity.split("/"))
        url = self._build(f"{path}/{METADATA_SEGMENT}", [])
        logger.debug("metadata_url_built", extra={"url": url})
        return url

    def count_url(self) -> str:
        """``$count`` URL, honouring the filter option only."""
        params = [(FILTER_OPTION, self.filter_option)] if self.filter_option else []
        url = self._build(f"{self._segment(self.entity_name)}/{COUNT_SEGMENT}", params)
        logger.debug("count_url_built", extra={"url": url})
        return url

    def data_url(self, skip: int | None = None, top: int | None = None) -> str:
        """Data URL for one page.

        Args:
            skip: Records to skip (omitted when None or 0)
            top: Records to return (omitted when None)
        """
        params = self._query_options(data_fetch=True)
        if skip:
            params.append((SKIP_OPTION, str(skip)))
        if top is not None:
            params.append((TOP_OPTION, str(top)))
        url = self._build(self._segment(self.entity_name), params)
        logger.debug("data_url_built", extra={"url": url})
        return url

    def _query_options(self, *, data_fetch: bool) -> list[tuple[str, str]]:
        """Options in service order: ``$filter``, ``$select``, ``$expand``.

        Data fetches without a configured select list select every
        non-navigational property, plus the expanded navigation.
        """
        params: list[tuple[str, str]] = []
        if self.filter_option:
            params.append((FILTER_OPTION, self.filter_option))
        if self.select_option:
            params.append((SELECT_OPTION, self.select_option))
        elif data_fetch and self.non_navigational_properties:
            fields = list(self.non_navigational_properties)
            if self.expand_option:
                fields.append(self.expand_option)
            params.append((SELECT_OPTION, PROPERTY_SEPARATOR.join(fields)))
        if self.expand_option:
            params.append((EXPAND_OPTION, self.expand_option))
        return params

    def _build(self, path: str, params: list[tuple[str, str]]) -> str:
        url = f"{self.base_url}/{path}"
        if params:
            url = f"{url}?{urlencode(params, quote_via=quote, safe=_SAFE_QUERY)}"
        return url

    @staticmethod
    def _segment(value: str) -> str:
        return quote(value, safe=_SAFE_SEGMENT)
