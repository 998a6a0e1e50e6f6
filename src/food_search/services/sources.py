"""Food search sources wrapping external providers behind one contract.

Every source converts provider errors, timeouts and malformed payloads into an
empty page and a log entry, so a failing provider only makes results sparser.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import ClassVar, Protocol

from food_search.adapters.calorieninjas_client import CalorieNinjasClient
from food_search.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_search.domain.foods import SourcePage, UnifiedFoodRecord
from food_search.services.normalizer import (
    normalize_cache_row,
    normalize_calorieninjas_item,
    normalize_openfoodfacts_product,
)

_logger = logging.getLogger(__name__)


class FoodSource(Protocol):
    """Capability contract shared by every search source."""

    async def search(
        self, query: str, country: str, limit: int, offset: int
    ) -> SourcePage:
        """Return matching records and the source's count; never raises."""


class AutocompleteRepository(Protocol):
    """Read access to the locally mirrored autocomplete store."""

    def search_rows(
        self, query: str, country: str, limit: int, offset: int
    ) -> tuple[list[dict[str, object]], int]:
        """Return a page of raw rows and the total number of matches."""


@dataclass
class AutocompleteCacheSource(FoodSource):
    """Paginated source backed by the autocomplete mirror."""

    repository: AutocompleteRepository
    timeout_seconds: float = 8.0
    debug: bool = False

    source_name: ClassVar[str] = "autocomplete_cache"

    async def search(
        self, query: str, country: str, limit: int, offset: int
    ) -> SourcePage:
        """Search the mirror; supports real offset/limit pagination."""

        async def fetch() -> SourcePage:
            rows, total = await asyncio.to_thread(
                self.repository.search_rows, query, country, limit, offset
            )
            records = _normalize_all(rows, normalize_cache_row)
            return SourcePage(records=records, total=total)

        page = await _contained(
            self.source_name, query, fetch, timeout_seconds=self.timeout_seconds
        )
        if self.debug:
            _logger.info(
                "Cache search: query=%s offset=%s results=%s total=%s",
                query,
                offset,
                len(page.records),
                page.total,
            )
        return page


@dataclass
class GenericFoodSource(FoodSource):
    """First-page-only source backed by the CalorieNinjas API."""

    client: CalorieNinjasClient
    timeout_seconds: float = 8.0
    debug: bool = False

    source_name: ClassVar[str] = "calorieninjas"

    async def search(
        self, query: str, country: str, limit: int, offset: int
    ) -> SourcePage:
        """Look up generic foods; pages past the first are always empty."""
        if offset > 0:
            return SourcePage.empty()

        async def fetch() -> SourcePage:
            payload = await self.client.lookup(query)
            items = _payload_list(payload, "items")
            records = _normalize_all(items, normalize_calorieninjas_item)[:limit]
            return SourcePage(records=records, total=len(records))

        page = await _contained(
            self.source_name, query, fetch, timeout_seconds=self.timeout_seconds
        )
        if self.debug:
            _logger.info(
                "Generic search: query=%s results=%s", query, len(page.records)
            )
        return page


@dataclass
class BrandedFoodSource(FoodSource):
    """First-page-only, region-aware source backed by Open Food Facts."""

    client: OpenFoodFactsClient
    timeout_seconds: float = 8.0
    debug: bool = False

    source_name: ClassVar[str] = "openfoodfacts"

    async def search(
        self, query: str, country: str, limit: int, offset: int
    ) -> SourcePage:
        """Search packaged products in the country's catalog."""
        if offset > 0:
            return SourcePage.empty()

        async def fetch() -> SourcePage:
            payload = await self.client.search_products(
                query, country, page_size=limit
            )
            products = _payload_list(payload, "products")
            records = _normalize_all(products, normalize_openfoodfacts_product)[
                :limit
            ]
            return SourcePage(records=records, total=len(records))

        page = await _contained(
            self.source_name, query, fetch, timeout_seconds=self.timeout_seconds
        )
        if self.debug:
            _logger.info(
                "Branded search: query=%s country=%s results=%s",
                query,
                country,
                len(page.records),
            )
        return page


async def _contained(
    source_name: str,
    query: str,
    fetch: Callable[[], Awaitable[SourcePage]],
    *,
    timeout_seconds: float,
) -> SourcePage:
    """Run a source fetch with a timeout, turning failures into an empty page."""
    try:
        return await asyncio.wait_for(fetch(), timeout=timeout_seconds)
    except Exception as exc:
        _logger.warning(
            "Food source %s failed: query=%s status=%s error=%s: %s",
            source_name,
            query,
            _status_code_from_exception(exc),
            type(exc).__name__,
            exc,
        )
        return SourcePage.empty()


def _payload_list(payload: object, key: str) -> list[object]:
    """Extract a list from a provider payload or reject the payload."""
    if not isinstance(payload, Mapping):
        raise ValueError(f"Malformed payload: expected an object with {key!r}")
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Malformed payload: {key!r} is not a list")
    return value


def _normalize_all(
    raw_items: Iterable[object],
    normalize: Callable[[Mapping[str, object]], UnifiedFoodRecord | None],
) -> list[UnifiedFoodRecord]:
    """Normalize raw provider items, skipping unusable ones."""
    records: list[UnifiedFoodRecord] = []
    for item in raw_items:
        if not isinstance(item, Mapping):
            continue
        record = normalize(item)
        if record is not None:
            records.append(record)
    return records


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
