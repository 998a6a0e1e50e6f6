"""Fan-out of a search page across food sources."""

import asyncio
import logging
from dataclasses import dataclass

from food_search.domain.foods import SourcePage
from food_search.services.sources import FoodSource

_logger = logging.getLogger(__name__)


@dataclass
class FanOutCoordinator:
    """Decide which sources serve a page and collect their records.

    The first page consults every source: the cache and the generic API run
    concurrently, then the branded catalog fills in when the cache is sparse.
    Later pages come from the cache alone, the only paginated source.
    """

    cache_source: FoodSource
    generic_source: FoodSource
    branded_source: FoodSource
    branded_fallback_threshold: int = 5
    cache_overfetch_factor: int = 2

    async def fetch_page(
        self, query: str, country: str, limit: int, offset: int
    ) -> SourcePage:
        """Return the raw records for a page and a best-effort total."""
        if offset > 0:
            return await self.cache_source.search(query, country, limit, offset)

        cache_page, generic_page = await asyncio.gather(
            self.cache_source.search(
                query, country, limit * self.cache_overfetch_factor, 0
            ),
            self.generic_source.search(query, country, limit, 0),
        )
        pages = [generic_page, cache_page]
        if len(cache_page.records) < self.branded_fallback_threshold:
            _logger.info(
                "Cache returned %s results for query=%s, querying branded catalog",
                len(cache_page.records),
                query,
            )
            pages.append(await self.branded_source.search(query, country, limit, 0))

        records = [record for page in pages for record in page.records]
        reported_total = sum(page.total for page in pages)
        return SourcePage(records=records, total=max(reported_total, len(records)))
