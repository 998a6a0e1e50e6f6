"""Food search pipeline service."""

import logging
from dataclasses import dataclass

from food_search.config import parse_country
from food_search.domain.foods import SearchQuery, SearchResponse
from food_search.services.classifier import classify
from food_search.services.fanout import FanOutCoordinator
from food_search.services.ranking import assemble, dedupe, rank

MIN_QUERY_LENGTH = 2
MAX_PAGE_SIZE = 50

_logger = logging.getLogger(__name__)


@dataclass
class FoodSearchService:
    """Classify, fetch, deduplicate, rank and paginate food search results."""

    coordinator: FanOutCoordinator
    default_country: str = "GB"

    def build_query(
        self,
        text: str | None,
        country: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> SearchQuery:
        """Trim the text, apply the default country and clamp paging."""
        return SearchQuery(
            text=(text or "").strip(),
            country=parse_country(country, self.default_country),
            limit=min(max(limit, 1), MAX_PAGE_SIZE),
            offset=max(offset, 0),
        )

    async def search(self, query: SearchQuery) -> SearchResponse:
        """Run the search pipeline for a single request."""
        if len(query.text) < MIN_QUERY_LENGTH:
            return SearchResponse(
                results=[], total=0, has_more=False, is_generic_query=None
            )

        _logger.info(
            "Food search: query=%s country=%s limit=%s offset=%s",
            query.text,
            query.country,
            query.limit,
            query.offset,
        )
        is_generic = classify(query.text).is_generic
        page = await self.coordinator.fetch_page(
            query.text, query.country, query.limit, query.offset
        )
        scored = rank(dedupe(page.records), query.text, is_generic)
        response = assemble(
            scored,
            page.total,
            query.limit,
            query.offset,
            is_generic_query=is_generic,
        )
        generic_count = sum(
            1 for record in response.results if record.food_type == "generic"
        )
        _logger.info(
            "Food search returning %s results (%s generic, %s branded) total=%s",
            len(response.results),
            generic_count,
            len(response.results) - generic_count,
            response.total,
        )
        return response
