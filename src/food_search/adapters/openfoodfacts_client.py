"""Open Food Facts product search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

COUNTRY_SUBDOMAINS = {
    "GB": "uk",
    "UK": "uk",
    "PL": "pl",
    "US": "us",
    "DE": "de",
    "FR": "fr",
    "ES": "es",
    "IT": "it",
}


def regional_base_url(country: str) -> str:
    """Return the Open Food Facts host serving the country's catalog."""
    subdomain = COUNTRY_SUBDOMAINS.get(country.upper(), "world")
    return f"https://{subdomain}.openfoodfacts.org"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts interactions."""

    async def search_products(
        self, query: str, country: str, page_size: int = 10
    ) -> dict[str, object]:
        """Search packaged products in the country's catalog."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, user_agent: str) -> "HttpxOpenFoodFactsClient":
        """Create an Open Food Facts client with a managed httpx session."""
        return cls(user_agent=user_agent, http_client=httpx.AsyncClient())

    async def search_products(
        self, query: str, country: str, page_size: int = 10
    ) -> dict[str, object]:
        """Search products with the legacy full-text search endpoint."""
        response = await self.http_client.get(
            f"{regional_base_url(country)}/cgi/search.pl",
            params={
                "search_terms": query,
                "search_simple": 1,
                "action": "process",
                "json": 1,
                "page_size": page_size,
            },
            headers={"User-Agent": self.user_agent},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
