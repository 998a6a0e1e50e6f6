"""CalorieNinjas nutrition API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class CalorieNinjasClient(Protocol):
    """Interface for CalorieNinjas API interactions."""

    async def lookup(self, query: str) -> dict[str, object]:
        """Look up generic foods by free text and return raw API data."""


@dataclass
class HttpxCalorieNinjasClient(CalorieNinjasClient):
    """HTTPX-backed CalorieNinjas client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxCalorieNinjasClient":
        """Create a CalorieNinjas client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def lookup(self, query: str) -> dict[str, object]:
        """Look up generic foods by free text."""
        response = await self.http_client.get(
            f"{self.base_url}/nutrition",
            params={"query": query},
            headers={"X-Api-Key": self.api_key},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
