"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from food_search.adapters.calorieninjas_client import CalorieNinjasClient
from food_search.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_search.config import Settings
from food_search.containers import AppContainer
from food_search.domain.foods import SourcePage, UnifiedFoodRecord
from food_search.services.fanout import FanOutCoordinator
from food_search.services.search import FoodSearchService
from food_search.services.sources import (
    AutocompleteCacheSource,
    AutocompleteRepository,
    BrandedFoodSource,
    FoodSource,
    GenericFoodSource,
)


def make_record(name: str, **overrides: object) -> UnifiedFoodRecord:
    """Build a complete generic record, overriding selected fields."""
    values: dict[str, object] = {
        "external_id": name.lower(),
        "name": name,
        "food_type": "generic",
        "source": "autocomplete_cache",
        "calories_per_100g": 100.0,
        "protein_g": 5.0,
        "carbs_g": 10.0,
        "fat_g": 2.0,
    }
    values.update(overrides)
    return UnifiedFoodRecord(**values)  # type: ignore[arg-type]


@dataclass
class StaticSource(FoodSource):
    """Source returning a fixed page and recording its calls."""

    page: SourcePage = field(default_factory=SourcePage.empty)
    calls: list[tuple[str, str, int, int]] = field(default_factory=list)

    async def search(
        self, query: str, country: str, limit: int, offset: int
    ) -> SourcePage:
        self.calls.append((query, country, limit, offset))
        return self.page


@dataclass
class FakeAutocompleteRepository(AutocompleteRepository):
    """In-memory autocomplete mirror honoring offset and limit."""

    rows: list[dict[str, object]] = field(default_factory=list)
    total: int | None = None
    error: Exception | None = None
    calls: list[tuple[str, str, int, int]] = field(default_factory=list)

    def search_rows(
        self, query: str, country: str, limit: int, offset: int
    ) -> tuple[list[dict[str, object]], int]:
        self.calls.append((query, country, limit, offset))
        if self.error is not None:
            raise self.error
        total = self.total if self.total is not None else len(self.rows)
        return self.rows[offset : offset + limit], total


@dataclass
class FakeCalorieNinjasClient(CalorieNinjasClient):
    """Fake CalorieNinjas client with an in-memory payload."""

    payload: object = field(default_factory=lambda: {"items": []})
    delay_seconds: float = 0.0
    calls: list[str] = field(default_factory=list)

    async def lookup(self, query: str) -> dict[str, object]:
        self.calls.append(query)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return self.payload  # type: ignore[return-value]


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with an in-memory payload."""

    payload: object = field(default_factory=lambda: {"products": []})
    error: Exception | None = None
    calls: list[tuple[str, str, int]] = field(default_factory=list)

    async def search_products(
        self, query: str, country: str, page_size: int = 10
    ) -> dict[str, object]:
        self.calls.append((query, country, page_size))
        if self.error is not None:
            raise self.error
        return self.payload  # type: ignore[return-value]


def cache_row(name: str, **overrides: object) -> dict[str, object]:
    """Build a raw autocomplete row."""
    row: dict[str, object] = {
        "external_id": f"off-{name.lower().replace(' ', '-')}",
        "barcode": None,
        "product_name": name,
        "brand": None,
        "calories_per_100g": 120,
        "protein_g": 4.5,
        "carbs_g": 20,
        "fat_g": 1.2,
        "image_url": None,
        "food_type": "generic",
        "allergens": [],
        "popularity_score": 10,
        "source": "openfoodfacts",
    }
    row.update(overrides)
    return row


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        calorieninjas_api_key="calorieninjas-key",
    )


@pytest.fixture
def autocomplete_repository() -> FakeAutocompleteRepository:
    return FakeAutocompleteRepository()


@pytest.fixture
def calorieninjas_client() -> FakeCalorieNinjasClient:
    return FakeCalorieNinjasClient()


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def search_service(
    autocomplete_repository: FakeAutocompleteRepository,
    calorieninjas_client: FakeCalorieNinjasClient,
    openfoodfacts_client: FakeOpenFoodFactsClient,
) -> FoodSearchService:
    coordinator = FanOutCoordinator(
        cache_source=AutocompleteCacheSource(
            repository=autocomplete_repository, timeout_seconds=1.0
        ),
        generic_source=GenericFoodSource(
            client=calorieninjas_client, timeout_seconds=1.0
        ),
        branded_source=BrandedFoodSource(
            client=openfoodfacts_client, timeout_seconds=1.0
        ),
    )
    return FoodSearchService(coordinator=coordinator)


@pytest.fixture
def container(
    settings: Settings, search_service: FoodSearchService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        search_service=search_service,
        close_resources=close_resources,
    )
