"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_search.adapters.calorieninjas_client import HttpxCalorieNinjasClient
from food_search.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from food_search.adapters.supabase_autocomplete_repository import (
    SupabaseAutocompleteRepository,
)
from food_search.config import Settings
from food_search.services.fanout import FanOutCoordinator
from food_search.services.search import FoodSearchService
from food_search.services.sources import (
    AutocompleteCacheSource,
    BrandedFoodSource,
    GenericFoodSource,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    search_service: FoodSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    calorieninjas_client = HttpxCalorieNinjasClient.create(
        api_key=resolved_settings.calorieninjas_api_key,
        base_url=resolved_settings.calorieninjas_base_url,
    )
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        user_agent=resolved_settings.openfoodfacts_user_agent
    )
    timeout = resolved_settings.source_timeout_seconds
    coordinator = FanOutCoordinator(
        cache_source=AutocompleteCacheSource(
            repository=SupabaseAutocompleteRepository(supabase_client),
            timeout_seconds=timeout,
            debug=resolved_settings.debug,
        ),
        generic_source=GenericFoodSource(
            client=calorieninjas_client,
            timeout_seconds=timeout,
            debug=resolved_settings.debug,
        ),
        branded_source=BrandedFoodSource(
            client=openfoodfacts_client,
            timeout_seconds=timeout,
            debug=resolved_settings.debug,
        ),
        branded_fallback_threshold=resolved_settings.branded_fallback_threshold,
    )
    search_service = FoodSearchService(
        coordinator=coordinator,
        default_country=resolved_settings.default_country,
    )

    async def close_resources() -> None:
        await calorieninjas_client.close()
        await openfoodfacts_client.close()

    return AppContainer(
        settings=resolved_settings,
        search_service=search_service,
        close_resources=close_resources,
    )
