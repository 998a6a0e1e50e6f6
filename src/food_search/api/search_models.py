"""Pydantic models for the food search endpoint."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from food_search.domain.foods import SearchResponse, UnifiedFoodRecord


class SearchRequest(BaseModel):
    """Food search request payload."""

    query: str | None = None
    country: str | None = None
    limit: int = 10
    offset: int = 0


class FoodResult(BaseModel):
    """Food record as exposed to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    external_id: str
    barcode: str | None
    name: str
    brand: str | None
    calories_per_100g: float | None = Field(alias="caloriesPer100g")
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    fiber_g: float | None
    sugar_g: float | None
    sodium_mg: float | None
    serving_size_g: float | None
    food_type: str
    source: str
    allergens: list[str]
    image_url: str | None

    @classmethod
    def from_record(cls, record: UnifiedFoodRecord) -> "FoodResult":
        """Build the client shape from a unified record."""
        return cls(
            external_id=record.external_id,
            barcode=record.barcode,
            name=record.name,
            brand=record.brand,
            calories_per_100g=record.calories_per_100g,
            protein_g=record.protein_g,
            carbs_g=record.carbs_g,
            fat_g=record.fat_g,
            fiber_g=record.fiber_g,
            sugar_g=record.sugar_g,
            sodium_mg=record.sodium_mg,
            serving_size_g=record.serving_size_g,
            food_type=record.food_type,
            source=record.source,
            allergens=sorted(record.allergens),
            image_url=record.image_url,
        )


class SearchResponseBody(BaseModel):
    """Food search response payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    results: list[FoodResult]
    total: int
    has_more: bool
    is_generic_query: bool | None = None
    error: str | None = None

    @classmethod
    def from_response(cls, response: SearchResponse) -> "SearchResponseBody":
        """Build the payload from a pipeline response."""
        return cls(
            results=[FoodResult.from_record(record) for record in response.results],
            total=response.total,
            has_more=response.has_more,
            is_generic_query=response.is_generic_query,
        )

    @classmethod
    def failure(cls, message: str) -> "SearchResponseBody":
        """Build the payload for a failed search."""
        return cls(results=[], total=0, has_more=False, error=message)

    def to_payload(self) -> dict[str, object]:
        """Serialize with camelCase keys, omitting unset optional fields."""
        payload = self.model_dump(mode="json", by_alias=True)
        for key in ("isGenericQuery", "error"):
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload
