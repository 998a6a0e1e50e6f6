"""Food search domain models."""

from dataclasses import dataclass, field
from typing import Literal

FoodType = Literal["generic", "branded"]
FoodSourceName = Literal["autocomplete_cache", "calorieninjas", "openfoodfacts"]


@dataclass(frozen=True)
class UnifiedFoodRecord:
    """Normalized food candidate produced by any search source."""

    external_id: str
    name: str
    food_type: FoodType
    source: FoodSourceName
    barcode: str | None = None
    brand: str | None = None
    calories_per_100g: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    serving_size_g: float | None = None
    allergens: frozenset[str] = field(default_factory=frozenset)
    image_url: str | None = None

    @property
    def has_core_macros(self) -> bool:
        """Whether calories and protein are both known."""
        return self.calories_per_100g is not None and self.protein_g is not None

    @property
    def has_all_macros(self) -> bool:
        """Whether calories, protein, carbs and fat are all known."""
        return (
            self.has_core_macros
            and self.carbs_g is not None
            and self.fat_g is not None
        )


@dataclass(frozen=True)
class ScoredRecord:
    """Record annotated with a ranking score for ordering only."""

    record: UnifiedFoodRecord
    score: int


@dataclass(frozen=True)
class SearchQuery:
    """Search request after defaults and trimming."""

    text: str
    country: str = "GB"
    limit: int = 10
    offset: int = 0


@dataclass(frozen=True)
class SourcePage:
    """Records returned by one or more sources with their reported count."""

    records: list[UnifiedFoodRecord]
    total: int

    @classmethod
    def empty(cls) -> "SourcePage":
        """Return a page with no records."""
        return cls(records=[], total=0)


@dataclass(frozen=True)
class SearchResponse:
    """Ranked and paginated search result.

    ``is_generic_query`` is None when the query was too short to classify.
    """

    results: list[UnifiedFoodRecord]
    total: int
    has_more: bool
    is_generic_query: bool | None
