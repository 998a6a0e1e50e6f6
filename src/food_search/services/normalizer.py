"""Conversion of provider payloads into unified food records."""

import math
from collections.abc import Iterable, Mapping

from food_search.domain.foods import FoodType, UnifiedFoodRecord

_BRANDED_TYPES = {"branded", "product"}


def normalize_cache_row(row: Mapping[str, object]) -> UnifiedFoodRecord | None:
    """Normalize a row of the autocomplete mirror, dropping unnamed rows."""
    name = _clean_text(row.get("product_name"))
    if name is None:
        return None
    brand = _clean_text(row.get("brand"))
    barcode = _clean_text(row.get("barcode"))
    return UnifiedFoodRecord(
        external_id=_clean_text(row.get("external_id")) or barcode or name,
        barcode=barcode,
        name=name,
        brand=brand,
        calories_per_100g=_to_amount(row.get("calories_per_100g"), digits=0),
        protein_g=_to_amount(row.get("protein_g")),
        carbs_g=_to_amount(row.get("carbs_g")),
        fat_g=_to_amount(row.get("fat_g")),
        fiber_g=_to_amount(row.get("fiber_g")),
        sugar_g=_to_amount(row.get("sugar_g")),
        sodium_mg=_to_amount(row.get("sodium_mg"), digits=0),
        serving_size_g=_to_amount(row.get("serving_size_g")),
        food_type=_resolve_food_type(row.get("food_type"), brand),
        source="autocomplete_cache",
        allergens=_parse_allergens(row.get("allergens")),
        image_url=_clean_text(row.get("image_url")),
    )


def normalize_calorieninjas_item(
    item: Mapping[str, object],
) -> UnifiedFoodRecord | None:
    """Normalize a CalorieNinjas item, rescaling per-serving values to 100 g."""
    name = _clean_text(item.get("name"))
    if name is None:
        return None
    serving_size_g = _to_amount(item.get("serving_size_g"))
    factor = 100 / serving_size_g if serving_size_g else 1.0

    def per_100g(key: str, digits: int = 1) -> float | None:
        amount = _to_amount(item.get(key), digits=None)
        if amount is None:
            return None
        return round(amount * factor, digits)

    return UnifiedFoodRecord(
        external_id=f"calorieninjas:{name.lower()}",
        name=name,
        calories_per_100g=per_100g("calories", digits=0),
        protein_g=per_100g("protein_g"),
        carbs_g=per_100g("carbohydrates_total_g"),
        fat_g=per_100g("fat_total_g"),
        fiber_g=per_100g("fiber_g"),
        sugar_g=per_100g("sugar_g"),
        sodium_mg=per_100g("sodium_mg", digits=0),
        serving_size_g=serving_size_g,
        food_type="generic",
        source="calorieninjas",
    )


def normalize_openfoodfacts_product(
    product: Mapping[str, object],
) -> UnifiedFoodRecord | None:
    """Normalize an Open Food Facts search product."""
    name = _clean_text(product.get("product_name"))
    if name is None:
        return None
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, Mapping):
        nutriments = {}
    barcode = _clean_text(product.get("code"))
    sodium_g = _first_amount(nutriments, "sodium_100g", "sodium")
    return UnifiedFoodRecord(
        external_id=barcode or _clean_text(product.get("_id")) or name,
        barcode=barcode,
        name=name,
        brand=_clean_text(product.get("brands")),
        calories_per_100g=_round(
            _first_amount(nutriments, "energy-kcal_100g", "energy-kcal"), 0
        ),
        protein_g=_round(_first_amount(nutriments, "proteins_100g", "proteins")),
        carbs_g=_round(
            _first_amount(nutriments, "carbohydrates_100g", "carbohydrates")
        ),
        fat_g=_round(_first_amount(nutriments, "fat_100g", "fat")),
        fiber_g=_round(_first_amount(nutriments, "fiber_100g", "fiber")),
        sugar_g=_round(_first_amount(nutriments, "sugars_100g", "sugars")),
        sodium_mg=_round(sodium_g * 1000 if sodium_g is not None else None, 0),
        serving_size_g=_to_amount(product.get("serving_quantity")),
        food_type="branded",
        source="openfoodfacts",
        allergens=_parse_allergens(product.get("allergens_tags")),
        image_url=_clean_text(product.get("image_front_small_url"))
        or _clean_text(product.get("image_url")),
    )


def _clean_text(value: object) -> str | None:
    """Return a stripped string, or None for blanks and non-strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def _to_amount(value: object, digits: int | None = 1) -> float | None:
    """Parse a non-negative amount; unknown or invalid values become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return _round(amount, digits)


def _round(value: float | None, digits: int | None = 1) -> float | None:
    if value is None or digits is None:
        return value
    return round(value, digits)


def _first_amount(nutriments: Mapping[str, object], *keys: str) -> float | None:
    """Return the first known amount among the given nutriment keys."""
    for key in keys:
        amount = _to_amount(nutriments.get(key), digits=None)
        if amount is not None:
            return amount
    return None


def _resolve_food_type(raw: object, brand: str | None) -> FoodType:
    """Map provider food types, defaulting by brand presence."""
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered == "generic":
            return "generic"
        if lowered in _BRANDED_TYPES:
            return "branded"
    return "branded" if brand else "generic"


def _parse_allergens(raw: object) -> frozenset[str]:
    """Lowercase allergen tags, stripping language prefixes like ``en:``."""
    if isinstance(raw, str) or not isinstance(raw, Iterable):
        return frozenset()
    allergens: set[str] = set()
    for tag in raw:
        if not isinstance(tag, str):
            continue
        value = tag.split(":", 1)[1] if ":" in tag else tag
        value = value.strip().lower()
        if value:
            allergens.add(value)
    return frozenset(allergens)
