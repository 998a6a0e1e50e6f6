"""Supabase implementation for the mirrored food autocomplete table."""

import re
from dataclasses import dataclass

from supabase import Client

from food_search.services.sources import AutocompleteRepository

_COLUMNS = (
    "external_id, barcode, product_name, brand, calories_per_100g, protein_g, "
    "carbs_g, fat_g, image_url, food_type, allergens, popularity_score, source"
)
_FILTER_UNSAFE = re.compile(r"[,()]")


@dataclass
class SupabaseAutocompleteRepository(AutocompleteRepository):
    """Supabase-backed read-only access to the autocomplete mirror."""

    client: Client

    def search_rows(
        self, query: str, country: str, limit: int, offset: int
    ) -> tuple[list[dict[str, object]], int]:
        """Return a page of matching rows ordered by popularity and the full count."""
        term = _FILTER_UNSAFE.sub(" ", query.lower()).strip()
        pattern = f"%{term}%"
        response = (
            self.client.table("foods_autocomplete")
            .select(_COLUMNS, count="exact")
            .eq("country", country.upper())
            .or_(
                f"product_name.ilike.{pattern},"
                f"brand.ilike.{pattern},"
                f"search_text.ilike.{pattern}"
            )
            .order("popularity_score", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        rows = list(response.data or [])
        total = response.count if isinstance(response.count, int) else len(rows)
        return rows, total
