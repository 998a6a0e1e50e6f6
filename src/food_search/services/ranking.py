"""Deduplication, scoring and pagination of food search results."""

import re
from collections.abc import Iterable

from food_search.domain.foods import ScoredRecord, SearchResponse, UnifiedFoodRecord

_NON_ALNUM = re.compile(r"[^a-z0-9]")

GENERIC_MATCH_BONUS = 200
BRANDED_MATCH_BONUS = 50
NAME_PREFIX_BONUS = 100
NAME_CONTAINS_BONUS = 50
BRAND_CONTAINS_BONUS = 20
COMPLETE_MACROS_BONUS = 15


def dedupe_key(name: str) -> str:
    """Fold a name to lowercase ASCII alphanumerics."""
    return _NON_ALNUM.sub("", name.lower())


def dedupe(records: Iterable[UnifiedFoodRecord]) -> list[UnifiedFoodRecord]:
    """Keep one record per name key in a single left-to-right pass.

    An incoming record replaces the kept one when it has calories and protein
    and the kept one does not, or else when it is generic and the kept one is
    branded.
    """
    kept: dict[str, UnifiedFoodRecord] = {}
    for record in records:
        key = dedupe_key(record.name)
        existing = kept.get(key)
        if existing is None:
            kept[key] = record
        elif record.has_core_macros and not existing.has_core_macros:
            kept[key] = record
        elif record.food_type == "generic" and existing.food_type == "branded":
            kept[key] = record
    return list(kept.values())


def score(record: UnifiedFoodRecord, query: str, is_generic_query: bool) -> int:
    """Return an ordering score for a record; higher ranks first."""
    total = 0
    if is_generic_query and record.food_type == "generic":
        total += GENERIC_MATCH_BONUS
    elif not is_generic_query and record.food_type == "branded":
        total += BRANDED_MATCH_BONUS

    needle = query.strip().lower()
    name = record.name.lower()
    if name.startswith(needle):
        total += NAME_PREFIX_BONUS
    elif needle in name:
        total += NAME_CONTAINS_BONUS

    if record.brand and needle in record.brand.lower():
        total += BRAND_CONTAINS_BONUS
    if record.has_all_macros:
        total += COMPLETE_MACROS_BONUS
    return total


def rank(
    records: Iterable[UnifiedFoodRecord], query: str, is_generic_query: bool
) -> list[ScoredRecord]:
    """Annotate records with scores, keeping their input order."""
    return [
        ScoredRecord(record=record, score=score(record, query, is_generic_query))
        for record in records
    ]


def assemble(
    scored: list[ScoredRecord],
    total: int,
    limit: int,
    offset: int,
    *,
    is_generic_query: bool,
) -> SearchResponse:
    """Order scored records and cut the requested page.

    ``sorted`` is stable, so equal scores keep their incoming order.
    """
    ordered = sorted(scored, key=lambda item: item.score, reverse=True)
    results = [item.record for item in ordered[:limit]]
    has_more = offset + limit < total or len(scored) > limit
    if not has_more:
        # Last page: the exact count is known.
        total = min(total, offset + len(results))
    return SearchResponse(
        results=results,
        total=total,
        has_more=has_more,
        is_generic_query=is_generic_query,
    )
