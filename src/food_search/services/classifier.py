"""Query classification for generic versus branded searches."""

import re
from dataclasses import dataclass

_BRAND_MARKS = ("®", "™")
_BRAND_WORD = re.compile(r"\bbrand\b")
_BY_NAME = re.compile(r"\bby\s+\S")
_DIGIT = re.compile(r"\d")

GENERIC_MAX_WORDS = 2


@dataclass(frozen=True)
class QueryClassification:
    """Outcome of classifying a search query."""

    is_generic: bool


def classify(text: str) -> QueryClassification:
    """Label a query as a generic food or a branded/specific product.

    Brand indicators and digits mark a query as specific; otherwise short
    queries of at most two words are treated as generic foods.
    """
    lowered = text.strip().lower()
    if any(mark in lowered for mark in _BRAND_MARKS):
        return QueryClassification(is_generic=False)
    if _BRAND_WORD.search(lowered) or _BY_NAME.search(lowered):
        return QueryClassification(is_generic=False)
    if _DIGIT.search(lowered):
        return QueryClassification(is_generic=False)
    return QueryClassification(is_generic=len(lowered.split()) <= GENERIC_MAX_WORDS)
