"""Tests for deduplication, scoring and pagination."""

from food_search.domain.foods import ScoredRecord
from food_search.services.classifier import classify
from food_search.services.ranking import assemble, dedupe, dedupe_key, rank, score
from tests.conftest import make_record


def test_dedupe_key_folds_punctuation_and_case() -> None:
    assert dedupe_key("Greek Yogurt") == dedupe_key("greek-yogurt!")


def test_dedupe_prefers_complete_record() -> None:
    incomplete = make_record("Greek Yogurt", calories_per_100g=None, protein_g=None)
    complete = make_record("Greek Yogurt", external_id="complete")

    result = dedupe([incomplete, complete])

    assert result == [complete]


def test_dedupe_prefers_generic_over_branded() -> None:
    branded = make_record("Oats", food_type="branded", brand="Acme")
    generic = make_record("oats", source="calorieninjas")

    assert dedupe([branded, generic]) == [generic]
    assert dedupe([generic, branded]) == [generic]


def test_dedupe_keeps_first_when_equivalent() -> None:
    first = make_record("Rice", external_id="first")
    second = make_record("RICE", external_id="second")

    assert dedupe([first, second]) == [first]


def test_dedupe_is_idempotent_and_keys_unique() -> None:
    records = [
        make_record("Greek Yogurt", protein_g=None),
        make_record("greek-yogurt"),
        make_record("Banana", food_type="branded"),
        make_record("banana"),
        make_record("Apple"),
    ]

    once = dedupe(records)
    twice = dedupe(once)

    assert once == twice
    keys = [dedupe_key(record.name) for record in once]
    assert len(keys) == len(set(keys))


def test_score_weights() -> None:
    record = make_record("Banana chips", brand="Banana Co", food_type="branded")

    assert score(record, "banana", is_generic_query=False) == 50 + 100 + 20 + 15
    assert score(record, "chips", is_generic_query=True) == 50 + 15


def test_score_counts_zero_macros_as_present() -> None:
    record = make_record("Diet cola", protein_g=0.0, fat_g=0.0)
    missing = make_record("Diet cola", fat_g=None)

    assert score(record, "zzz", is_generic_query=False) == 15
    assert score(missing, "zzz", is_generic_query=False) == 0


def test_generic_query_ranks_generic_record_first() -> None:
    query = "ab"
    is_generic = classify(query).is_generic
    bar = make_record("AB Energy Bar", food_type="branded", brand="AB")
    abalone = make_record("Abalone", source="calorieninjas")

    response = assemble(
        rank([bar, abalone], query, is_generic), 2, 10, 0, is_generic_query=is_generic
    )

    assert is_generic is True
    assert [record.name for record in response.results] == ["Abalone", "AB Energy Bar"]


def test_branded_query_prefers_exact_branded_product() -> None:
    query = "Coca Cola 330ml"
    is_generic = classify(query).is_generic
    cola = make_record("cola")
    coke = make_record("Coca-Cola 330ml", food_type="branded", brand="Coca-Cola")

    response = assemble(
        rank([cola, coke], query, is_generic), 2, 10, 0, is_generic_query=is_generic
    )

    assert is_generic is False
    assert response.results[0] is coke


def test_assemble_is_stable_for_ties() -> None:
    scored = [
        ScoredRecord(record=make_record(f"Item {index}"), score=10)
        for index in range(5)
    ]

    first = assemble(scored, 5, 3, 0, is_generic_query=True)
    second = assemble(list(scored), 5, 3, 0, is_generic_query=True)

    assert [r.name for r in first.results] == ["Item 0", "Item 1", "Item 2"]
    assert first.results == second.results
    assert first.has_more is True


def test_assemble_has_more_when_more_records_than_limit() -> None:
    scored = [ScoredRecord(record=make_record(f"Item {i}"), score=i) for i in range(4)]

    response = assemble(scored, 2, 3, 0, is_generic_query=False)

    assert response.has_more is True
    assert [r.name for r in response.results] == ["Item 3", "Item 2", "Item 1"]


def test_assemble_last_page_reports_exact_total() -> None:
    scored = [ScoredRecord(record=make_record("Rice"), score=1)]

    response = assemble(scored, 3, 10, 0, is_generic_query=True)

    assert response.has_more is False
    assert response.total == 1
    assert 0 + len(response.results) >= response.total


def test_assemble_empty_page_past_the_end() -> None:
    response = assemble([], 15, 10, 20, is_generic_query=True)

    assert response.results == []
    assert response.has_more is False
    assert response.total == 15
