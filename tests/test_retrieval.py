"""Test keyword retrieval, intents and name lookup.

Why we test this:
- Retrieval decides which verified records the chat and search surfaces see
- Ordering must be stable so equal-relevance results keep provider order
- Lookup ambiguity must be explicit when strict matching is enabled
"""

import pytest

from supplier_rag import intents, retrieval
from supplier_rag.errors import AmbiguousSupplierError, NotFound
from supplier_rag.records import SupplierRecord
from tests.test_data_fixtures import cheap_fast_supplier, premium_slow_supplier


def test_cheap_fast_ranks_budget_supplier_first():
    """Why: price and urgency intents are cumulative."""

    budget = SupplierRecord(**cheap_fast_supplier)
    premium = SupplierRecord(**premium_slow_supplier)
    ranked = retrieval.rank([premium, budget], "cheap fast")
    assert [record.name for record, _ in ranked] == [budget.name, premium.name]
    assert ranked[0][1] == pytest.approx(179.0)
    assert ranked[1][1] == pytest.approx(11.0)
    assert retrieval.retrieve([premium, budget], "cheap fast", 5)[0] == budget


def test_blank_query_returns_provider_order(records):
    assert retrieval.retrieve(records, "", 2) == records[:2]
    assert retrieval.retrieve(records, "   ", 10) == records


def test_non_positive_top_k_returns_nothing(records):
    assert retrieval.retrieve(records, "quality", 0) == []
    assert retrieval.retrieve(records, "quality", -3) == []


def test_ties_keep_provider_order(records):
    """Why: a query matching nothing scores every record 0."""

    assert retrieval.retrieve(records, "zzz unmatched", 3) == records
    assert retrieval.retrieve(list(reversed(records)), "zzz unmatched", 3) == list(reversed(records))


def test_name_and_connectivity_text_bonus(records):
    ranked = retrieval.rank(records, "Hosur")
    assert ranked[0][0].name == "Hosur Plastics"
    assert ranked[0][1] == pytest.approx(70.0)


def test_absent_field_contributes_nothing():
    unpriced = SupplierRecord(name="Unpriced Works")
    assert retrieval.relevance(unpriced, "cheap") == 0.0


def test_classify_query_collects_every_intent():
    names = [rule.name for rule in intents.classify_query("Cheap fast quality supplier")]
    assert names == ["price", "urgency", "quality"]


@pytest.mark.parametrize(
    "criteria, expected",
    [
        ("cheapest quality", "price"),
        ("fast delivery", "delivery"),
        ("most stable", "financial"),
        ("high volume", "capacity"),
        ("reliable", "reputation"),
        ("overall", None),
    ],
)
def test_match_criteria_first_group_wins(criteria, expected):
    group = intents.match_criteria(criteria)
    assert (group.name if group else None) == expected


def test_find_by_name_exact_then_substring(records):
    assert retrieval.find_by_name(records, "peenya castings north").name == "Peenya Castings North"
    assert retrieval.find_by_name(records, "r2").name == "Hosur Plastics"
    assert retrieval.find_by_name(records, "Peenya").name == "Peenya Castings"


def test_find_by_name_strict_reports_ambiguity(records):
    with pytest.raises(AmbiguousSupplierError) as excinfo:
        retrieval.find_by_name(records, "Peenya", strict=True)
    assert excinfo.value.candidates == ["Peenya Castings", "Peenya Castings North"]
    assert retrieval.find_by_name(records, "Hosur", strict=True).name == "Hosur Plastics"


@pytest.mark.parametrize("identifier", ["", "   ", "Nonexistent Traders"])
def test_find_by_name_not_found(records, identifier):
    with pytest.raises(NotFound):
        retrieval.find_by_name(records, identifier)


def test_query_whitespace_is_kept_for_text_bonus(records):
    """Why: substring bonuses use the lower-cased query as typed."""

    assert retrieval.relevance(records[0], "peenya") == pytest.approx(50.0)
    ranked = dict((record.name, score) for record, score in retrieval.rank(records, " Peenya"))
    assert ranked["Peenya Castings"] == 0.0
    assert dict((record.name, score) for record, score in retrieval.rank(records, "Peenya"))["Peenya Castings"] == 50.0


def test_out_of_range_field_contributes_nothing():
    bogus = SupplierRecord(name="Bogus Metals", price_per_unit=-500.0)
    assert retrieval.relevance(bogus, "cheap") == 0.0
