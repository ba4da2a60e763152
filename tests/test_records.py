"""Test record construction from provider rows.

Why we test this:
- Provider rows arrive with the dataset's original headers and messy cells
- Blank or unreadable numbers must stay absent, never become zero
"""

import math

import pytest

from supplier_rag.errors import InsufficientDataError, OutOfRangeError
from supplier_rag.records import DisruptionEvent, SupplierRecord, coerce_number
from tests.test_data_fixtures import supplier_r1


@pytest.mark.parametrize(
    "raw, expected",
    [
        (12, 12.0),
        ("4,800", 4800.0),
        ("₹12,500", 12500.0),
        (" 7.5 ", 7.5),
        ("", None),
        ("n/a", None),
        ("abc", None),
        (float("nan"), None),
        (None, None),
        (True, None),
    ],
)
def test_coerce_number(raw, expected):
    assert coerce_number(raw) == expected


def test_from_mapping_renames_dataset_headers():
    record = SupplierRecord.from_mapping(
        {
            "supplier": " Peenya Castings ",
            "supplier_location": "Peenya, Bangalore",
            "conditions_and_method_of_payment": "Net 30",
            "price_per_unit_inr": "4,500",
            "reputation_and_competence": 85,
            "supplier_asset_condition": math.nan,
            "supplier_id": "R1",
            "unrelated_column": "ignored",
        }
    )
    assert record.name == "Peenya Castings"
    assert record.location == "Peenya, Bangalore"
    assert record.payment_terms == "Net 30"
    assert record.price_per_unit == 4500.0
    assert record.reputation == 85.0
    assert record.asset_condition is None
    assert record.supplier_id == "R1"


def test_from_mapping_requires_a_name():
    with pytest.raises(ValueError):
        SupplierRecord.from_mapping({"supplier": "", "quality_score": 90})


def test_require_and_missing_fields(incomplete):
    assert incomplete.require("quality_score") == 74.0
    with pytest.raises(InsufficientDataError):
        incomplete.require("financial_condition")
    assert "financial_condition" in incomplete.missing_fields()
    assert "number_of_employees" in incomplete.missing_fields()


def test_disruption_event_city_matching():
    event = DisruptionEvent.from_mapping({"event_id": "E-9", "affected_cities": "Peenya; Yeshwanthpur", "severity": ""})
    assert event.affected_cities == ("Peenya", "Yeshwanthpur")
    assert event.severity == "Low"
    assert event.affects("Peenya, Bangalore")
    assert not event.affects("Whitefield, Bangalore")
    assert not event.affects("")


def test_from_mapping_drops_out_of_range_values():
    """Why: a soft score above 100 or a negative lead time is not a verified value."""

    record = SupplierRecord.from_mapping(
        {
            "supplier": "Bad Co",
            "price_per_unit_inr": "-5",
            "delivery_time_days": "-5",
            "quality_score": "180",
            "reputation_and_competence": "100",
            "financial_condition": "0",
        }
    )
    assert record.price_per_unit is None
    assert record.delivery_time_days is None
    assert record.quality_score is None
    assert record.reputation == 100.0
    assert record.financial_condition == 0.0


@pytest.mark.parametrize(
    "field_name, value",
    [("delivery_time_days", -40.0), ("quality_score", 150.0), ("asset_condition", -1.0), ("price_per_unit", -10.0)],
)
def test_require_rejects_out_of_range_values(field_name, value):
    record = SupplierRecord(**{**supplier_r1, field_name: value})
    with pytest.raises(OutOfRangeError) as excinfo:
        record.require(field_name)
    assert excinfo.value.field == field_name
    assert excinfo.value.value == value
    assert isinstance(excinfo.value, InsufficientDataError)
    assert record.verified(field_name) is None
