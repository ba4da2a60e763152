"""Test the risk and trend estimator and best-supplier selection.

Why we test this:
- Risk factors and the trend label feed the six-month outlook
- The confidence value must always name the formula that produced it
- Best-supplier queries must never rank on absent data
"""

import pytest

from supplier_rag import prediction
from supplier_rag.errors import InsufficientDataError, NotFound
from supplier_rag.prediction import PredictionStrategy
from supplier_rag.records import SupplierContext


def test_heuristic_prediction_for_strong_supplier(r1):
    result = prediction.predict(r1)
    assert result.current_performance == pytest.approx(87.35)
    assert result.predicted_6month_trend == prediction.IMPROVING
    assert result.risk_factors == [prediction.NO_SIGNIFICANT_RISKS]
    assert result.confidence == 82.0
    assert result.confidence_basis == prediction.HEURISTIC
    assert result.recommendation.startswith("Strong candidate for long-term partnership")


def test_heuristic_prediction_for_weak_supplier(r2):
    """Why: each risk condition is evaluated independently."""

    result = prediction.predict(r2)
    assert result.predicted_6month_trend == prediction.DECLINING
    assert result.risk_factors == [
        "Extended delivery times may impact reliability",
        "Financial stability concerns",
        "Asset condition requires monitoring",
        "Traffic connectivity constraints",
    ]
    assert result.recommendation.startswith("Exercise caution")


def test_fixed_confidence_is_configurable(r1):
    result = prediction.predict(r1, PredictionStrategy(fixed_confidence=70.0))
    assert result.confidence == 70.0


def test_contract_history_strategy(r1, context):
    result = prediction.predict(r1, PredictionStrategy(name=prediction.CONTRACT_HISTORY), context)
    assert result.confidence_basis == prediction.CONTRACT_HISTORY
    # data volume 10, score consistency 98
    assert result.confidence == pytest.approx(54.0)
    assert result.risk_factors == ["1 high-severity disruption event(s) affecting Peenya, Bangalore"]


def test_contract_history_strategy_needs_context(r1):
    with pytest.raises(ValueError):
        prediction.predict(r1, PredictionStrategy(name=prediction.CONTRACT_HISTORY))


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError):
        PredictionStrategy(name="crystal_ball")


def test_confidence_without_reviewer_scores():
    assert prediction.contract_history_confidence(SupplierContext()) == 0.0


@pytest.mark.parametrize(
    "score, financial, expected",
    [(90, 90, "Improving"), (86, 85, "Stable"), (69.9, 90, "Declining"), (80, 69, "Declining"), (75, 75, "Stable")],
)
def test_classify_trend(score, financial, expected):
    assert prediction.classify_trend(score, financial) == expected


def test_recommendation_uses_risk_count():
    assert prediction.prediction_recommendation(80, "Stable", 1).startswith("Reliable supplier")
    assert prediction.prediction_recommendation(80, "Stable", 2).startswith("Acceptable performance")
    assert prediction.prediction_recommendation(80, "Stable", 3).startswith("Exercise caution")


def test_prediction_refuses_incomplete_record(incomplete):
    with pytest.raises(InsufficientDataError):
        prediction.predict(incomplete)


def test_get_best_overall_and_criteria(records):
    assert prediction.get_best(records, "overall").name == "Peenya Castings"
    assert prediction.get_best(records, "cheapest").name == "Peenya Castings North"
    assert prediction.get_best(records, "fast delivery").name == "Peenya Castings"
    assert prediction.get_best(records, "highest quality").name == "Peenya Castings"


def test_get_best_skips_records_without_the_key(records, incomplete):
    assert prediction.get_best([incomplete, *records], "overall").name == "Peenya Castings"
    assert prediction.get_best([incomplete, *records], "financial").name == "Peenya Castings"


def test_get_best_on_empty_collection_raises():
    with pytest.raises(NotFound):
        prediction.get_best([], "overall")


def test_get_best_with_no_scorable_record_raises(incomplete):
    with pytest.raises(NotFound):
        prediction.get_best([incomplete], "financial")
