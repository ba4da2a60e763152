"""Pairwise supplier comparison."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from . import scoring
from .records import SupplierRecord


COMPARABLE_THRESHOLD = 5.0

# (dimension, record attribute, True when the higher value wins)
DIMENSIONS = (
    ("quality", "quality_score", True),
    ("price", "price_per_unit", False),
    ("delivery", "delivery_time_days", False),
    ("financial", "financial_condition", True),
)


@dataclass
class ComparisonResult:
    """Per-dimension and overall verdict for two suppliers.

    Winner fields hold a supplier name, or ``None`` when both are level.
    Differences are always ``supplier_a - supplier_b``.
    """

    supplier_a: str
    supplier_b: str
    score_a: float
    score_b: float
    winner: Optional[str]
    quality_winner: Optional[str]
    price_winner: Optional[str]
    delivery_winner: Optional[str]
    financial_winner: Optional[str]
    detailed_comparison: Dict[str, float] = field(default_factory=dict)
    recommendation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _winner(name_a: str, value_a: float, name_b: str, value_b: float, higher_wins: bool) -> Optional[str]:
    if value_a == value_b:
        return None
    a_better = value_a > value_b if higher_wins else value_a < value_b
    return name_a if a_better else name_b


def dimension_advantages(result: ComparisonResult, supplier: str) -> List[str]:
    return [
        dimension
        for dimension, _, _ in DIMENSIONS
        if getattr(result, f"{dimension}_winner") == supplier
    ]


def comparison_recommendation(
    name_a: str,
    name_b: str,
    score_a: float,
    score_b: float,
    advantages: Optional[Dict[str, List[str]]] = None,
) -> str:
    """Recommendation text; gaps under five points are reported as comparable."""

    if abs(score_a - score_b) < COMPARABLE_THRESHOLD:
        return (
            "Both suppliers show comparable performance. "
            "Decision should be based on specific project requirements."
        )

    winner, high, low = (name_a, score_a, score_b) if score_a > score_b else (name_b, score_b, score_a)
    leads = (advantages or {}).get(winner) or []
    if leads:
        return (
            f"{winner} demonstrates superior overall performance ({high:.2f} vs {low:.2f}), "
            f"leading on {', '.join(leads)}."
        )
    return (
        f"{winner} demonstrates superior overall performance ({high:.2f} vs {low:.2f}) "
        "with better balanced metrics across quality, reliability, and operational efficiency."
    )


def compare(record_a: SupplierRecord, record_b: SupplierRecord) -> ComparisonResult:
    score_a = scoring.composite_score(record_a)
    score_b = scoring.composite_score(record_b)

    winners: Dict[str, Optional[str]] = {}
    differences: Dict[str, float] = {}
    for dimension, attribute, higher_wins in DIMENSIONS:
        value_a = record_a.require(attribute)
        value_b = record_b.require(attribute)
        winners[f"{dimension}_winner"] = _winner(record_a.name, value_a, record_b.name, value_b, higher_wins)
        differences[f"{dimension}_diff"] = round(value_a - value_b, 2)
    differences["score_diff"] = round(score_a - score_b, 2)

    result = ComparisonResult(
        supplier_a=record_a.name,
        supplier_b=record_b.name,
        score_a=score_a,
        score_b=score_b,
        winner=_winner(record_a.name, score_a, record_b.name, score_b, higher_wins=True),
        detailed_comparison=differences,
        **winners,
    )
    advantages = {
        record_a.name: dimension_advantages(result, record_a.name),
        record_b.name: dimension_advantages(result, record_b.name),
    }
    result.recommendation = comparison_recommendation(
        record_a.name, record_b.name, score_a, score_b, advantages
    )
    return result
