"""Risk factors, six-month trend and best-supplier selection.

Two confidence formulas exist and a ``PredictionStrategy`` selects exactly
one of them:

* ``heuristic``: a fixed confidence (82 by default). The trend is derived
  from current profile scores only, nothing is verified about the future.
* ``contract_history``: ``(data_volume + score_consistency) / 2`` where
  ``data_volume = min(100, 5 * contracts)`` and ``score_consistency``
  drops two points per point of AI/human score divergence. This strategy
  also adds risk factors drawn from contracts and disruption events.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from . import scoring
from .errors import InsufficientDataError, NotFound
from .intents import match_criteria
from .records import SupplierContext, SupplierRecord


LOGGER = logging.getLogger(__name__)

HEURISTIC = "heuristic"
CONTRACT_HISTORY = "contract_history"

IMPROVING = "Improving"
STABLE = "Stable"
DECLINING = "Declining"

NO_SIGNIFICANT_RISKS = "No significant risks identified"
CONTEXT_RISK_THRESHOLD = 60.0
HIGH_SEVERITIES = {"high", "critical"}


@dataclass(frozen=True)
class PredictionStrategy:
    """Declares the active confidence formula and risk-factor set."""

    name: str = HEURISTIC
    fixed_confidence: float = 82.0

    def __post_init__(self) -> None:
        if self.name not in (HEURISTIC, CONTRACT_HISTORY):
            raise ValueError(f"Unknown prediction strategy '{self.name}'")

    @property
    def uses_context(self) -> bool:
        return self.name == CONTRACT_HISTORY


@dataclass
class PredictionResult:
    supplier: str
    current_performance: float
    predicted_6month_trend: str
    risk_factors: List[str] = field(default_factory=list)
    confidence: float = 0.0
    confidence_basis: str = HEURISTIC
    recommendation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def profile_risk_factors(record: SupplierRecord) -> List[str]:
    """Independently evaluated risk factors from the supplier profile."""

    factors = []
    if record.require("delivery_time_days") > 20:
        factors.append("Extended delivery times may impact reliability")
    if record.require("financial_condition") < 75:
        factors.append("Financial stability concerns")
    if record.require("asset_condition") < 70:
        factors.append("Asset condition requires monitoring")
    if "moderate" in record.traffic_connections.lower():
        factors.append("Traffic connectivity constraints")
    return factors


def context_risk_factors(record: SupplierRecord, context: SupplierContext) -> List[str]:
    factors = []
    severe = [
        event
        for event in context.events_affecting(record.location)
        if event.severity.lower() in HIGH_SEVERITIES
    ]
    if severe:
        factors.append(f"{len(severe)} high-severity disruption event(s) affecting {record.location}")
    financial_risk = context.mean("financial_risk_score")
    if financial_risk is not None and financial_risk >= CONTEXT_RISK_THRESHOLD:
        factors.append("Elevated financial risk across recent contracts")
    geo_risk = context.mean("geo_risk_score")
    if geo_risk is not None and geo_risk >= CONTEXT_RISK_THRESHOLD:
        factors.append("Geopolitical exposure in recent contracts")
    return factors


def classify_trend(score: float, financial_condition: float) -> str:
    if score > 85 and financial_condition > 85:
        return IMPROVING
    if score < 70 or financial_condition < 70:
        return DECLINING
    return STABLE


def contract_history_confidence(context: SupplierContext) -> float:
    data_volume = min(100.0, len(context.contracts) * 5.0)
    ai_score = context.mean("ai_score")
    human_score = context.mean("human_score")
    if ai_score is None or human_score is None:
        consistency = 0.0
    else:
        consistency = max(0.0, min(100.0, 100.0 - abs(ai_score - human_score) * 2))
    return round((data_volume + consistency) / 2, 2)


def prediction_recommendation(score: float, trend: str, risk_count: int) -> str:
    if score > 85 and trend == IMPROVING:
        return "Strong candidate for long-term partnership. Consider increasing order volume."
    if score > 75 and risk_count <= 1:
        return "Reliable supplier with stable performance. Suitable for ongoing procurement."
    if trend == DECLINING or risk_count > 2:
        return "Exercise caution. Consider alternative suppliers or implement closer monitoring."
    return "Acceptable performance. Regular monitoring recommended for sustained quality."


def predict(
    record: SupplierRecord,
    strategy: PredictionStrategy | None = None,
    context: SupplierContext | None = None,
) -> PredictionResult:
    strategy = strategy or PredictionStrategy()
    if strategy.uses_context and context is None:
        raise ValueError("The contract_history strategy requires a supplier context")

    score = scoring.composite_score(record)
    factors = profile_risk_factors(record)
    if strategy.uses_context:
        factors.extend(context_risk_factors(record, context))
        confidence = contract_history_confidence(context)
    else:
        confidence = strategy.fixed_confidence

    trend = classify_trend(score, record.require("financial_condition"))
    recommendation = prediction_recommendation(score, trend, len(factors))

    return PredictionResult(
        supplier=record.name,
        current_performance=score,
        predicted_6month_trend=trend,
        risk_factors=factors or [NO_SIGNIFICANT_RISKS],
        confidence=confidence,
        confidence_basis=strategy.name,
        recommendation=recommendation,
    )


def get_best(records: Sequence[SupplierRecord], criteria: str = "overall") -> SupplierRecord:
    """Return the top-ranked record for ``criteria``.

    Records without a verified value for the ranking key are left out of the
    ranking; if none remain ``NotFound`` is raised.
    """

    group = match_criteria(criteria)
    if group is not None:
        candidates = [record for record in records if record.verified(group.field) is not None]
        ranked = sorted(candidates, key=lambda record: record.verified(group.field), reverse=not group.ascending)
    else:
        scored = []
        for record in records:
            try:
                scored.append((record, scoring.composite_score(record)))
            except InsufficientDataError as exc:
                LOGGER.debug("Excluding %s from overall ranking: %s", record.name, exc)
        ranked = [record for record, _ in sorted(scored, key=lambda pair: pair[1], reverse=True)]

    if not ranked:
        raise NotFound(criteria, f"No verified supplier data available to rank by '{criteria}'")
    return ranked[0]
