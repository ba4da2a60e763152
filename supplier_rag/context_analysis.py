"""Contract and disruption-event backed supplier analysis.

Complements the profile heuristics with what the relational store knows
about a supplier: averaged contract outcomes (AI score), reviewer scores
(human score), regional disruption events and the recent-vs-older trend of
contract AI scores.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from . import prediction
from .errors import InsufficientDataError
from .records import SupplierContext, SupplierRecord


AI_SCORE_WEIGHTS = {
    "on_time_delivery_pct": 0.40,
    "defect_rate_pct": 0.25,
    "esg_score": 0.20,
    "risk": 0.15,
}
RECENT_WINDOW = 5
TREND_MARGIN = 5.0


@dataclass
class RiskAnalysis:
    logistics: float
    financial: Optional[float]
    geopolitical: Optional[float]
    overall: str
    relevant_events: List[str] = field(default_factory=list)


@dataclass
class ContextAnalysis:
    supplier: str
    ai_score: float
    human_score: Optional[float]
    conflict_index: Optional[float]
    risk_analysis: RiskAnalysis
    performance_metrics: Dict[str, Optional[float]]
    recommendation: str
    confidence: float
    prediction: Dict[str, Any]
    contracts_analyzed: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _round(value: Optional[float]) -> Optional[float]:
    return None if value is None else round(value, 2)


def ai_score(record: SupplierRecord, context: SupplierContext) -> float:
    """Weighted contract-outcome score (0-100)."""

    if not context.contracts:
        raise InsufficientDataError(record.name, "contracts")

    averages = {}
    for attribute in ("on_time_delivery_pct", "defect_rate_pct", "esg_score", "geo_risk_score", "financial_risk_score"):
        value = context.mean(attribute)
        if value is None:
            raise InsufficientDataError(record.name, attribute)
        averages[attribute] = value

    components = {
        "on_time_delivery_pct": averages["on_time_delivery_pct"],
        "defect_rate_pct": max(0.0, 100.0 - averages["defect_rate_pct"]),
        "esg_score": averages["esg_score"],
        "risk": max(0.0, 100.0 - (averages["geo_risk_score"] + averages["financial_risk_score"]) / 2),
    }
    score = sum(components[name] * weight for name, weight in AI_SCORE_WEIGHTS.items())
    return round(score, 2)


def human_score(context: SupplierContext) -> Optional[float]:
    return _round(context.mean("human_score"))


def analyze_risks(record: SupplierRecord, context: SupplierContext) -> RiskAnalysis:
    relevant = context.events_affecting(record.location)
    critical = sum(1 for event in relevant if event.severity.lower() == "critical")
    high = sum(1 for event in relevant if event.severity.lower() == "high")
    logistics = float(min(100, critical * 25 + high * 15))

    financial = context.mean("financial_risk_score")
    geopolitical = context.mean("geo_risk_score")
    available = [value for value in (logistics, financial, geopolitical) if value is not None]
    overall_risk = sum(available) / len(available)
    if overall_risk < 30:
        level = "LOW"
    elif overall_risk < 60:
        level = "MEDIUM"
    else:
        level = "HIGH"

    return RiskAnalysis(
        logistics=round(logistics, 2),
        financial=_round(financial),
        geopolitical=_round(geopolitical),
        overall=level,
        relevant_events=[event.event_id for event in relevant],
    )


def history_trend(context: SupplierContext, fallback: float) -> tuple:
    """Compare mean AI score of the most recent contracts against the previous window."""

    def window_mean(contracts) -> float:
        scores = [contract.ai_score for contract in contracts if contract.ai_score is not None]
        return sum(scores) / len(scores) if scores else fallback

    recent = window_mean(context.contracts[:RECENT_WINDOW])
    older = window_mean(context.contracts[RECENT_WINDOW:RECENT_WINDOW * 2])
    if recent > older + TREND_MARGIN:
        return "IMPROVING", recent
    if recent < older - TREND_MARGIN:
        return "DECLINING", recent
    return "STABLE", recent


def approval_recommendation(score: float, risk_level: str) -> str:
    if score >= 75 and risk_level == "LOW":
        return "APPROVE"
    if score >= 60 and risk_level != "HIGH":
        return "APPROVE_WITH_MONITORING"
    return "REJECT"


def analyze_context(record: SupplierRecord, context: SupplierContext) -> ContextAnalysis:
    score = ai_score(record, context)
    reviewer_score = human_score(context)
    conflict = None if reviewer_score is None else round(abs(score - reviewer_score), 2)
    risks = analyze_risks(record, context)

    trend, recent_mean = history_trend(context, fallback=score)
    if trend == "IMPROVING":
        next_quarter = recent_mean + TREND_MARGIN
    elif trend == "DECLINING":
        next_quarter = recent_mean - TREND_MARGIN
    else:
        next_quarter = recent_mean
    disruption = min(100.0, risks.logistics + len(risks.relevant_events) * 5)

    return ContextAnalysis(
        supplier=record.name,
        ai_score=score,
        human_score=reviewer_score,
        conflict_index=conflict,
        risk_analysis=risks,
        performance_metrics={
            "delivery_reliability": _round(context.mean("on_time_delivery_pct")),
            "defect_rate": _round(context.mean("defect_rate_pct")),
            "esg_score": _round(context.mean("esg_score")),
            "average_contract_value": _round(context.mean("contract_value_inr")),
        },
        recommendation=approval_recommendation(score, risks.overall),
        confidence=prediction.contract_history_confidence(context),
        prediction={
            "next_quarter_reliability": round(next_quarter, 2),
            "disruption_probability": round(disruption, 2),
            "trend": trend,
        },
        contracts_analyzed=len(context.contracts),
    )
