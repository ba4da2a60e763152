"""Structured analysis reports and data-grounded chat replies.

Everything rendered here is computed from verified record fields; when a
request cannot be grounded in the dataset the reply is ``NO_DATA_MESSAGE``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence

from . import prediction, retrieval, scoring
from .comparison import ComparisonResult
from .errors import NO_DATA_MESSAGE, InsufficientDataError
from .prediction import PredictionResult, PredictionStrategy
from .records import SupplierRecord


LOGGER = logging.getLogger(__name__)

ANALYSIS_CONFIDENCE = 95
CHAT_TOP_K = 5
MIN_QUERY_LENGTH = 3


@dataclass
class SupplierAnalysis:
    """Seven-section analysis of a single supplier."""

    supplier_overview: Dict[str, Any]
    key_performance_indicators: Dict[str, Any]
    cost_vs_reliability: Dict[str, Any]
    operational_risk: Dict[str, Any]
    financial_asset_strength: Dict[str, Any]
    ai_recommendation: Dict[str, Any]
    confidence_score: int = ANALYSIS_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_inr(amount: float) -> str:
    if float(amount).is_integer():
        return f"₹{amount:,.0f}"
    return f"₹{amount:,.2f}"


def _number(value: float) -> str:
    return f"{value:g}"


def strengths(record: SupplierRecord) -> List[str]:
    found = []
    if record.require("quality_score") > 80:
        found.append("Exceptional quality standards")
    if record.require("delivery_time_days") <= 5:
        found.append("Fast delivery capability")
    if record.require("financial_condition") > 85:
        found.append("Strong financial position")
    if record.require("reputation") > 80:
        found.append("Excellent market reputation")
    if (record.verified("quantity_capacity") or 0) > 100000:
        found.append("High volume capacity")
    return found or ["Balanced performance across metrics"]


def weaknesses(record: SupplierRecord) -> List[str]:
    found = []
    if record.require("quality_score") < 70:
        found.append("Quality concerns")
    if record.require("delivery_time_days") > 20:
        found.append("Slow delivery times")
    if record.require("financial_condition") < 70:
        found.append("Financial stability risk")
    if (record.verified("price_per_unit") or 0) > 15000:
        found.append("Premium pricing")
    return found or ["No significant weaknesses identified"]


def best_use_case(record: SupplierRecord) -> str:
    quality = record.require("quality_score")
    price = record.require("price_per_unit")
    delivery = record.require("delivery_time_days")
    if quality > 90 and price > 10000:
        return "Premium quality requirements with budget flexibility"
    if delivery <= 5 and quality > 80:
        return "Urgent procurement with quality assurance"
    if (record.verified("quantity_capacity") or 0) > 150000:
        return "Large-scale bulk procurement"
    if price < 5000 and quality > 70:
        return "Cost-effective procurement with acceptable quality"
    if record.require("financial_condition") > 90 and record.require("reputation") > 85:
        return "Long-term strategic partnerships"
    return "General procurement requirements"


def analyze(record: SupplierRecord) -> SupplierAnalysis:
    delivery = record.require("delivery_time_days")
    return SupplierAnalysis(
        supplier_overview={
            "name": record.name,
            "location": record.location,
            "employees": record.number_of_employees,
            "business_results": record.business_results,
            "traffic_connectivity": record.traffic_connections,
        },
        key_performance_indicators={
            "quality_score": record.quality_score,
            "quantity_capacity": record.quantity_capacity,
            "serviceability": record.serviceability,
            "reputation": record.reputation,
            "flexibility": record.flexibility,
        },
        cost_vs_reliability={
            "price_per_unit": record.price_per_unit,
            "delivery_time_days": delivery,
            "payment_terms": record.payment_terms,
            "cost_reliability_ratio": scoring.cost_reliability_ratio(record),
        },
        operational_risk={
            "traffic_risk": scoring.traffic_risk(record.traffic_connections),
            "delivery_consistency": scoring.delivery_consistency(delivery),
            "logistics_score": scoring.logistics_score(record),
        },
        financial_asset_strength={
            "financial_condition": record.financial_condition,
            "asset_condition": record.asset_condition,
            "business_strength": scoring.business_strength(record.business_results),
            "overall_stability": scoring.overall_stability(record),
        },
        ai_recommendation={
            "overall_score": scoring.composite_score(record),
            "strengths": strengths(record),
            "weaknesses": weaknesses(record),
            "best_use_case": best_use_case(record),
        },
    )


def summarize_supplier(record: SupplierRecord) -> str:
    return (
        f"Quality: {_number(record.require('quality_score'))}/100, "
        f"Delivery: {_number(record.require('delivery_time_days'))} days, "
        f"Price: {format_inr(record.require('price_per_unit'))}/unit"
    )


def summarize_comparison(result: ComparisonResult) -> str:
    winner = result.winner or "Neither supplier"
    return (
        f"Comparison: {result.supplier_a} (Score: {result.score_a}) vs "
        f"{result.supplier_b} (Score: {result.score_b}). Overall: {winner}. "
        f"{result.recommendation}"
    )


def summarize_prediction(result: PredictionResult) -> str:
    return (
        f"6-month outlook for {result.supplier}: {result.predicted_6month_trend} "
        f"(current score {result.current_performance}, confidence {result.confidence:g}%). "
        f"Risk factors: {'; '.join(result.risk_factors)}. {result.recommendation}"
    )


def chat_response(
    query: str,
    records: Sequence[SupplierRecord],
    strategy: PredictionStrategy | None = None,
) -> str:
    """Answer a free-text question using only retrieved supplier records."""

    query_lower = (query or "").strip().lower()
    if len(query_lower) < MIN_QUERY_LENGTH:
        return NO_DATA_MESSAGE

    relevant = retrieval.retrieve(records, query, CHAT_TOP_K)
    if not relevant:
        return NO_DATA_MESSAGE

    try:
        if "best" in query_lower or "recommend" in query_lower:
            best = relevant[0]
            return (
                f"Based on retrieved data, {best.name} is recommended with an overall score of "
                f"{scoring.composite_score(best)}/100. {summarize_supplier(best)}."
            )

        if "compare" in query_lower and len(relevant) >= 2:
            first, second = relevant[0], relevant[1]
            quality_gap = abs(first.require("quality_score") - second.require("quality_score"))
            price_gap = abs(first.require("price_per_unit") - second.require("price_per_unit"))
            return (
                f"Comparison: {first.name} (Score: {scoring.composite_score(first)}) vs "
                f"{second.name} (Score: {scoring.composite_score(second)}). "
                f"Quality difference: {quality_gap:.2f}, Price difference: {format_inr(price_gap)}."
            )

        if any(keyword in query_lower for keyword in ("predict", "trend", "forecast")):
            return summarize_prediction(prediction.predict(relevant[0], strategy))

        top = relevant[0]
        return (
            f"Top match: {top.name}. {summarize_supplier(top)}, Location: {top.location}. "
            f"Found {len(relevant)} relevant suppliers."
        )
    except InsufficientDataError as exc:
        LOGGER.info("Chat reply withheld: %s", exc)
        return NO_DATA_MESSAGE
