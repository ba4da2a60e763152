"""Deterministic composite scoring for verified supplier records.

The composite score is a fixed weighted sum of the record's quality and
soft scores plus a normalised delivery term::

    score = 0.25 * quality + 0.20 * reputation + 0.15 * financial
          + 0.15 * max(0, 100 - 2 * delivery_days)
          + 0.10 * serviceability + 0.10 * flexibility + 0.05 * asset

Every weighted field must be present; an absent field raises
``InsufficientDataError`` instead of being treated as zero. The auxiliary
sub-scores below (logistics, business strength, stability) feed the risk
estimator and the analysis report, not the composite.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional, Tuple

from .records import SupplierRecord


LOGGER = logging.getLogger(__name__)

COMPOSITE_WEIGHTS: Dict[str, float] = {
    "quality_score": 0.25,
    "reputation": 0.20,
    "financial_condition": 0.15,
    "delivery": 0.15,
    "serviceability": 0.10,
    "flexibility": 0.10,
    "asset_condition": 0.05,
}

# Ordered: first keyword found in the connectivity descriptor wins.
CONNECTIVITY_LEVELS: Tuple[Tuple[str, float, str], ...] = (
    ("excellent", 95.0, "Low"),
    ("good", 85.0, "Low-Moderate"),
    ("near", 75.0, "Moderate"),
)
DEFAULT_CONNECTIVITY = (65.0, "High")

NEUTRAL_BUSINESS_STRENGTH = 50.0
_CRORE_PATTERN = re.compile(r"(?:₹|rs\.?|inr)\s*([\d,]+(?:\.\d+)?)\s*crores?", re.IGNORECASE)


def normalized_delivery(delivery_days: float) -> float:
    """Map lead time to 0-100; anything beyond 50 days contributes nothing."""

    return max(0.0, 100.0 - 2.0 * delivery_days)


def composite_score(record: SupplierRecord) -> float:
    """Return the 0-100 composite score rounded to two decimals."""

    components = {
        "quality_score": record.require("quality_score"),
        "reputation": record.require("reputation"),
        "financial_condition": record.require("financial_condition"),
        "delivery": normalized_delivery(record.require("delivery_time_days")),
        "serviceability": record.require("serviceability"),
        "flexibility": record.require("flexibility"),
        "asset_condition": record.require("asset_condition"),
    }
    score = sum(components[name] * weight for name, weight in COMPOSITE_WEIGHTS.items())
    return round(score, 2)


def _connectivity_level(traffic_connections: str) -> Tuple[float, str]:
    descriptor = traffic_connections.lower()
    for keyword, base_score, risk in CONNECTIVITY_LEVELS:
        if keyword in descriptor:
            return base_score, risk
    return DEFAULT_CONNECTIVITY


def logistics_score(record: SupplierRecord) -> float:
    """Connectivity base score reduced by 1.5 points per delivery day, clamped to [0, 100]."""

    base_score, _ = _connectivity_level(record.traffic_connections)
    score = base_score - 1.5 * record.require("delivery_time_days")
    return max(0.0, min(100.0, score))


def traffic_risk(traffic_connections: str) -> str:
    return _connectivity_level(traffic_connections)[1]


def delivery_consistency(delivery_days: float) -> str:
    if delivery_days <= 7:
        return "High"
    if delivery_days <= 15:
        return "Moderate"
    return "Low"


def business_strength(business_results: str) -> float:
    """Parse a "₹X Crore" revenue statement into a 0-100 strength score.

    Free-text revenue statements are noisy, so an unparseable statement
    yields the neutral default instead of an error.
    """

    match = _CRORE_PATTERN.search(business_results or "")
    if not match:
        LOGGER.debug("No revenue amount in %r; using neutral business strength", business_results)
        return NEUTRAL_BUSINESS_STRENGTH
    crores = float(match.group(1).replace(",", ""))
    return min(100.0, (crores / 50.0) * 10.0)


def overall_stability(record: SupplierRecord) -> float:
    stability = (record.require("financial_condition") + record.require("asset_condition")) / 2
    return round(stability, 2)


def cost_reliability_ratio(record: SupplierRecord) -> Optional[float]:
    """Price paid per quality point; ``None`` when quality is zero."""

    quality = record.require("quality_score")
    if quality == 0:
        return None
    return round(record.require("price_per_unit") / quality, 2)
