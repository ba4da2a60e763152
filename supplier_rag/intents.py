"""Table-driven keyword intents used by retrieval and best-supplier selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .records import SupplierRecord


@dataclass(frozen=True)
class IntentRule:
    """A set of trigger phrases and the relevance boost they add per record."""

    name: str
    patterns: Tuple[str, ...]
    field: str
    effect: Callable[[float], float]

    def matches(self, query_lower: str) -> bool:
        return any(pattern in query_lower for pattern in self.patterns)

    def boost(self, record: SupplierRecord) -> Optional[float]:
        """Return the boost for ``record``, or ``None`` when the field is absent or out of range."""

        value = record.verified(self.field)
        if value is None:
            return None
        return self.effect(value)


@dataclass(frozen=True)
class TextMatch:
    """Bonus for the whole query appearing inside a descriptive attribute."""

    field: str
    bonus: float


@dataclass(frozen=True)
class CriteriaGroup:
    """Keyword group selecting the sort key for best-supplier queries."""

    name: str
    patterns: Tuple[str, ...]
    field: str
    ascending: bool

    def matches(self, criteria_lower: str) -> bool:
        return any(pattern in criteria_lower for pattern in self.patterns)


TEXT_MATCHES: Tuple[TextMatch, ...] = (
    TextMatch("name", 50.0),
    TextMatch("traffic_connections", 20.0),
    TextMatch("payment_terms", 15.0),
)

RETRIEVAL_INTENTS: Tuple[IntentRule, ...] = (
    IntentRule("price", ("cheap", "low price", "affordable"), "price_per_unit", lambda price: (20000 - price) / 200),
    IntentRule("urgency", ("fast", "quick delivery", "urgent"), "delivery_time_days", lambda days: (30 - days) * 3),
    IntentRule("quality", ("quality", "best"), "quality_score", lambda quality: quality),
    IntentRule("trust", ("reliable", "reputation"), "reputation", lambda reputation: reputation),
    IntentRule("stability", ("financial", "stable"), "financial_condition", lambda financial: financial),
    IntentRule(
        "volume",
        ("large", "high quantity", "volume"),
        "quantity_capacity",
        lambda capacity: min(capacity / 1000, 100),
    ),
)

# Order matters: the first matching group decides the ranking key.
CRITERIA_GROUPS: Tuple[CriteriaGroup, ...] = (
    CriteriaGroup("price", ("price", "cheap", "affordable"), "price_per_unit", ascending=True),
    CriteriaGroup("quality", ("quality",), "quality_score", ascending=False),
    CriteriaGroup("delivery", ("delivery", "fast"), "delivery_time_days", ascending=True),
    CriteriaGroup("financial", ("financial", "stable"), "financial_condition", ascending=False),
    CriteriaGroup("capacity", ("quantity", "volume", "capacity"), "quantity_capacity", ascending=False),
    CriteriaGroup("reputation", ("reputation", "reliable"), "reputation", ascending=False),
)


def classify_query(query: str) -> List[IntentRule]:
    """Return every retrieval intent triggered by ``query`` (cumulative)."""

    query_lower = (query or "").lower()
    return [rule for rule in RETRIEVAL_INTENTS if rule.matches(query_lower)]


def match_criteria(criteria: str) -> Optional[CriteriaGroup]:
    """Return the first criteria group matching ``criteria``, if any."""

    criteria_lower = (criteria or "").lower()
    for group in CRITERIA_GROUPS:
        if group.matches(criteria_lower):
            return group
    return None
