"""Verified supplier, contract and disruption-event records.

Numeric attributes are either a value read from the provider or ``None``.
Blank, unparseable or NaN cells are kept absent rather than coerced to zero,
so downstream scoring can refuse to rank on data it does not have.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import InsufficientDataError, OutOfRangeError


LOGGER = logging.getLogger(__name__)


# Original dataset header -> record attribute.
CSV_COLUMN_MAP: Dict[str, str] = {
    "supplier": "name",
    "supplier_location": "location",
    "category": "category",
    "conditions_and_method_of_payment": "payment_terms",
    "traffic_connections": "traffic_connections",
    "business_results": "business_results",
    "price_per_unit_inr": "price_per_unit",
    "delivery_time_days": "delivery_time_days",
    "quantity_capacity": "quantity_capacity",
    "number_of_employees": "number_of_employees",
    "quality_score": "quality_score",
    "serviceability_and_communicativeness": "serviceability",
    "reputation_and_competence": "reputation",
    "flexibility": "flexibility",
    "financial_condition": "financial_condition",
    "supplier_asset_condition": "asset_condition",
    "supplier_id": "supplier_id",
}

NUMERIC_FIELDS = (
    "price_per_unit",
    "delivery_time_days",
    "quantity_capacity",
    "number_of_employees",
    "quality_score",
    "serviceability",
    "reputation",
    "flexibility",
    "financial_condition",
    "asset_condition",
)

# Inclusive (low, high) bounds of verified values; None leaves a side open.
FIELD_BOUNDS: Dict[str, Tuple[Optional[float], Optional[float]]] = {
    "price_per_unit": (0.0, None),
    "delivery_time_days": (0.0, None),
    "quantity_capacity": (0.0, None),
    "number_of_employees": (0.0, None),
    "quality_score": (0.0, 100.0),
    "serviceability": (0.0, 100.0),
    "reputation": (0.0, 100.0),
    "flexibility": (0.0, 100.0),
    "financial_condition": (0.0, 100.0),
    "asset_condition": (0.0, 100.0),
}


def coerce_number(value: Any) -> Optional[float]:
    """Return ``value`` as a float, or ``None`` when it is absent or unreadable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    text = str(value).strip().replace(",", "").replace("₹", "")
    if not text or text.lower() in {"nan", "none", "null", "n/a", "-"}:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return None if math.isnan(number) else number


def in_bounds(field_name: str, value: float) -> bool:
    low, high = FIELD_BOUNDS.get(field_name, (None, None))
    return (low is None or value >= low) and (high is None or value <= high)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _mean(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [value for value in values if value is not None]
    if not present:
        return None
    return sum(present) / len(present)


@dataclass(frozen=True)
class SupplierRecord:
    """One verified supplier entry."""

    name: str
    location: str = ""
    category: str = ""
    payment_terms: str = ""
    traffic_connections: str = ""
    business_results: str = ""
    price_per_unit: Optional[float] = None
    delivery_time_days: Optional[float] = None
    quantity_capacity: Optional[float] = None
    number_of_employees: Optional[float] = None
    quality_score: Optional[float] = None
    serviceability: Optional[float] = None
    reputation: Optional[float] = None
    flexibility: Optional[float] = None
    financial_condition: Optional[float] = None
    asset_condition: Optional[float] = None
    supplier_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], column_map: Mapping[str, str] | None = None) -> "SupplierRecord":
        """Build a record from a provider row, renaming columns via ``column_map``."""

        column_map = column_map or CSV_COLUMN_MAP
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, raw in row.items():
            target = column_map.get(str(key).strip(), str(key).strip())
            if target not in known:
                continue
            if target in NUMERIC_FIELDS:
                number = coerce_number(raw)
                if number is not None and not in_bounds(target, number):
                    LOGGER.warning(
                        "Dropping out-of-range %s=%s for supplier row %r",
                        target,
                        number,
                        row.get("supplier", row.get("name")),
                    )
                    number = None
                values[target] = number
            elif target == "supplier_id":
                text = _coerce_text(raw)
                values[target] = text or None
            else:
                values[target] = _coerce_text(raw)
        if not values.get("name"):
            raise ValueError("Supplier row has no name")
        return cls(**values)

    def require(self, field_name: str) -> float:
        """Return a verified numeric value or raise ``InsufficientDataError``.

        Values outside ``FIELD_BOUNDS`` raise ``OutOfRangeError``.
        """

        value = getattr(self, field_name)
        if value is None:
            raise InsufficientDataError(self.name, field_name)
        if not in_bounds(field_name, value):
            raise OutOfRangeError(self.name, field_name, value)
        return value

    def verified(self, field_name: str) -> Optional[float]:
        """Like ``require`` but returns ``None`` for absent or out-of-range values."""

        value = getattr(self, field_name)
        if value is None or not in_bounds(field_name, value):
            return None
        return value

    def missing_fields(self, names: Sequence[str] = NUMERIC_FIELDS) -> List[str]:
        return [name for name in names if getattr(self, name) is None]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Contract:
    """Historical contract outcome for one supplier."""

    contract_id: str
    supplier_id: str
    contract_date: Optional[str] = None
    contract_value_inr: Optional[float] = None
    on_time_delivery_pct: Optional[float] = None
    defect_rate_pct: Optional[float] = None
    esg_score: Optional[float] = None
    geo_risk_score: Optional[float] = None
    financial_risk_score: Optional[float] = None
    ai_score: Optional[float] = None
    human_score: Optional[float] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Contract":
        numeric = {
            f.name: coerce_number(row.get(f.name))
            for f in fields(cls)
            if f.name not in {"contract_id", "supplier_id", "contract_date"}
        }
        contract_date = row.get("contract_date")
        return cls(
            contract_id=_coerce_text(row.get("contract_id")),
            supplier_id=_coerce_text(row.get("supplier_id")),
            contract_date=_coerce_text(contract_date) or None,
            **numeric,
        )


@dataclass(frozen=True)
class DisruptionEvent:
    """Regional disruption (strike, flood, port closure...) from the event log."""

    event_id: str
    event_type: str = ""
    severity: str = "Low"
    affected_cities: tuple = ()
    start_date: Optional[str] = None
    description: str = ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "DisruptionEvent":
        cities = row.get("affected_cities") or ()
        if isinstance(cities, str):
            cities = [city.strip() for city in cities.split(";") if city.strip()]
        return cls(
            event_id=_coerce_text(row.get("event_id")),
            event_type=_coerce_text(row.get("event_type")),
            severity=_coerce_text(row.get("severity")) or "Low",
            affected_cities=tuple(cities),
            start_date=_coerce_text(row.get("start_date")) or None,
            description=_coerce_text(row.get("description")),
        )

    def affects(self, location: str) -> bool:
        location_lower = location.lower()
        return bool(location_lower) and any(
            city.lower() in location_lower or location_lower in city.lower()
            for city in self.affected_cities
        )


@dataclass(frozen=True)
class SupplierContext:
    """Historical contracts (most recent first) and disruption events."""

    contracts: tuple = field(default_factory=tuple)
    events: tuple = field(default_factory=tuple)

    def mean(self, attribute: str) -> Optional[float]:
        return _mean(getattr(contract, attribute) for contract in self.contracts)

    def events_affecting(self, location: str) -> List[DisruptionEvent]:
        return [event for event in self.events if event.affects(location)]
