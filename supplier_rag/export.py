"""Serialise engine results into JSON, flat text or CSV reports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

from . import scoring
from .errors import InsufficientDataError
from .records import SupplierRecord


def as_plain_data(result: Any) -> Any:
    """Convert a result object (or list of them) into JSON-ready data."""

    if isinstance(result, (list, tuple)):
        return [as_plain_data(item) for item in result]
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


def to_json(result: Any, indent: int = 2) -> str:
    return json.dumps(as_plain_data(result), indent=indent, ensure_ascii=False, default=str)


def _flatten(data: Any, prefix: str = "") -> List[str]:
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            lines.extend(_flatten(value, f"{prefix}{key}."))
        return lines
    if isinstance(data, list) and data and isinstance(data[0], dict):
        lines = []
        for index, item in enumerate(data):
            lines.extend(_flatten(item, f"{prefix}{index}."))
        return lines
    if isinstance(data, list):
        data = ", ".join(str(item) for item in data)
    value = "n/a" if data is None else data
    return [f"{prefix.rstrip('.')}: {value}"]


def to_text_report(result: Any) -> str:
    """Render a result as ``key.path: value`` lines; absent values print as ``n/a``."""

    return "\n".join(_flatten(as_plain_data(result))) + "\n"


def records_frame(records: Sequence[SupplierRecord]) -> pd.DataFrame:
    """Tabulate ranked records with their composite score (``None`` when unscorable)."""

    rows = []
    for rank, record in enumerate(records, start=1):
        try:
            score = scoring.composite_score(record)
        except InsufficientDataError:
            score = None
        rows.append({"rank": rank, **record.to_dict(), "composite_score": score})
    return pd.DataFrame(rows)


def write_report(result: Any, path: Path) -> Path:
    """Write ``result`` to ``path``; the suffix selects JSON, CSV or text."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix == ".json":
        path.write_text(to_json(result), encoding="utf-8")
    elif suffix == ".csv":
        if not isinstance(result, (list, tuple)):
            raise ValueError("CSV export expects a list of supplier records")
        records_frame(result).to_csv(path, index=False)
    else:
        path.write_text(to_text_report(result), encoding="utf-8")
    return path
