"""Audit trail helpers for supplier lookups, loads and data quality.

Events are appended to a CSV under ``reports/audit_logs`` and, when enabled
in the engine config, mirrored to the ``audit_events`` table. Persisting an
audit event never raises; failures are logged and the request continues.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from . import config, db_connector

LOGGER = logging.getLogger(__name__)
REPORTS_DIR = config.BASE_DIR / "reports" / "audit_logs"
AUDIT_FILENAME = "audit_events_log.csv"
_CSV_LOCK = threading.Lock()


def _settings() -> Mapping[str, Any]:
    return config.load_config().get("auditing", {})


def audit_log_path() -> Path:
    return REPORTS_DIR / AUDIT_FILENAME


def persist_audit_log(event_type: str, payload: Mapping[str, Any]) -> None:
    """Persist an audit event to the CSV log and optionally the database."""

    settings = _settings()
    if not settings.get("enabled", True):
        return

    try:
        REPORTS_DIR.mkdir(parents=True, exist_ok=True)
        audit_frame = pd.DataFrame(
            [
                {
                    "event_type": event_type,
                    "payload": json.dumps(payload, default=str),
                    "created_at": pd.Timestamp.now(tz="UTC"),
                }
            ]
        )

        csv_path = audit_log_path()
        with _CSV_LOCK:
            if csv_path.exists():
                audit_frame.to_csv(csv_path, mode="a", header=False, index=False)
            else:
                audit_frame.to_csv(csv_path, index=False)
    except OSError:
        LOGGER.exception("Failed to persist audit log")

    if settings.get("database"):
        try:
            db_connector.write_audit_event(event_type=event_type, payload=dict(payload))
        except SQLAlchemyError as exc:
            LOGGER.warning("Failed to persist audit event %s: %s", event_type, exc)


def record_lineage(table_name: str, source_files: Sequence[str]) -> None:
    persist_audit_log(event_type="data_lineage", payload={"table": table_name, "source_files": list(source_files)})


def absence_ratios(df: pd.DataFrame) -> Dict[str, float]:
    return {column: float(df[column].isna().mean()) for column in df.columns}


def log_data_quality(df: pd.DataFrame, source: str) -> pd.DataFrame:
    """Summarise how many verified values each supplier column is missing.

    Absent cells are expected (they are never imputed) but a sudden rise in
    absence usually means the upstream export changed.
    """

    ratios = absence_ratios(df)
    summary = pd.DataFrame(
        [
            {"column": column, "absent_ratio": ratio, "complete": ratio == 0.0}
            for column, ratio in ratios.items()
        ]
    )
    persist_audit_log(
        event_type="data_quality",
        payload={
            "source": source,
            "rows": int(df.shape[0]),
            "absent_ratio": ratios,
            "complete": bool(summary["complete"].all()) if not summary.empty else True,
        },
    )
    return summary


def read_audit_log(limit: int = 50) -> List[Dict[str, Any]]:
    """Return the most recent audit events, newest first."""

    csv_path = audit_log_path()
    if not csv_path.exists():
        return []
    frame = pd.read_csv(csv_path)
    recent = frame.tail(limit).iloc[::-1]
    return recent.to_dict(orient="records")
