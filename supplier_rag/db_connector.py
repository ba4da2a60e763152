"""Relational store access for supplier profiles, contract history and events.

The application shell keeps user-entered state (decisions, chats, reviews)
in PostgreSQL. The engine only needs read access to three tables plus an
append-only audit table, all declared here with SQLAlchemy Core.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

import pandas as pd
from dotenv import load_dotenv
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
)
from sqlalchemy.engine import Engine


LOGGER = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "supplier_rag")
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "postgres")

metadata = MetaData()

suppliers_table = Table(
    "suppliers",
    metadata,
    Column("supplier_id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("location", String(128)),
    Column("category", String(128)),
    Column("payment_terms", String(255)),
    Column("traffic_connections", String(255)),
    Column("business_results", String(255)),
    Column("price_per_unit", Float),
    Column("delivery_time_days", Float),
    Column("quantity_capacity", Float),
    Column("number_of_employees", Float),
    Column("quality_score", Float),
    Column("serviceability", Float),
    Column("reputation", Float),
    Column("flexibility", Float),
    Column("financial_condition", Float),
    Column("asset_condition", Float),
)

contracts_table = Table(
    "contracts",
    metadata,
    Column("contract_id", String(64), primary_key=True),
    Column("supplier_id", String(64), index=True),
    Column("contract_date", String(32)),
    Column("contract_value_inr", Float),
    Column("on_time_delivery_pct", Float),
    Column("defect_rate_pct", Float),
    Column("esg_score", Float),
    Column("geo_risk_score", Float),
    Column("financial_risk_score", Float),
    Column("ai_score", Float),
    Column("human_score", Float),
)

events_table = Table(
    "disruption_events",
    metadata,
    Column("event_id", String(64), primary_key=True),
    Column("event_type", String(128)),
    Column("severity", String(32)),
    Column("affected_cities", JSON),
    Column("start_date", String(32)),
    Column("description", String(1024)),
)

audit_table = Table(
    "audit_events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_type", String(128)),
    Column("payload", JSON),
    Column("created_at", DateTime(timezone=True)),
)


def database_url() -> str:
    """Return ``DATABASE_URL`` or build a PostgreSQL URL from the ``DB_*`` variables."""

    return os.getenv("DATABASE_URL") or (
        f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )


def get_engine(url: Optional[str] = None, echo: bool = False) -> Engine:
    """Instantiate a SQLAlchemy engine for the supplier store."""

    return create_engine(url or database_url(), echo=echo, future=True)


@lru_cache(maxsize=4)
def _cached_engine(url: str) -> Engine:
    return get_engine(url)


def shared_engine() -> Engine:
    """Return one process-wide engine per database URL."""

    return _cached_engine(database_url())


def initialize_database(engine: Optional[Engine] = None) -> None:
    """Create the supplier, contract, event and audit tables if missing."""

    engine = engine or get_engine()
    metadata.create_all(engine)
    LOGGER.info("Supplier store tables ready on %s", engine.url.render_as_string(hide_password=True))


def fetch_supplier_rows(engine: Engine) -> List[Dict[str, Any]]:
    """Return every supplier profile ordered by ``supplier_id``."""

    query = select(suppliers_table).order_by(suppliers_table.c.supplier_id)
    with engine.connect() as conn:
        rows = conn.execute(query).mappings().all()
    return [dict(row) for row in rows]


def fetch_contract_rows(engine: Engine, supplier_id: str, limit: int = 20) -> List[Dict[str, Any]]:
    """Return the most recent contracts for one supplier, newest first."""

    query = (
        select(contracts_table)
        .where(contracts_table.c.supplier_id == supplier_id)
        .order_by(contracts_table.c.contract_date.desc())
        .limit(limit)
    )
    with engine.connect() as conn:
        rows = conn.execute(query).mappings().all()
    return [dict(row) for row in rows]


def fetch_event_rows(engine: Engine, limit: int = 100) -> List[Dict[str, Any]]:
    query = select(events_table).order_by(events_table.c.start_date.desc()).limit(limit)
    with engine.connect() as conn:
        rows = conn.execute(query).mappings().all()
    return [dict(row) for row in rows]


def insert_rows(engine: Engine, table: Table, rows: List[Dict[str, Any]]) -> None:
    with engine.begin() as conn:
        conn.execute(insert(table), rows)


def write_audit_event(event_type: str, payload: Dict[str, Any], engine: Optional[Engine] = None) -> None:
    """Insert one audit event; callers decide how to handle SQLAlchemy errors."""

    event = {
        "event_type": event_type,
        "payload": payload,
        "created_at": pd.Timestamp.now(tz="UTC").to_pydatetime(),
    }
    with (engine or shared_engine()).begin() as conn:
        conn.execute(insert(audit_table), [event])
