"""Pytest fixtures shared by the supplier engine tests."""

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR))

from supplier_rag import auditing
from supplier_rag.providers import InMemoryContextProvider, InMemoryRecordProvider
from supplier_rag.records import Contract, DisruptionEvent, SupplierContext, SupplierRecord
from tests.test_data_fixtures import (
    contracts_r1,
    disruption_events,
    supplier_incomplete,
    supplier_r1,
    supplier_r2,
    supplier_r3,
)


@pytest.fixture(autouse=True)
def audit_dir(tmp_path, monkeypatch):
    """Keep audit CSVs out of the repository's reports directory."""

    reports = tmp_path / "audit_logs"
    monkeypatch.setattr(auditing, "REPORTS_DIR", reports)
    monkeypatch.delenv("SUPPLIER_RAG_CONFIG", raising=False)
    return reports


@pytest.fixture
def r1():
    return SupplierRecord(**supplier_r1)


@pytest.fixture
def r2():
    return SupplierRecord(**supplier_r2)


@pytest.fixture
def r3():
    return SupplierRecord(**supplier_r3)


@pytest.fixture
def incomplete():
    return SupplierRecord(**supplier_incomplete)


@pytest.fixture
def records(r1, r2, r3):
    return [r1, r2, r3]


@pytest.fixture
def provider(records):
    return InMemoryRecordProvider(records)


@pytest.fixture
def contracts():
    return [Contract.from_mapping(row) for row in contracts_r1]


@pytest.fixture
def events():
    return [DisruptionEvent.from_mapping(row) for row in disruption_events]


@pytest.fixture
def context(contracts, events):
    newest_first = sorted(contracts, key=lambda contract: contract.contract_date, reverse=True)
    return SupplierContext(contracts=tuple(newest_first), events=tuple(events))


@pytest.fixture
def context_provider(contracts, events):
    return InMemoryContextProvider(contracts, events)
