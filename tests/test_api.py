"""Test API endpoints.

Why we test this:
- Ensures FastAPI endpoints are accessible and return correct HTTP status codes
- Validates API contract: request/response structure matches expected format
- Verifies typed engine errors map to 404, 422 and 503 responses
- Verifies health check endpoint for monitoring and load balancers
"""

import importlib
import logging

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import get_supplier_engine
from supplier_rag.engine import SupplierEngine
from supplier_rag.errors import NO_DATA_MESSAGE
from supplier_rag.providers import InMemoryRecordProvider, RecordProvider


class OfflineProvider(RecordProvider):
    source = "offline share"

    async def _fetch(self):
        raise OSError("share unreachable")


@pytest.fixture
def client(records, incomplete, context_provider):
    engine = SupplierEngine(InMemoryRecordProvider([*records, incomplete]), context_provider=context_provider)
    app.dependency_overrides[get_supplier_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def offline_client():
    app.dependency_overrides[get_supplier_engine] = lambda: SupplierEngine(OfflineProvider())
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    """Test health check endpoint.

    Why: Orchestration systems use it to determine service availability.
    """
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_search_endpoint(client):
    response = client.get("/suppliers/search", params={"q": "cheap fast", "top_k": 2})
    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "cheap fast"
    assert len(data["results"]) == 2
    assert data["results"][0]["supplier"]["name"] == "Hoskote Packaging"
    assert data["results"][0]["relevance"] >= data["results"][1]["relevance"]


def test_best_endpoint(client):
    response = client.get("/suppliers/best")
    assert response.status_code == 200
    assert response.json()["name"] == "Peenya Castings"
    assert client.get("/suppliers/best", params={"criteria": "cheapest"}).json()["name"] == "Hoskote Packaging"


def test_analysis_endpoint(client):
    response = client.get("/suppliers/Hosur Plastics/analysis")
    assert response.status_code == 200
    data = response.json()
    assert data["supplier_overview"]["name"] == "Hosur Plastics"
    assert data["confidence_score"] == 95


def test_unknown_supplier_returns_404(client):
    response = client.get("/suppliers/Ghost Traders/analysis")
    assert response.status_code == 404


def test_insufficient_data_returns_422(client):
    """Why: absent verified fields must be reported, not scored as zero."""

    response = client.get("/predict/Hoskote Packaging")
    assert response.status_code == 422
    assert response.json()["field"] == "financial_condition"


def test_context_endpoint(client):
    response = client.get("/suppliers/Peenya Castings/context")
    assert response.status_code == 200
    data = response.json()
    assert data["recommendation"] == "APPROVE"
    assert data["risk_analysis"]["relevant_events"] == ["E-1"]


def test_compare_endpoint(client):
    response = client.get("/compare", params={"a": "Peenya Castings", "b": "Hosur Plastics"})
    assert response.status_code == 200
    data = response.json()
    assert data["winner"] == "Peenya Castings"
    assert data["detailed_comparison"]["score_diff"] == pytest.approx(32.1)


def test_predict_endpoint(client):
    response = client.get("/predict/Hosur Plastics")
    assert response.status_code == 200
    data = response.json()
    assert data["predicted_6month_trend"] == "Declining"
    assert data["confidence_basis"] == "heuristic"


def test_chat_endpoint(client):
    response = client.post("/chat", json={"query": "recommend the best supplier"})
    assert response.status_code == 200
    assert response.json()["grounded"] is True
    unanswerable = client.post("/chat", json={"query": "hi"}).json()
    assert unanswerable == {"query": "hi", "answer": NO_DATA_MESSAGE, "grounded": False}


def test_offline_dataset_returns_503(offline_client):
    assert offline_client.get("/suppliers/best").status_code == 503
    assert offline_client.post("/chat", json={"query": "best supplier"}).json()["answer"] == NO_DATA_MESSAGE


def test_audit_endpoint(client):
    client.get("/compare", params={"a": "Peenya Castings", "b": "Hosur Plastics"})
    events = client.get("/audit", params={"limit": 5}).json()
    assert events[0]["event_type"] == "supplier_comparison"


def test_importing_app_leaves_logging_alone(monkeypatch):
    """Why: logging is configured by the process entry point, not by importing the app."""

    import api.app as app_module

    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    importlib.reload(app_module)
    assert root.handlers == []
