import pytest
from fastapi.testclient import TestClient

from pharmassist.api.dependencies import get_ingestor, get_tool_context
from pharmassist.api.main import app
from pharmassist.error_handler import StoreError
from pharmassist.rag.ingest import BatchSummary, IngestOutcome
from pharmassist.rag.query import RetrievalService
from pharmassist.tools import ToolContext

HEADERS = {"X-API-KEY": "test-key"}


class DummyIngestor:
    def __init__(self):
        self.calls = []

    def ingest_all(self, max_items=5):
        self.calls.append(max_items)
        return BatchSummary(
            total_products=1,
            successful=1,
            results=[IngestOutcome("1700000000000", "Panadol", True, "Successfully ingested: Panadol")],
            message="Ingestion complete: 1 successful, 0 failed",
        )

    def ingest_by_query(self, query):
        return IngestOutcome("unknown_1", "Unknown", False, f"Failed to ingest product: Product not found for query: {query}")


class BrokenStore:
    def search(self, *, query_vector, limit=5, filter=None):
        raise StoreError("qdrant down")

    def retrieve(self, _id):
        raise StoreError("qdrant down")


@pytest.fixture
def ingestor():
    return DummyIngestor()


@pytest.fixture
def client(monkeypatch, store, embedder, ingestor):
    monkeypatch.setenv("API_KEYS", "other-key, test-key")
    ctx = ToolContext(retrieval=RetrievalService(embedder, store))
    app.dependency_overrides[get_tool_context] = lambda: ctx
    app.dependency_overrides[get_ingestor] = lambda: ingestor
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_is_public(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_missing_api_key_is_rejected(client):
    assert client.get("/tools").status_code == 401
    assert client.get("/tools", headers={"X-API-KEY": "wrong"}).status_code == 401


def test_list_tools(client):
    r = client.get("/tools", headers=HEADERS)
    assert r.status_code == 200
    assert len(r.json()["tools"]) == 6


def test_call_tool_returns_text(client):
    r = client.post(
        "/tools/LOG_PURCHASE",
        headers=HEADERS,
        json={
            "medicine_name": "Panadol",
            "medicine_id": "1",
            "customer_id": "c1",
            "purchase_date": "2025-01-01",
            "quantity": 1,
            "total_price": 45.5,
        },
    )
    assert r.status_code == 200
    assert r.json()["tool"] == "LOG_PURCHASE"
    assert "Log ID: LOG-" in r.json()["content"]


def test_unknown_tool_is_404(client):
    assert client.post("/tools/ORDER_PIZZA", headers=HEADERS, json={}).status_code == 404


def test_invalid_arguments_are_422(client):
    r = client.post("/tools/CHECK_STOCK", headers=HEADERS, json={})
    assert r.status_code == 422


def test_not_found_is_404(client):
    r = client.post("/tools/GET_MEDICINE_DETAILS", headers=HEADERS, json={"medicine_id": "999"})
    assert r.status_code == 404


def test_store_failure_is_502(monkeypatch, embedder):
    class FailingRetrieval(RetrievalService):
        def by_name(self, name, limit=5):
            raise StoreError("qdrant down")

    monkeypatch.setenv("API_KEYS", "test-key")
    ctx = ToolContext(retrieval=FailingRetrieval(embedder, BrokenStore()))
    app.dependency_overrides[get_tool_context] = lambda: ctx
    try:
        r = TestClient(app).post("/tools/GET_MEDICINE_DETAILS", headers=HEADERS, json={"medicine_name": "x"})
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 502


def test_ingest_passes_max_items(client, ingestor):
    r = client.post("/ingest", headers=HEADERS, json={"max_items": 3})

    assert r.status_code == 200
    assert r.json()["totalProducts"] == 1
    assert r.json()["results"][0]["productName"] == "Panadol"
    assert ingestor.calls == [3]


def test_ingest_without_body_uses_default(client, ingestor):
    assert client.post("/ingest", headers=HEADERS).status_code == 200
    assert ingestor.calls == [5]


def test_ingest_query_reports_failure_in_body(client):
    r = client.post("/ingest/query", headers=HEADERS, json={"query": "insulin"})
    assert r.status_code == 200
    assert r.json()["success"] is False
