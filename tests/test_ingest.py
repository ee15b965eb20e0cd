import math

import pytest

from pharmassist.error_handler import EmbeddingError, NotFoundError, StoreError
from pharmassist.integrations.clients.real_http.unified_products import UnifiedProductsClient
from pharmassist.integrations.contracts.product_catalogues import ProductRecord
from pharmassist.rag.embeddings.embedder import HashEmbedder
from pharmassist.rag.ingest import BatchIngestor, normalize_payload, to_number


class DummyCatalog:
    format_for_embedding = staticmethod(UnifiedProductsClient.format_for_embedding)

    def __init__(self, records):
        self.records = records
        self.max_items_seen = []

    def fetch_all(self, max_items=0):
        self.max_items_seen.append(max_items)
        return self.records[:max_items] if max_items else list(self.records)

    def search(self, query):
        for r in self.records:
            if query.lower() in r.product_name.lower():
                return r
        raise NotFoundError(f"Product not found for query: {query}")


class FailingOnEmbedder(HashEmbedder):
    def __init__(self, bad_name):
        super().__init__(vector_size=8)
        self.bad_name = bad_name

    def embed_query(self, text):
        if f"Product: {self.bad_name}" in text:
            raise EmbeddingError("provider rejected input")
        return super().embed_query(text)


class DummyStore:
    def __init__(self):
        self.upserts = []
        self.collection_sizes = []

    def ensure_collection(self, vector_size):
        self.collection_sizes.append(vector_size)

    def upsert(self, *, ids, vectors, payloads):
        self.upserts.append((ids, vectors, payloads))


def _records(*names):
    return [ProductRecord(product_name=n, price="45.50", quantity="7", category_name="Pain Relief") for n in names]


def _ingestor(catalog, embedder=None, store=None, sleeps=None):
    return BatchIngestor(
        catalog,
        embedder or HashEmbedder(vector_size=8),
        store or DummyStore(),
        item_delay_s=0.2,
        sleep=(sleeps.append if sleeps is not None else lambda s: None),
        clock=lambda: 1700000000.0,
    )


def test_initialize_creates_collection_with_embedder_dim():
    store = DummyStore()
    _ingestor(DummyCatalog([]), store=store).initialize()
    assert store.collection_sizes == [8]


def test_initialize_reraises_store_failure():
    class BrokenStore(DummyStore):
        def ensure_collection(self, vector_size):
            raise StoreError("qdrant unreachable")

    with pytest.raises(StoreError):
        _ingestor(DummyCatalog([]), store=BrokenStore()).initialize()


def test_ingest_all_keeps_going_after_a_failed_item():
    store = DummyStore()
    ingestor = _ingestor(DummyCatalog(_records("Panadol", "Bad Pill", "Vitamin C")), FailingOnEmbedder("Bad Pill"), store)

    summary = ingestor.ingest_all(max_items=5)

    assert (summary.total_products, summary.successful, summary.failed) == (3, 2, 1)
    assert [r.product_name for r in summary.results] == ["Panadol", "Bad Pill", "Vitamin C"]
    assert [r.success for r in summary.results] == [True, False, True]
    assert summary.results[1].id.startswith("unknown_")
    assert summary.results[1].message == "Failed to ingest: provider rejected input"
    assert summary.message == "Ingestion complete: 2 successful, 1 failed"
    assert len(store.upserts) == 2


def test_ingest_all_ids_are_timestamp_plus_position():
    store = DummyStore()
    summary = _ingestor(DummyCatalog(_records("A", "B")), store=store).ingest_all()

    assert [r.id for r in summary.results] == ["1700000000000", "1700000000001"]
    assert [u[0][0] for u in store.upserts] == [1700000000000, 1700000000001]


def test_ingest_all_stores_numeric_payload():
    store = DummyStore()
    _ingestor(DummyCatalog(_records("Panadol")), store=store).ingest_all()

    payload = store.upserts[0][2][0]
    assert payload["price"] == 45.5
    assert payload["quantity"] == 7
    assert payload["product_name"] == "Panadol"


def test_ingest_all_sleeps_between_items_only():
    sleeps = []
    _ingestor(DummyCatalog(_records("A", "B", "C")), sleeps=sleeps).ingest_all()
    assert sleeps == [0.2, 0.2]


def test_ingest_all_empty_catalog():
    summary = _ingestor(DummyCatalog([])).ingest_all()

    assert summary.total_products == 0
    assert summary.results == []
    assert summary.message == "No products found in the catalog"


def test_ingest_all_passes_max_items_to_catalog():
    catalog = DummyCatalog(_records("A", "B", "C"))
    summary = _ingestor(catalog).ingest_all(max_items=2)
    assert catalog.max_items_seen == [2]
    assert summary.total_products == 2


def test_ingest_by_query_success_uses_name_based_id():
    store = DummyStore()
    outcome = _ingestor(DummyCatalog(_records("Panadol Extra")), store=store).ingest_by_query("panadol")

    assert outcome.success is True
    assert outcome.id == "Panadol Extra_1700000000000"
    assert outcome.product_name == "Panadol Extra"
    assert store.upserts[0][0] == ["Panadol Extra_1700000000000"]


def test_ingest_by_query_not_found_returns_failed_outcome():
    outcome = _ingestor(DummyCatalog(_records("Panadol"))).ingest_by_query("insulin")

    assert outcome.success is False
    assert outcome.product_name == "Unknown"
    assert outcome.message.startswith("Failed to ingest product:")
    assert outcome.to_dict()["productName"] == "Unknown"


@pytest.mark.parametrize(
    "value,integer,expected",
    [
        ("45.50", False, 45.5),
        ("1,250", False, 1250.0),
        (12, True, 12),
        ("7.9", True, 7),
        ("abc", False, 0),
        (None, False, 0),
        (float("nan"), False, 0),
        (True, True, 0),
    ],
)
def test_to_number(value, integer, expected):
    assert to_number(value, integer=integer) == expected


def test_normalize_payload_defaults_and_barcode():
    rec = ProductRecord(product_name="X", price=None, quantity="n/a", category_id="3", barcode="123")
    payload = normalize_payload(rec)

    assert payload["price"] == 0.0
    assert payload["quantity"] == 0
    assert payload["category_id"] == 3
    assert payload["barcode"] == "123"
    assert payload["price_updated_at"] == payload["ingested_at"]
    assert not math.isnan(payload["price"])


class LazyDimEmbedder:
    """Learns its dimension from the first embedding, like the Ollama provider."""

    def __init__(self):
        self._dim = None
        self.texts = []

    @property
    def dim(self):
        if self._dim is None:
            raise EmbeddingError("dim is not known until after first embedding call")
        return self._dim

    def embed_query(self, text):
        self.texts.append(text)
        self._dim = 3
        return [0.1, 0.2, 0.3]


def test_initialize_learns_dim_from_a_sample_embedding():
    store = DummyStore()
    embedder = LazyDimEmbedder()

    _ingestor(DummyCatalog([]), embedder=embedder, store=store).initialize()

    assert store.collection_sizes == [3]
    assert len(embedder.texts) == 1


def test_ingest_all_uses_configured_default_max_items():
    catalog = DummyCatalog(_records("A", "B", "C"))
    ingestor = BatchIngestor(catalog, HashEmbedder(vector_size=8), DummyStore(), default_max_items=2, sleep=lambda s: None)

    summary = ingestor.ingest_all()

    assert catalog.max_items_seen == [2]
    assert summary.total_products == 2
