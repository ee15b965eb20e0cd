"""Shared fixtures: a fake catalogue API, an in-memory Qdrant store and a hash embedder."""

import httpx
import pytest

from pharmassist.integrations.clients.real_http.unified_products import UnifiedProductsClient
from pharmassist.rag.embeddings.embedder import HashEmbedder
from pharmassist.rag.integrations.qdrant_store import QdrantVectorStore

BASE_URL = "https://catalog.test/api"


def product(name, price="100.00", quantity=10, category="Pain Relief", **extra):
    row = {
        "product_name": name,
        "price": price,
        "quantity": quantity,
        "category_name": category,
        "category_slug": category.lower().replace(" ", "-"),
        "category_id": 3,
        "price_updated_at": "2025-01-01T00:00:00Z",
    }
    row.update(extra)
    return row


def page_body(rows, page, has_next):
    return {
        "success": True,
        "data": {
            "current_page": page,
            "data": rows,
            "next_page_url": f"{BASE_URL}/products/unified?page={page + 1}" if has_next else None,
            "per_page": len(rows),
            "total": None,
        },
    }


class FakeCatalogueAPI:
    """Serves pre-built pages by page number and records every request."""

    def __init__(self, pages):
        # pages: {page_number: response body dict, or an int status code to fail with}
        self.pages = pages
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        page = int(request.url.params.get("page", "1"))
        body = self.pages.get(page, page_body([], page, has_next=False))
        if isinstance(body, int):
            return httpx.Response(body, json={"message": "error"})
        return httpx.Response(200, json=body)

    def client(self, **kwargs):
        http_client = httpx.Client(transport=httpx.MockTransport(self.handler))
        kwargs.setdefault("sleep", lambda s: None)
        return UnifiedProductsClient(base_url=BASE_URL, token="t0k", http_client=http_client, **kwargs)


@pytest.fixture
def embedder():
    return HashEmbedder(vector_size=16)


@pytest.fixture
def store(embedder):
    s = QdrantVectorStore.in_memory(collection="test_meds")
    s.ensure_collection(vector_size=embedder.dim)
    return s
