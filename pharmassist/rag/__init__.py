"""
Catalogue RAG pipeline (ingestion + retrieval).

This package wires together:
- rag.embeddings (embedding providers)
- rag.integrations (Qdrant)
- products fetched by integrations.clients.real_http.unified_products
"""

from .ingest import BatchIngestor, BatchSummary, IngestOutcome
from .query import (
    RetrievalService,
    RetrievedRecord,
    SearchResult,
    filter_by_availability,
    filter_by_price_range,
    sort_records,
)

__all__ = [
    "BatchIngestor",
    "BatchSummary",
    "IngestOutcome",
    "RetrievalService",
    "RetrievedRecord",
    "SearchResult",
    "filter_by_availability",
    "filter_by_price_range",
    "sort_records",
]
