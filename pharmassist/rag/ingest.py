"""
Ingest catalogue products into the vector store.

Flow per product: format text -> embed -> normalise payload -> upsert.
Products are processed one at a time; the inter-item delay is the only rate
limit on the embedding provider. A failing product becomes a failed outcome
and the batch carries on.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pharmassist.error_handler import EmbeddingError
from pharmassist.integrations.contracts.product_catalogues import ProductRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestOutcome:
    id: str
    product_name: str
    success: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "productName": self.product_name, "success": self.success, "message": self.message}


@dataclass
class BatchSummary:
    total_products: int = 0
    successful: int = 0
    failed: int = 0
    results: List[IngestOutcome] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalProducts": self.total_products,
            "successful": self.successful,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
            "message": self.message,
        }


def to_number(value: Any, *, integer: bool = False) -> float | int:
    """Coerce a catalogue value to a number; anything unparseable (or NaN) becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        num = float(str(value).strip().replace(",", "")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(num) or math.isinf(num):
        return 0
    return int(num) if integer else num


def normalize_payload(record: ProductRecord, now: Optional[datetime] = None) -> Dict[str, Any]:
    now_iso = (now or datetime.now(timezone.utc)).isoformat()
    payload: Dict[str, Any] = {
        "product_name": str(record.product_name or ""),
        "price": float(to_number(record.price)),
        "quantity": int(to_number(record.quantity, integer=True)),
        "category_name": str(record.category_name or ""),
        "category_slug": str(record.category_slug or ""),
        "category_id": int(to_number(record.category_id, integer=True)),
        "price_updated_at": record.price_updated_at or now_iso,
        "ingested_at": now_iso,
    }
    if record.barcode:
        payload["barcode"] = str(record.barcode)
    return payload


class BatchIngestor:
    def __init__(
        self,
        catalog,
        embedder,
        store,
        *,
        item_delay_s: float = 0.2,
        default_max_items: int = 5,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.catalog = catalog
        self.embedder = embedder
        self.store = store
        self.item_delay_s = item_delay_s
        self.default_max_items = default_max_items
        self._sleep = sleep
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _vector_size(self) -> int:
        try:
            return self.embedder.dim
        except EmbeddingError:
            # Providers like Ollama only learn their dimension from a first embedding.
            logger.info("Embedding dimension unknown; embedding a sample text to learn it")
            return len(self.embedder.embed_query("dimension check"))

    def initialize(self) -> None:
        """Make sure the target collection exists. Failure here is fatal."""
        logger.info("Initializing ingestor (collection check)")
        try:
            self.store.ensure_collection(vector_size=self._vector_size())
        except Exception as e:
            logger.error("Failed to initialize ingestor: %s", e)
            raise
        logger.info("Ingestor initialized")

    def _embed_and_store(self, record: ProductRecord, point_id: int | str) -> None:
        text = self.catalog.format_for_embedding(record)
        vector = self.embedder.embed_query(text)
        payload = normalize_payload(record)
        logger.debug("Payload for %s: price=%s qty=%s", record.product_name, payload["price"], payload["quantity"])
        self.store.upsert(ids=[point_id], vectors=[vector], payloads=[payload])

    def ingest_all(self, max_items: Optional[int] = None) -> BatchSummary:
        if max_items is None:
            max_items = self.default_max_items
        logger.info("Starting batch ingestion (max: %s)", max_items or "unlimited")
        products = self.catalog.fetch_all(max_items)
        logger.info("Fetched %d products from catalogue", len(products))

        if not products:
            return BatchSummary(message="No products found in the catalog")

        summary = BatchSummary(total_products=len(products))
        base_ms = self._now_ms()
        for i, product in enumerate(products):
            logger.info("Ingesting product %d/%d: %s", i + 1, len(products), product.product_name)
            point_id = base_ms + i
            try:
                self._embed_and_store(product, point_id)
            except Exception as e:
                logger.error("Error ingesting %s: %s", product.product_name, e)
                summary.results.append(
                    IngestOutcome(
                        id=f"unknown_{self._now_ms()}",
                        product_name=product.product_name,
                        success=False,
                        message=f"Failed to ingest: {e}",
                    )
                )
                summary.failed += 1
            else:
                summary.results.append(
                    IngestOutcome(
                        id=str(point_id),
                        product_name=product.product_name,
                        success=True,
                        message=f"Successfully ingested: {product.product_name}",
                    )
                )
                summary.successful += 1

            if i < len(products) - 1 and self.item_delay_s > 0:
                self._sleep(self.item_delay_s)

        summary.message = f"Ingestion complete: {summary.successful} successful, {summary.failed} failed"
        logger.info("Batch ingestion completed: %d/%d successful", summary.successful, summary.total_products)
        return summary

    def ingest_by_query(self, query: str) -> IngestOutcome:
        logger.info("Starting ingestion for query: %s", query)
        try:
            product = self.catalog.search(query)
            point_id = f"{product.product_name}_{self._now_ms()}"
            self._embed_and_store(product, point_id)
        except Exception as e:
            logger.error("Error ingesting product by query %r: %s", query, e)
            return IngestOutcome(
                id=f"unknown_{self._now_ms()}",
                product_name="Unknown",
                success=False,
                message=f"Failed to ingest product: {e}",
            )

        logger.info("Product stored in vector store: %s", point_id)
        return IngestOutcome(
            id=point_id,
            product_name=product.product_name,
            success=True,
            message=f"Successfully ingested product: {product.product_name}",
        )
