"""
Medicine retrieval: embed query, run vector search, map hits to records.
Also provides pure post-filters and sorting over already-fetched results.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

SORT_FIELDS = ("price", "score", "quantity")
SORT_ORDERS = ("asc", "desc")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _num(value: Any, default: float = 0) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(num) or math.isinf(num) else num


@dataclass
class RetrievedRecord:
    id: str
    product_name: str = "Unknown"
    price: float = 0.0
    quantity: int = 0
    category_name: str = "Unknown"
    category_slug: str = "unknown"
    category_id: int = 0
    price_updated_at: str = ""
    ingested_at: str = ""
    score: float = 0.0
    barcode: Optional[str] = None

    @classmethod
    def from_hit(cls, hit: Dict[str, Any]) -> "RetrievedRecord":
        """Map a raw store hit; missing payload fields fall back to defaults."""
        p = hit.get("payload") or {}
        now = _now_iso()
        return cls(
            id=str(hit.get("id")),
            product_name=p.get("product_name") or "Unknown",
            price=_num(p.get("price")),
            quantity=int(_num(p.get("quantity"))),
            category_name=p.get("category_name") or "Unknown",
            category_slug=p.get("category_slug") or "unknown",
            category_id=int(_num(p.get("category_id"))),
            price_updated_at=p.get("price_updated_at") or now,
            ingested_at=p.get("ingested_at") or now,
            score=_num(hit.get("score")),
            barcode=p.get("barcode"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SearchResult:
    query: str
    medicines: List[RetrievedRecord] = field(default_factory=list)
    execution_time_ms: float = 0.0

    @property
    def total_results(self) -> int:
        return len(self.medicines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "medicines": [m.to_dict() for m in self.medicines],
            "totalResults": self.total_results,
            "executionTime": round(self.execution_time_ms, 1),
        }


class RetrievalService:
    def __init__(
        self,
        embedder,
        store,
        *,
        scan_limit: int = 1000,
        category_limit: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.scan_limit = scan_limit
        self.category_limit = category_limit
        self._clock = clock

    def search(self, query: str, limit: int = 5) -> SearchResult:
        """
        Semantic search over ingested medicines.

        Never raises: embedding or store failures degrade to an empty result so a
        tool call reports "no results" instead of failing.
        """
        start = self._clock()
        logger.info("Searching for medicines: %r (limit: %d)", query, limit)
        try:
            qvec = self.embedder.embed_query(query)
            hits = self.store.search(query_vector=qvec, limit=limit)
            medicines = [RetrievedRecord.from_hit(h) for h in hits]
        except Exception as e:
            logger.error("Error searching medicines for %r: %s", query, e)
            return SearchResult(query=query, medicines=[], execution_time_ms=(self._clock() - start) * 1000)

        elapsed_ms = (self._clock() - start) * 1000
        logger.info("Search for %r returned %d result(s) in %.1f ms", query, len(medicines), elapsed_ms)
        return SearchResult(query=query, medicines=medicines, execution_time_ms=elapsed_ms)

    def by_name(self, name: str, limit: int = 5) -> SearchResult:
        return self.search(name, limit)

    def by_category(self, category: str, limit: Optional[int] = None) -> SearchResult:
        return self.search(f"medicines in {category} category", limit or self.category_limit)

    def by_recommendation(self, symptoms: Sequence[str], limit: int = 5) -> SearchResult:
        return self.search(", ".join(symptoms), limit)

    def get_by_id(self, medicine_id: str) -> Optional[RetrievedRecord]:
        """
        Look a medicine up by the id it was ingested with. Returns None if absent.

        Uses the store's point lookup when it has one; otherwise scans a broad
        zero-vector neighbourhood and matches ids client-side.
        """
        logger.info("Fetching medicine details for ID: %s", medicine_id)
        try:
            retrieve = getattr(self.store, "retrieve", None)
            if callable(retrieve):
                hit = retrieve(medicine_id)
            else:
                hits = self.store.search(query_vector=[0.0] * self.embedder.dim, limit=self.scan_limit)
                hit = next((h for h in hits if str(h.get("id")) == str(medicine_id)), None)
        except Exception as e:
            logger.error("Error fetching medicine %s: %s", medicine_id, e)
            return None

        if hit is None:
            logger.info("Medicine not found: %s", medicine_id)
            return None
        return RetrievedRecord.from_hit(hit)


def filter_by_price_range(
    records: Sequence[RetrievedRecord],
    min_price: float = 0,
    max_price: float = math.inf,
) -> List[RetrievedRecord]:
    return [r for r in records if min_price <= r.price <= max_price]


def filter_by_availability(records: Sequence[RetrievedRecord], min_quantity: int = 1) -> List[RetrievedRecord]:
    return [r for r in records if r.quantity >= min_quantity]


def sort_records(
    records: Sequence[RetrievedRecord],
    field: str = "score",
    order: str = "desc",
) -> List[RetrievedRecord]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by {field!r}; expected one of {SORT_FIELDS}")
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order {order!r}; expected 'asc' or 'desc'")
    return sorted(records, key=lambda r: float(getattr(r, field)), reverse=order == "desc")
