"""
Alternatives Service

Suggests in-stock substitutes for a medicine using semantic search over the catalogue.
"""

import logging
from typing import List, Optional

from pharmassist.rag.query import RetrievedRecord, filter_by_availability, sort_records

logger = logging.getLogger(__name__)


class AlternativesService:
    def __init__(self, retrieval):
        self.retrieval = retrieval

    def find(self, medicine_name: str, medicine_id: Optional[str] = None, limit: int = 5) -> List[RetrievedRecord]:
        logger.info("Finding alternatives for: %s (id=%s)", medicine_name, medicine_id)
        query = medicine_name
        if medicine_id:
            known = self.retrieval.get_by_id(medicine_id)
            if known is not None and known.category_name != "Unknown":
                query = f"{known.product_name} {known.category_name}"

        # Over-fetch so the medicine itself and out-of-stock items can be dropped.
        result = self.retrieval.search(query, limit + 1)
        name_key = medicine_name.strip().lower()
        candidates = [
            m
            for m in result.medicines
            if m.id != str(medicine_id) and m.product_name.strip().lower() != name_key
        ]
        available = filter_by_availability(candidates, min_quantity=1)
        return sort_records(available, "score", "desc")[:limit]
