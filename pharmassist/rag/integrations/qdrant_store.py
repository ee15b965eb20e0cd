"""
Qdrant vector store wrapper (RAG namespace).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from qdrant_client import QdrantClient
from qdrant_client.http import models as qm

from pharmassist.error_handler import StoreError

logger = logging.getLogger(__name__)

PointId = Union[int, str]


def to_point_id(_id: PointId) -> PointId:
    """
    Qdrant only accepts unsigned integers or UUIDs as point IDs.
    Numeric IDs are stored as integers; any other string becomes a deterministic UUIDv5.
    """
    if isinstance(_id, int) and _id >= 0:
        return _id
    text = str(_id)
    if text.isdigit():
        return int(text)
    return str(uuid.uuid5(uuid.NAMESPACE_URL, text))


def _hit(point_id: Any, score: Optional[float], payload: Optional[dict]) -> Dict[str, Any]:
    payload = payload or {}
    stable_id = payload.get("id") if isinstance(payload, dict) else None
    return {
        # Prefer the original product id (stored in payload during ingest)
        # over the Qdrant point id.
        "id": str(stable_id if stable_id is not None else point_id),
        "score": float(score or 0.0),
        "payload": payload,
    }


@dataclass
class QdrantVectorStore:
    collection: str
    client: QdrantClient

    @classmethod
    def from_local_path(cls, *, collection: str, path: str) -> "QdrantVectorStore":
        client = QdrantClient(path=path)
        return cls(collection=collection, client=client)

    @classmethod
    def from_http(
        cls,
        *,
        collection: str,
        url: Optional[str] = None,
        host: str = "localhost",
        port: int = 6333,
        api_key: Optional[str] = None,
    ) -> "QdrantVectorStore":
        if url:
            client = QdrantClient(url=url, api_key=api_key)
        else:
            client = QdrantClient(host=host, port=port, api_key=api_key)
        return cls(collection=collection, client=client)

    @classmethod
    def in_memory(cls, *, collection: str) -> "QdrantVectorStore":
        return cls(collection=collection, client=QdrantClient(":memory:"))

    def _collection_exists(self) -> bool:
        try:
            collections = self.client.get_collections()
            return self.collection in {c.name for c in collections.collections}
        except Exception as e:
            # Some hosted endpoints do not expose listing; fall back to probing.
            logger.warning("get_collections failed (%s); probing collection directly", e)
            try:
                self.client.get_collection(self.collection)
                return True
            except Exception:
                return False

    def ensure_collection(self, vector_size: int) -> None:
        if self._collection_exists():
            logger.info("Qdrant collection '%s' already exists", self.collection)
            return
        try:
            self.client.create_collection(
                collection_name=self.collection,
                vectors_config=qm.VectorParams(size=vector_size, distance=qm.Distance.COSINE),
            )
        except Exception as e:
            raise StoreError(f"Could not create Qdrant collection '{self.collection}': {e}") from e
        logger.info("Created Qdrant collection '%s' (size=%d, cosine)", self.collection, vector_size)

    def upsert(
        self,
        *,
        ids: List[PointId],
        vectors: List[List[float]],
        payloads: List[dict],
    ) -> None:
        points = [
            qm.PointStruct(id=to_point_id(_id), vector=vec, payload={**payload, "id": str(_id)})
            for _id, vec, payload in zip(ids, vectors, payloads, strict=True)
        ]
        try:
            self.client.upsert(collection_name=self.collection, points=points, wait=True)
        except Exception as e:
            raise StoreError(f"Upsert into '{self.collection}' failed: {e}") from e
        logger.debug("Upserted %d point(s) into '%s'", len(points), self.collection)

    def search(
        self,
        *,
        query_vector: List[float],
        limit: int = 5,
        filter: qm.Filter | None = None,
    ) -> list[dict[str, Any]]:
        """
        Search for similar vectors in Qdrant.

        Args:
            query_vector: The query embedding vector
            limit: Maximum number of results to return
            filter: Optional Qdrant filter for payload filtering
        """
        try:
            res = self.client.query_points(
                collection_name=self.collection,
                query=query_vector,
                limit=limit,
                query_filter=filter,
                with_payload=True,
            )
        except Exception as e:
            raise StoreError(f"Search in '{self.collection}' failed: {e}") from e
        return [_hit(p.id, p.score, p.payload) for p in res.points]

    def retrieve(self, _id: PointId) -> Optional[dict[str, Any]]:
        """Point lookup by the id used at ingest time. Returns None when absent."""
        try:
            records = self.client.retrieve(
                collection_name=self.collection,
                ids=[to_point_id(_id)],
                with_payload=True,
            )
        except Exception as e:
            raise StoreError(f"Retrieve from '{self.collection}' failed: {e}") from e
        if not records:
            return None
        # Exact id match, not a similarity ranking.
        return _hit(records[0].id, 1.0, records[0].payload)

    def count(self) -> int:
        try:
            return int(self.client.count(collection_name=self.collection, exact=True).count)
        except Exception as e:
            raise StoreError(f"Count on '{self.collection}' failed: {e}") from e
