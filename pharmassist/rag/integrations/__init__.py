"""
Vector store integrations for RAG (Qdrant).
"""

from .qdrant_store import QdrantVectorStore, to_point_id

__all__ = ["QdrantVectorStore", "to_point_id"]
