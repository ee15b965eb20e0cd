"""
Embeddings utilities (RAG namespace).
"""

from .embedder import (
    Embedder,
    GeminiEmbedder,
    HashEmbedder,
    OllamaEmbedder,
    OpenAIEmbedder,
    SentenceTransformersEmbedder,
)

__all__ = [
    "Embedder",
    "GeminiEmbedder",
    "HashEmbedder",
    "OllamaEmbedder",
    "OpenAIEmbedder",
    "SentenceTransformersEmbedder",
]
