"""
Embedding backends used by the ingestion and retrieval pipeline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from pharmassist.error_handler import EmbeddingError


class Embedder(Protocol):
    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]: ...

    def embed_query(self, text: str) -> List[float]: ...

    @property
    def dim(self) -> int: ...


def _check_vector(v, provider: str) -> List[float]:
    if not isinstance(v, (list, tuple)) or len(v) == 0:
        raise EmbeddingError(f"Empty embedding returned from {provider}")
    return [float(x) for x in v]


def _hash_string(text: str) -> int:
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


@dataclass
class HashEmbedder:
    """
    Deterministic pseudo-embedding derived from a string hash.

    No network access; the same text always maps to the same unit vector.
    Intended for offline runs and tests, not for meaningful similarity.
    """

    vector_size: int = 1536

    def __post_init__(self) -> None:
        if self.vector_size < 1:
            raise EmbeddingError(f"vector_size must be positive, got {self.vector_size}")

    @property
    def dim(self) -> int:
        return self.vector_size

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        h = _hash_string(text)
        v = [math.sin(h + i) * math.cos(h + i + 1) for i in range(self.vector_size)]
        norm = math.sqrt(sum(x * x for x in v))
        if norm == 0:
            return v
        return [x / norm for x in v]


@dataclass
class SentenceTransformersEmbedder:
    model_name: str

    def __post_init__(self) -> None:
        from sentence_transformers import SentenceTransformer

        self._model = SentenceTransformer(self.model_name)
        self._dim = int(self._model.get_sentence_embedding_dimension())

    @property
    def dim(self) -> int:
        return self._dim

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        vectors = self._model.encode(list(texts), normalize_embeddings=True, show_progress_bar=False)
        return [_check_vector(v.tolist(), "sentence-transformers") for v in vectors]

    def embed_query(self, text: str) -> List[float]:
        v = self._model.encode([text], normalize_embeddings=True, show_progress_bar=False)[0]
        return _check_vector(v.tolist(), "sentence-transformers")


@dataclass
class OpenAIEmbedder:
    model: str
    api_key_env: str = "OPENAI_API_KEY"
    vector_size: int | None = None

    def __post_init__(self) -> None:
        import os

        from openai import OpenAI

        key = os.environ.get(self.api_key_env)
        if not key:
            raise EmbeddingError(f"{self.api_key_env} is not set")
        self._client = OpenAI(api_key=key)
        self._dim: int | None = self.vector_size

    @property
    def dim(self) -> int:
        if self._dim is None:
            raise EmbeddingError("OpenAIEmbedder.dim is not known until after first embedding call")
        return self._dim

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        kwargs = {"model": self.model, "input": list(texts)}
        if self.vector_size:
            kwargs["dimensions"] = self.vector_size
        resp = self._client.embeddings.create(**kwargs)
        vectors = [_check_vector(d.embedding, "OpenAI") for d in resp.data]
        if vectors and self._dim is None:
            self._dim = len(vectors[0])
        return vectors

    def embed_query(self, text: str) -> List[float]:
        return self.embed_texts([text])[0]


@dataclass
class OllamaEmbedder:
    """
    Ollama embeddings via local HTTP API.

    Requires an Ollama server running (default: http://localhost:11434).
    Uses POST /api/embeddings, one prompt per request.
    """

    model: str
    base_url: str = "http://localhost:11434"
    timeout_s: float = 60.0

    def __post_init__(self) -> None:
        import requests

        self._requests = requests
        self._dim: int | None = None

    @property
    def dim(self) -> int:
        if self._dim is None:
            raise EmbeddingError("OllamaEmbedder.dim is not known until after first embedding call")
        return self._dim

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        r = self._requests.post(
            f"{self.base_url.rstrip('/')}/api/embeddings",
            json={"model": self.model, "prompt": text},
            timeout=self.timeout_s,
        )
        r.raise_for_status()
        data = r.json()
        v = _check_vector(data.get("embedding"), "Ollama")
        if self._dim is None:
            self._dim = len(v)
        return v


@dataclass
class GeminiEmbedder:
    """
    Google Gemini embeddings via google-genai (AI Studio).

    Requires env var with your API key, e.g. GEMINI_API_KEY (GOOGLE_API_KEY is
    accepted as a fallback).
    """

    model: str = "gemini-embedding-001"
    api_key_env: str = "GEMINI_API_KEY"
    output_dimensionality: int | None = 1536

    def __post_init__(self) -> None:
        import os

        from google import genai

        key = os.environ.get(self.api_key_env) or os.environ.get("GOOGLE_API_KEY")
        if not key:
            raise EmbeddingError(f"{self.api_key_env} is not set")
        self._client = genai.Client(api_key=key)
        self._dim: int | None = self.output_dimensionality

    @property
    def dim(self) -> int:
        if self._dim is None:
            raise EmbeddingError("GeminiEmbedder.dim is not known until after first embedding call")
        return self._dim

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        from google.genai import types

        config = None
        if self.output_dimensionality:
            config = types.EmbedContentConfig(output_dimensionality=self.output_dimensionality)
        resp = self._client.models.embed_content(model=self.model, contents=text, config=config)
        embeddings = resp.embeddings or []
        v = _check_vector(embeddings[0].values if embeddings else None, "Gemini")
        if self._dim is None:
            self._dim = len(v)
        return v
