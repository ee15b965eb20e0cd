"""
Build the catalogue client, embedder, vector store and services from config.
"""

from __future__ import annotations

import logging
import os

from pharmassist.utils.config_loader import AppConfig

logger = logging.getLogger(__name__)


def build_catalog_client(cfg: AppConfig):
    from pharmassist.integrations.clients.real_http.unified_products import UnifiedProductsClient

    return UnifiedProductsClient(
        base_url=cfg.catalog.base_url,
        token=os.environ.get(cfg.catalog.token_env, ""),
        timeout_s=cfg.catalog.timeout_s,
        page_delay_s=cfg.catalog.page_delay_s,
    )


def build_embedder(cfg: AppConfig):
    from pharmassist.rag.embeddings.embedder import (
        GeminiEmbedder,
        HashEmbedder,
        OllamaEmbedder,
        OpenAIEmbedder,
        SentenceTransformersEmbedder,
    )

    p = cfg.embeddings.provider.lower()
    logger.info("Initializing embedder with provider: %s", p)
    if p in ("hash", "none"):
        return HashEmbedder(vector_size=cfg.embeddings.vector_size)
    if p == "gemini":
        return GeminiEmbedder(
            model=cfg.embeddings.model,
            api_key_env=cfg.embeddings.api_key_env,
            output_dimensionality=cfg.embeddings.vector_size,
        )
    if p == "openai":
        return OpenAIEmbedder(
            model=cfg.embeddings.model,
            api_key_env=cfg.embeddings.api_key_env,
            vector_size=cfg.embeddings.vector_size,
        )
    if p == "sentence_transformers":
        return SentenceTransformersEmbedder(model_name=cfg.embeddings.model)
    if p == "ollama":
        return OllamaEmbedder(model=cfg.embeddings.model, base_url=cfg.embeddings.base_url)
    raise ValueError(f"Unknown embeddings provider: {cfg.embeddings.provider}")


def build_vector_store(cfg: AppConfig):
    from pharmassist.rag.integrations.qdrant_store import QdrantVectorStore

    p = cfg.vector_store.provider.lower()
    coll = cfg.vector_store.collection
    logger.info("Initializing vector store with provider: %s (collection=%s)", p, coll)
    if p == "qdrant_memory":
        return QdrantVectorStore.in_memory(collection=coll)
    if p == "qdrant_local":
        return QdrantVectorStore.from_local_path(collection=coll, path=cfg.vector_store.path)
    if p == "qdrant_http":
        return QdrantVectorStore.from_http(
            collection=coll,
            url=cfg.vector_store.url,
            api_key=os.environ.get(cfg.vector_store.api_key_env) or None,
        )
    raise ValueError(f"Unknown vector_store.provider: {cfg.vector_store.provider}")


def build_ingestor(cfg: AppConfig, *, embedder=None, store=None, catalog=None):
    from pharmassist.rag.ingest import BatchIngestor

    return BatchIngestor(
        catalog or build_catalog_client(cfg),
        embedder or build_embedder(cfg),
        store or build_vector_store(cfg),
        item_delay_s=cfg.ingestion.item_delay_s,
        default_max_items=cfg.ingestion.default_max_items,
    )


def build_retrieval(cfg: AppConfig, *, embedder=None, store=None):
    from pharmassist.rag.query import RetrievalService

    return RetrievalService(
        embedder or build_embedder(cfg),
        store or build_vector_store(cfg),
        scan_limit=cfg.retrieval.scan_limit,
        category_limit=cfg.retrieval.category_limit,
    )


def build_admin_notifier(cfg: AppConfig):
    """Slack notifier when a channel and bot token are configured, else None (notifications stay local)."""
    channel = cfg.notifications.slack_channel
    token = os.environ.get(cfg.notifications.slack_token_env)
    if not channel or not token:
        logger.info("Slack admin notifications disabled (channel=%s token_set=%s)", channel, bool(token))
        return None

    from pharmassist.integrations.slack.admin_notifier import SlackAdminNotifier

    return SlackAdminNotifier(token=token, channel=channel)


def build_tool_context(cfg: AppConfig, *, embedder=None, store=None):
    from pharmassist.integrations.policy import NotifyAdminService
    from pharmassist.tools import ToolContext

    return ToolContext(
        retrieval=build_retrieval(cfg, embedder=embedder, store=store),
        notify_admin=NotifyAdminService(notifier=build_admin_notifier(cfg)),
        low_stock_threshold=cfg.retrieval.low_stock_threshold,
    )
