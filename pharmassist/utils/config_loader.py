"""
PharmAssist configuration loader (catalogue, embeddings, vector store, ingestion, retrieval).

This module loads config/pharmassist_config.yml and validates it with Pydantic.
Secrets are never stored in the YAML file; only the names of the environment
variables that hold them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "pharmassist_config.yml"


class CatalogConfig(BaseModel):
    base_url: str = "https://cc.medplusnig.com/api"
    token_env: str = "BEARER_TOKEN"
    timeout_s: float = Field(default=30.0, gt=0)
    page_delay_s: float = Field(default=0.5, ge=0.0)


class EmbeddingsConfig(BaseModel):
    provider: Literal["hash", "none", "gemini", "openai", "sentence_transformers", "ollama"] = "hash"
    model: str = "gemini-embedding-001"
    vector_size: int = Field(default=1536, ge=1, le=65536)
    api_key_env: str = "GEMINI_API_KEY"
    base_url: str = "http://localhost:11434"


class VectorStoreConfig(BaseModel):
    provider: Literal["qdrant_local", "qdrant_http", "qdrant_memory"] = "qdrant_http"
    collection: str = "pharm_cluster"
    path: str = "data/qdrant"
    url: Optional[str] = "http://localhost:6333"
    api_key_env: str = "QDRANT_KEY"


class IngestionConfig(BaseModel):
    default_max_items: int = Field(default=5, ge=0)
    item_delay_s: float = Field(default=0.2, ge=0.0)


class RetrievalConfig(BaseModel):
    top_k: int = Field(default=5, ge=1, le=100)
    category_limit: int = Field(default=10, ge=1, le=100)
    scan_limit: int = Field(default=1000, ge=1)
    low_stock_threshold: int = Field(default=10, ge=0)


class NotificationsConfig(BaseModel):
    slack_channel: Optional[str] = None
    slack_token_env: str = "SLACK_BOT_TOKEN"


class AppConfig(BaseModel):
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    embeddings: EmbeddingsConfig = Field(default_factory=EmbeddingsConfig)
    vector_store: VectorStoreConfig = Field(default_factory=VectorStoreConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)


# Deployment environment variables mapped onto config keys.
_ENV_OVERRIDES = {
    "UNIFIED_PRODUCTS_BASE_URL": ("catalog", "base_url"),
    "EMBEDDING_PROVIDER": ("embeddings", "provider"),
    "EMBEDDING_VECTOR_SIZE": ("embeddings", "vector_size"),
    "QDRANT_URL": ("vector_store", "url"),
    "QDRANT_HOST": ("vector_store", "url"),
    "QDRANT_COLLECTION": ("vector_store", "collection"),
    "SLACK_ADMIN_CHANNEL": ("notifications", "slack_channel"),
}


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value
    return data


def load_config(config_path: Optional[Path] = None, *, use_env: bool = True) -> AppConfig:
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"PharmAssist config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if use_env:
        data = _apply_env_overrides(data)

    try:
        cfg = AppConfig(**data)
        logger.info("Successfully loaded PharmAssist config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("PharmAssist config validation failed: %s", e)
        raise
