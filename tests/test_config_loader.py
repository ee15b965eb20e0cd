import pytest
from pydantic import ValidationError

from pharmassist.factory import build_admin_notifier, build_embedder, build_ingestor, build_retrieval, build_vector_store
from pharmassist.rag.embeddings.embedder import HashEmbedder
from pharmassist.rag.integrations.qdrant_store import QdrantVectorStore
from pharmassist.utils.config_loader import DEFAULT_CONFIG_PATH, AppConfig, load_config


def _write(tmp_path, text):
    p = tmp_path / "pharmassist_config.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_default_config_file_loads():
    cfg = load_config(DEFAULT_CONFIG_PATH, use_env=False)
    assert cfg.vector_store.collection == "pharm_cluster"
    assert cfg.ingestion.item_delay_s == 0.2


def test_missing_sections_fall_back_to_defaults(tmp_path):
    cfg = load_config(_write(tmp_path, "embeddings:\n  provider: hash\n  vector_size: 64\n"), use_env=False)

    assert cfg.embeddings.vector_size == 64
    assert cfg.catalog.page_delay_s == 0.5
    assert cfg.retrieval.low_stock_threshold == 10


def test_env_overrides_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("QDRANT_COLLECTION", "from_env")
    monkeypatch.setenv("EMBEDDING_VECTOR_SIZE", "768")

    cfg = load_config(_write(tmp_path, "vector_store:\n  collection: from_yaml\n"))

    assert cfg.vector_store.collection == "from_env"
    assert cfg.embeddings.vector_size == 768


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yml")


def test_invalid_values_raise_validation_error(tmp_path):
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path, "embeddings:\n  provider: word2vec\n"), use_env=False)


def test_factory_builds_offline_components():
    cfg = AppConfig(
        embeddings={"provider": "hash", "vector_size": 12},
        vector_store={"provider": "qdrant_memory", "collection": "c1"},
    )

    embedder = build_embedder(cfg)
    store = build_vector_store(cfg)

    assert isinstance(embedder, HashEmbedder) and embedder.dim == 12
    assert isinstance(store, QdrantVectorStore) and store.collection == "c1"


def test_admin_notifier_disabled_without_token(monkeypatch):
    monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)
    cfg = AppConfig(notifications={"slack_channel": "C123"})
    assert build_admin_notifier(cfg) is None


def test_factory_passes_ingestion_and_retrieval_limits():
    class Catalog:
        def __init__(self):
            self.max_items_seen = []

        def fetch_all(self, max_items=0):
            self.max_items_seen.append(max_items)
            return []

    cfg = AppConfig(ingestion={"default_max_items": 2}, retrieval={"category_limit": 4})
    catalog = Catalog()
    embedder = HashEmbedder(vector_size=8)
    store = QdrantVectorStore.in_memory(collection="limits")

    build_ingestor(cfg, embedder=embedder, store=store, catalog=catalog).ingest_all()
    retrieval = build_retrieval(cfg, embedder=embedder, store=store)

    assert catalog.max_items_seen == [2]
    assert retrieval.category_limit == 4
