import hmac
import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from fastapi import Header, HTTPException, Request, status

from pharmassist.utils.config_loader import AppConfig, load_config

load_dotenv()

logger = logging.getLogger(__name__)

_ALLOWLIST_PATHS = {
    "/",
    "/health",
    "/docs",
    "/docs/oauth2-redirect",
    "/openapi.json",
    "/redoc",
}


def get_api_keys():
    keys = os.getenv("API_KEYS", "")
    return [k.strip() for k in keys.split(",") if k.strip()]


def api_key_protection(
    request: Request = None,  # keep Request type so FastAPI injects it; default None for direct calls/tests
    x_api_key: str = Header(default=None, alias="X-API-KEY"),
):
    debug = os.getenv("API_KEY_DEBUG", "").lower() in ("1", "true", "yes")
    path = request.url.path if request is not None else "<no-request>"
    if debug:
        logger.info("API key check: path=%s header_present=%s", path, bool(x_api_key))

    if request is not None and request.url.path in _ALLOWLIST_PATHS:
        return

    valid_keys = get_api_keys()
    candidate = (x_api_key or "").strip()

    ok = bool(candidate) and any(hmac.compare_digest(candidate, k) for k in valid_keys)
    if debug:
        logger.info("API key check: path=%s ok=%s configured_keys=%d", path, ok, len(valid_keys))

    if not ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key",
        )


# ---------------------------------------------------------------------------
# Service wiring (built once per process; tests override via app.dependency_overrides)
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_config()


@lru_cache(maxsize=1)
def _shared_components():
    from pharmassist.factory import build_embedder, build_vector_store

    cfg = get_config()
    return build_embedder(cfg), build_vector_store(cfg)


@lru_cache(maxsize=1)
def get_tool_context():
    from pharmassist.factory import build_tool_context

    embedder, store = _shared_components()
    return build_tool_context(get_config(), embedder=embedder, store=store)


@lru_cache(maxsize=1)
def get_ingestor():
    from pharmassist.factory import build_ingestor

    embedder, store = _shared_components()
    ingestor = build_ingestor(get_config(), embedder=embedder, store=store)
    ingestor.initialize()
    return ingestor
