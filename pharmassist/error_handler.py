"""Error types and handling helpers for the PharmAssist backend."""
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)


class PharmAssistError(Exception):
    """Base class for errors raised by the catalog, embedding and store layers."""


class UpstreamError(PharmAssistError):
    """Catalog HTTP failure, timeout, or a ``success: false`` payload."""


class EmbeddingError(PharmAssistError):
    """Embedding provider misconfigured or returned an empty vector."""


class StoreError(PharmAssistError):
    """Vector store collection setup, write or query failure."""


class NotFoundError(PharmAssistError):
    """A search or lookup yielded nothing."""


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in PharmAssist: %s", exc, exc_info=True)
        return {
            "message": "An internal error occurred while processing your request. Please try again later.",
            "error_type": type(exc).__name__,
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }
