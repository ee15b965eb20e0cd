"""
Unified Products HTTP Client.

Purpose:
- Fetches the pharmacy product catalogue from the unified products API
- Hides page mechanics from callers (fetch_all walks next_page_url links)

Implementation notes:
- Synchronous httpx client; one request at a time, fixed timeout, no retries
- A failed page aborts pagination in fetch_all and the records gathered so
  far are returned (best-effort); fetch_page itself always raises
- Waits page_delay_s between page requests to avoid overwhelming the API

Important:
- This client should be the ONLY place that talks to the catalogue API.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from pharmassist.error_handler import NotFoundError, UpstreamError
from pharmassist.integrations.contracts.product_catalogues import PageEnvelope, ProductRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cc.medplusnig.com/api"


class UnifiedProductsClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout_s: float = 30.0,
        page_delay_s: float = 0.5,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url or os.getenv("UNIFIED_PRODUCTS_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.token = token if token is not None else os.getenv("BEARER_TOKEN", "")
        self.timeout_s = timeout_s
        self.page_delay_s = page_delay_s
        self._sleep = sleep
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout_s)

        if not self.token:
            logger.warning("BEARER_TOKEN is not set. Catalogue requests may fail.")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "UnifiedProductsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    def fetch_page(self, page: int = 1) -> PageEnvelope:
        """Fetch one 1-based page. Raises UpstreamError on any failure."""
        url = f"{self.base_url}/products/unified"
        logger.debug("Fetching catalogue page %s: %s", page, url)
        try:
            response = self._client.get(
                url,
                params={"page": page},
                headers=self._headers(),
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            body: Dict[str, Any] = response.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"Catalogue request for page {page} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Catalogue page {page} returned invalid JSON: {e}") from e

        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise UpstreamError(f"API returned unsuccessful status: {message or 'no message'}")

        try:
            envelope = PageEnvelope.from_api(body.get("data"), requested_page=page)
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"Catalogue page {page} has an unexpected shape: {e}") from e

        logger.debug("Page %s fetched with %d products", page, len(envelope.records))
        return envelope

    def fetch_all(self, max_items: int = 0) -> List[ProductRecord]:
        """
        Walk the catalogue from page 1 and concatenate records in page order.

        max_items=0 means unlimited. When bounded, the last page is truncated to
        fill the remaining quota exactly. A failed page stops pagination and
        whatever was accumulated so far is returned.
        """
        limit_note = f" (max: {max_items})" if max_items > 0 else ""
        logger.info("Fetching all products from catalogue with pagination%s", limit_note)

        records: List[ProductRecord] = []
        page = 1
        pages_fetched = 0
        while True:
            try:
                envelope = self.fetch_page(page)
            except UpstreamError as e:
                logger.warning("Error fetching page %s: %s. Stopping pagination.", page, e)
                break

            pages_fetched += 1
            if max_items > 0:
                remaining = max_items - len(records)
                records.extend(envelope.records[:remaining])
            else:
                records.extend(envelope.records)
            logger.info("Page %s: %d products (total so far: %d)", page, len(envelope.records), len(records))

            if max_items > 0 and len(records) >= max_items:
                logger.info("Reached product limit of %d. Stopping pagination.", max_items)
                break
            if not envelope.has_next:
                break

            page += 1
            if self.page_delay_s > 0:
                self._sleep(self.page_delay_s)

        logger.info("Fetched %d products from %d page(s)", len(records), pages_fetched)
        return records

    def search(self, query: str) -> ProductRecord:
        """Return the first product whose name contains ``query`` (case-insensitive)."""
        logger.info("Searching catalogue for product: %s", query)
        needle = query.lower()
        for record in self.fetch_all():
            if needle in record.product_name.lower():
                logger.info("Product found: %s", record.product_name)
                return record
        raise NotFoundError(f"Product not found for query: {query}")

    @staticmethod
    def format_for_embedding(record: ProductRecord) -> str:
        return "\n".join(
            [
                f"Product: {record.product_name}",
                f"Category: {record.category_name}",
                f"Price: {record.price}",
                f"Quantity Available: {record.quantity}",
                f"Last Updated: {record.price_updated_at}",
            ]
        )
