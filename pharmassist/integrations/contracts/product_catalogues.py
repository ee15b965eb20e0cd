"""
Product catalogue contracts.

Defines the shapes returned by the unified products API:
- ProductRecord: one raw product as the catalogue sends it
- PageEnvelope: one fetched page plus its pagination links

Price and quantity are kept exactly as received (number or numeric string).
Coercion to numbers happens at ingest time, not here, so the catalogue
client never rejects a record because of a malformed field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Numeric = Union[str, int, float, None]

_KNOWN_FIELDS = (
    "product_name",
    "price",
    "quantity",
    "category_name",
    "category_slug",
    "category_id",
    "price_updated_at",
    "barcode",
)


@dataclass
class ProductRecord:
    product_name: str
    price: Numeric = None
    quantity: Numeric = None
    category_name: str = ""
    category_slug: str = ""
    category_id: Union[str, int, None] = None
    price_updated_at: Optional[str] = None
    barcode: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "ProductRecord":
        if not isinstance(raw, dict):
            raise ValueError(f"Product entry must be an object, got {type(raw).__name__}")
        return cls(
            product_name=str(raw.get("product_name") or ""),
            price=raw.get("price"),
            quantity=raw.get("quantity"),
            category_name=str(raw.get("category_name") or ""),
            category_slug=str(raw.get("category_slug") or ""),
            category_id=raw.get("category_id"),
            price_updated_at=raw.get("price_updated_at"),
            barcode=raw.get("barcode"),
            extra={k: v for k, v in raw.items() if k not in _KNOWN_FIELDS},
        )


@dataclass
class PageEnvelope:
    records: List[ProductRecord]
    current_page: int
    next_page_url: Optional[str] = None
    per_page: int = 0
    total: Optional[int] = None
    last_page: Optional[int] = None

    @property
    def has_next(self) -> bool:
        # A missing next link is the only termination signal; empty pages do not stop pagination.
        return self.next_page_url is not None

    @classmethod
    def from_api(cls, data: Dict[str, Any], *, requested_page: int = 1) -> "PageEnvelope":
        """Build an envelope from the ``data`` object of a successful response."""
        if not isinstance(data, dict):
            raise ValueError("Pagination block is missing from the response")
        rows = data.get("data") or []
        if not isinstance(rows, list):
            raise ValueError("Pagination block 'data' must be a list")
        return cls(
            records=[ProductRecord.from_api(r) for r in rows],
            current_page=int(data.get("current_page") or requested_page),
            next_page_url=data.get("next_page_url") or None,
            per_page=int(data.get("per_page") or len(rows)),
            total=data.get("total"),
            last_page=data.get("last_page"),
        )
