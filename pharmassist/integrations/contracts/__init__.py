"""
Contracts (data models).

This folder defines the shapes exchanged with external systems and tools:
- Product catalogue records and pages (unified products API)
- Purchase logs, stock checks and admin notifications

Both the HTTP client and the services rely on these contracts instead of
passing ad-hoc dicts around.
"""

from .pharmacy import AdminNotification, Priority, PurchaseLog, StockCheck, make_reference
from .product_catalogues import PageEnvelope, ProductRecord

__all__ = [
    "AdminNotification",
    "PageEnvelope",
    "Priority",
    "ProductRecord",
    "PurchaseLog",
    "StockCheck",
    "make_reference",
]
