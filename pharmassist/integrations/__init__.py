"""
Integrations layer.
This package contains all code used to communicate with external systems:
- The unified products catalogue API (clients/real_http)
- Slack, for admin notifications (slack)
- Pharmacy domain services built on top of retrieval (policy)

Key rule:
- Tools MUST NOT call external APIs directly.
- Tools call the services and clients in this package.
"""

from .contracts import (
    AdminNotification,
    PageEnvelope,
    Priority,
    ProductRecord,
    PurchaseLog,
    StockCheck,
    make_reference,
)

__all__ = [
    "AdminNotification",
    "PageEnvelope",
    "Priority",
    "ProductRecord",
    "PurchaseLog",
    "StockCheck",
    "make_reference",
]
