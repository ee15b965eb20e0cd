"""
Pharmacy operation contracts: purchase logs, stock checks and admin notifications.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class PurchaseLog:
    name: str
    medicine_id: str
    customer_id: str
    purchase_date: str                   # ISO format
    quantity: int
    total_price: float
    reference: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class StockCheck:
    medicine_id: str
    reference: str
    found: bool
    product_name: Optional[str] = None
    quantity: int = 0
    in_stock: bool = False
    low_stock: bool = False
    checked_at: datetime = field(default_factory=_utcnow)


@dataclass
class AdminNotification:
    name: str
    medicine_id: str
    reason: str                          # e.g. out of stock, low inventory
    priority: Priority
    reference: Optional[str] = None
    delivered: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)


def make_reference(prefix: str, now_ms: Optional[int] = None) -> str:
    """Reference ids look like ``LOG-1718000000000``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}-{now_ms}"
