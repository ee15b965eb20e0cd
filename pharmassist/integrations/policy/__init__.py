"""
Pharmacy domain services used by the assistant tools.
"""

from .alternatives_service import AlternativesService
from .notify_admin_service import NotifyAdminService
from .purchase_log_service import PurchaseLogService
from .stock_service import StockService

__all__ = ["AlternativesService", "NotifyAdminService", "PurchaseLogService", "StockService"]
