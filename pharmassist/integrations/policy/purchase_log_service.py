"""
Purchase Log Service

Keeps an append-only record of medicine purchases reported by the assistant.
"""

import logging
from typing import List

from pharmassist.integrations.contracts.pharmacy import PurchaseLog, make_reference

logger = logging.getLogger(__name__)


class PurchaseLogService:
    def __init__(self):
        # In-memory only; logs are lost on restart.
        self._logs: List[PurchaseLog] = []

    def add_log(self, log: PurchaseLog) -> str:
        log.reference = make_reference("LOG")
        self._logs.append(log)
        logger.info(
            "Added purchase log %s: %s x%d for customer %s",
            log.reference,
            log.name,
            log.quantity,
            log.customer_id,
        )
        return log.reference

    def get_logs(self) -> List[PurchaseLog]:
        return list(self._logs)
