"""
Stock Service

Answers "is this medicine available?" from the quantities stored at ingest time.
"""

import logging

from pharmassist.integrations.contracts.pharmacy import StockCheck, make_reference

logger = logging.getLogger(__name__)


class StockService:
    def __init__(self, retrieval, low_stock_threshold: int = 10):
        self.retrieval = retrieval
        self.low_stock_threshold = low_stock_threshold

    def check(self, medicine_id: str) -> StockCheck:
        logger.info("Checking stock for medicine: %s", medicine_id)
        reference = make_reference("STOCK")
        medicine = self.retrieval.get_by_id(medicine_id)
        if medicine is None:
            logger.warning("Stock check for unknown medicine %s", medicine_id)
            return StockCheck(medicine_id=medicine_id, reference=reference, found=False)

        quantity = int(medicine.quantity)
        return StockCheck(
            medicine_id=medicine_id,
            reference=reference,
            found=True,
            product_name=medicine.product_name,
            quantity=quantity,
            in_stock=quantity > 0,
            low_stock=0 < quantity < self.low_stock_threshold,
        )
