"""Asynchronous product tasks (Celery)."""

from __future__ import annotations

import structlog
from celery import shared_task

from modules.products.models import InventoryRecord

logger = structlog.get_logger(__name__)


@shared_task(ignore_result=True)
def notify_low_stock(product_id: str, quantity: int) -> bool:
    """Report that a product dropped to or below its low-stock threshold.

    Runs after the decrementing transaction has committed.  Returns
    ``False`` when the inventory row is gone or has been restocked since.
    """
    inventory = (
        InventoryRecord.objects.select_related("product")
        .filter(product_id=product_id)
        .first()
    )
    if inventory is None:
        logger.warning("stock.low_stock_target_missing", product_id=product_id)
        return False
    if not inventory.is_low_stock:
        logger.info(
            "stock.low_stock_resolved",
            product_id=product_id,
            quantity=inventory.quantity,
        )
        return False

    logger.warning(
        "stock.low_stock",
        product_id=product_id,
        product_name=inventory.product.name,
        quantity=inventory.quantity,
        reported_quantity=quantity,
        threshold=inventory.low_stock_threshold,
        unit=inventory.unit,
    )
    return True
