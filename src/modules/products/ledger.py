"""Stock ledger: the only code path that changes a product's quantity.

``adjust_stock`` performs a locked read-check-write on the product row and
its inventory shadow inside the caller's unit of work.  A failed check
raises before anything is written; a successful write becomes visible to
other transactions only when the session commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from django.conf import settings

from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from modules.core.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StockAdjustment:
    """Result of a successful ``adjust_stock`` call."""

    product_id: UUID
    previous_quantity: int
    new_quantity: int
    is_low_stock: bool

    @property
    def delta(self) -> int:
        return self.new_quantity - self.previous_quantity


class StockLedger:
    """Atomic stock mutations shared by the catalog and inventory rows."""

    def adjust_stock(
        self, session: UnitOfWork, product_id: UUID | str, delta: int
    ) -> StockAdjustment:
        """Apply *delta* to the stock of *product_id*.

        Raises:
            ProductNotFound: the product does not exist.
            InsufficientStock: the result would be negative.
        """
        log = logger.bind(product_id=str(product_id), delta=delta)

        product = session.products.get_for_update(str(product_id))
        if product is None:
            log.warning("stock.product_not_found")
            raise ProductNotFound(product_id)

        current = product.stock_quantity
        new_quantity = current + delta
        if new_quantity < 0:
            log.info("stock.insufficient", available=current)
            raise InsufficientStock(
                product_id=product.id,
                product_name=product.name,
                requested=-delta,
                available=current,
            )

        inventory = session.products.get_inventory_for_update(product)
        if inventory is None:
            log.warning("stock.inventory_missing")
            inventory = session.products.create_inventory(product)

        session.products.write_stock(product, inventory, new_quantity)

        adjustment = StockAdjustment(
            product_id=product.id,
            previous_quantity=current,
            new_quantity=new_quantity,
            is_low_stock=new_quantity <= inventory.low_stock_threshold,
        )
        log.info(
            "stock.adjusted",
            previous=current,
            new=new_quantity,
            low_stock=adjustment.is_low_stock,
        )

        if delta < 0 and adjustment.is_low_stock:
            self._schedule_low_stock_notice(session, adjustment)
        return adjustment

    def _schedule_low_stock_notice(
        self, session: UnitOfWork, adjustment: StockAdjustment
    ) -> None:
        if not settings.LOW_STOCK_NOTIFICATIONS:
            return

        from modules.products.tasks import notify_low_stock

        product_id = str(adjustment.product_id)
        quantity = adjustment.new_quantity
        session.on_commit(lambda: notify_low_stock.delay(product_id, quantity))
