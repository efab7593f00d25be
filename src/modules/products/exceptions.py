"""Stock ledger exceptions.

Raised inside the caller's unit of work; the transaction rolls back
before the error leaves the service layer.
"""

from __future__ import annotations

from uuid import UUID

from modules.core.exceptions import BusinessRuleConflict, NotFound


class StockError(Exception):
    """Marker base for every stock ledger failure."""


class ProductNotFound(StockError, NotFound):
    """A referenced product does not exist."""

    code = "product_not_found"

    def __init__(self, product_id: UUID | str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found.")


class InsufficientStock(StockError, BusinessRuleConflict):
    """The requested quantity exceeds the available stock of a product."""

    code = "insufficient_stock"

    def __init__(
        self,
        product_id: UUID | str,
        product_name: str,
        requested: int,
        available: int,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}: "
            f"requested {requested}, available {available}."
        )
