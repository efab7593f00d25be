"""Order repository interface.

Extends ``IRepository[Order]`` with the writes of order placement
(order row, line items, status history), locking reads and the
cascading delete.  Every method runs inside the caller's unit of work.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.orders.assembly import AssembledLineItem
    from modules.orders.models import Order, OrderLineItem, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderLineItem children and
    OrderStatusHistory records.
    """

    @abstractmethod
    def create(
        self, customer_id: UUID, delivery_address: str, total_amount: Decimal
    ) -> Order:
        """Insert a pending order row."""

    @abstractmethod
    def add_line_item(self, order_id: UUID, line: AssembledLineItem) -> OrderLineItem:
        """Insert one line item with its price snapshot."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        changed_by_id: Optional[int] = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Append a status change to the order's audit trail."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order row with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def update_fields(self, entity: Order, fields: Iterable[str]) -> Order:
        """Write only *fields* of an existing order."""

    @abstractmethod
    def list(self, customer_id: Optional[UUID] = None) -> "models.QuerySet[Order]":
        """Orders, newest first, optionally of one customer."""

    @abstractmethod
    def none(self) -> "models.QuerySet[Order]":
        """An empty order query set."""

    @abstractmethod
    def delete(self, entity: Order) -> None:
        """Delete an order together with its line items and history."""
