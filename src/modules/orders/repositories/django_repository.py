"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Writes are
not wrapped in their own transaction: atomicity belongs to the unit of
work that calls them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models

from modules.orders.assembly import AssembledLineItem
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderLineItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(
        self, customer_id: UUID, delivery_address: str, total_amount: Decimal
    ) -> Order:
        return Order.objects.create(
            customer_id=customer_id,
            status=OrderStatus.PENDING,
            delivery_address=delivery_address,
            total_amount=total_amount,
        )

    def add_line_item(self, order_id: UUID, line: AssembledLineItem) -> OrderLineItem:
        return OrderLineItem.objects.create(
            order_id=order_id,
            product_id=line.product_id,
            quantity=line.quantity,
            price_at_purchase=line.price_at_purchase,
        )

    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        changed_by_id: Optional[int] = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            changed_by_id=changed_by_id,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _with_relations(self) -> models.QuerySet[Order]:
        return Order.objects.select_related("customer").prefetch_related(
            "items__product", "status_history"
        )

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK (single JOIN) and
        ``prefetch_related`` for items, items->product, and status
        history (separate batched queries).  Prevents N+1.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._with_relations().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Lock the order row only; no joins so no other table is locked.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, customer_id: Optional[UUID] = None) -> models.QuerySet[Order]:
        queryset = self._with_relations()
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        return queryset

    def none(self) -> models.QuerySet[Order]:
        return Order.objects.none()

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        return entity

    def update_fields(self, entity: Order, fields: Iterable[str]) -> Order:
        entity.save(update_fields=list(fields))
        return entity

    def delete(self, entity: Order) -> None:
        order_id = entity.id
        # Children first; Product FKs on line items are PROTECT.
        items_deleted, _ = OrderLineItem.objects.filter(order_id=order_id).delete()
        history_deleted, _ = OrderStatusHistory.objects.filter(
            order_id=order_id
        ).delete()
        entity.delete()
        logger.info(
            "order.rows_deleted",
            order_id=str(order_id),
            items=items_deleted,
            history=history_deleted,
        )
