"""Order, OrderLineItem, and OrderStatusHistory models.

Business rules implemented:
- Order and its line items are written together in one transaction.
- ``delivery_address`` is a snapshot of the profile's shipping address.
- ``total_amount`` changes after creation only through admin correction.
- Line items snapshot the product price (``price_at_purchase``).
- Each status change appends a history row.
- Customer and Product FKs use PROTECT to preserve financial history.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    MONEY_QUANTUM,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)


class Order(BaseModel):
    """Order aggregate root."""

    customer: models.ForeignKey = models.ForeignKey(
        "customers.CustomerProfile",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    delivery_address: models.TextField = models.TextField()

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def is_adjacent_transition(self, new_status: str) -> bool:
        """Check whether *new_status* is the next step of the lifecycle."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderLineItem(BaseModel):
    """Line item linking an Order to a Product.

    ``price_at_purchase`` is a **snapshot** of the product price when the
    order was assembled; it never follows later price changes.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    price_at_purchase: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price_at_purchase__gte=0),
                name="order_items_price_non_negative",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return (self.quantity * self.price_at_purchase).quantize(MONEY_QUANTUM)

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} @ {self.price_at_purchase}"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status changes.

    ``old_status`` is ``None`` for the creation row.  ``changed_by`` is
    ``None`` when the change was not made through an authenticated request.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    changed_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
