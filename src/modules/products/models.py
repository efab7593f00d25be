"""Product catalog row and its inventory shadow.

Business rules implemented:
- Price is never negative (DB check constraint).
- Stock quantity is never negative (unsigned column + DB check constraint).
- Every product has exactly one ``InventoryRecord`` whose ``quantity``
  mirrors ``Product.stock_quantity``; only ``StockLedger`` mutates either.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.products.constants import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    DEFAULT_UNIT,
    ProductCategory,
)


class Product(BaseModel):
    """Sellable catalog item."""

    name: models.CharField = models.CharField(max_length=255)
    description: models.TextField = models.TextField(blank=True, default="")
    category: models.CharField = models.CharField(
        max_length=32,
        choices=ProductCategory.choices,
        default=ProductCategory.OTHER,
    )
    price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    stock_quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=0
    )
    farmer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="products_category_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity} in stock)"


class InventoryRecord(BaseModel):
    """Inventory view of a product: quantity, threshold and unit."""

    product: models.OneToOneField = models.OneToOneField(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="inventory",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    low_stock_threshold: models.PositiveIntegerField = models.PositiveIntegerField(
        default=DEFAULT_LOW_STOCK_THRESHOLD
    )
    unit: models.CharField = models.CharField(max_length=16, default=DEFAULT_UNIT)
    price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    description: models.TextField = models.TextField(blank=True, default="")
    last_updated: models.DateTimeField = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="inventory_quantity_non_negative",
            ),
        ]

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    def __str__(self) -> str:
        return f"{self.product_id}: {self.quantity} {self.unit}"
