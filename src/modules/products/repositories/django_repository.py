"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the ledger decides how to report a missing row.
Locking reads must be issued inside an active transaction.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.products.constants import unit_for_category
from modules.products.models import InventoryRecord, Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def lock_many(self, ids: Iterable[str]) -> List[Product]:
        # Consistent lock order across concurrent transactions.
        try:
            return list(
                Product.objects.select_for_update()
                .filter(id__in=list(ids))
                .order_by("id")
            )
        except (ValueError, ValidationError):
            return []

    def get_inventory_for_update(self, product: Product) -> Optional[InventoryRecord]:
        return (
            InventoryRecord.objects.select_for_update()
            .filter(product_id=product.id)
            .first()
        )

    def create_inventory(self, product: Product) -> InventoryRecord:
        inventory = InventoryRecord.objects.create(
            product=product,
            quantity=product.stock_quantity,
            unit=unit_for_category(product.category),
            price=product.price,
            description=product.description,
        )
        logger.info(
            "inventory.created",
            product_id=str(product.id),
            quantity=inventory.quantity,
            unit=inventory.unit,
        )
        return inventory

    def write_stock(
        self, product: Product, inventory: InventoryRecord, quantity: int
    ) -> None:
        product.stock_quantity = quantity
        product.save(update_fields=["stock_quantity"])
        inventory.quantity = quantity
        # ``last_updated`` is auto_now and only refreshed when listed.
        inventory.save(update_fields=["quantity", "last_updated"])
