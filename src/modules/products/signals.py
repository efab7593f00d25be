"""Keep every product paired with an inventory shadow."""

from __future__ import annotations

from django.db.models.signals import post_save
from django.dispatch import receiver

from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@receiver(post_save, sender=Product, dispatch_uid="products.create_inventory")
def _create_inventory_record(
    sender, instance: Product, created: bool, raw: bool = False, **kwargs
) -> None:
    if not created or raw:
        return
    ProductDjangoRepository().create_inventory(instance)
