"""Customer profile: the delivery details attached to a user account."""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class CustomerProfile(BaseModel):
    """One profile per user; orders snapshot its shipping address."""

    user: models.OneToOneField = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="customer_profile",
    )
    full_name: models.CharField = models.CharField(max_length=255)
    phone_number: models.CharField = models.CharField(
        max_length=32, blank=True, default=""
    )
    shipping_address: models.TextField = models.TextField(blank=True, default="")
    billing_address: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "customer_profiles"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.full_name} <user {self.user_id}>"
