"""User account with a single back-office role.

Token issuance and verification are handled by SimpleJWT; this model only
adds the ``role`` that capability checks are derived from.
"""

from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    FARMER = "farmer", "Farmer"
    EMPLOYEE = "employee", "Employee"
    CUSTOMER = "customer", "Customer"


class User(AbstractUser):
    role: models.CharField = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.CUSTOMER,
    )

    class Meta:
        db_table = "users"

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
