"""Django ORM implementation of the CustomerProfile repository.

Error handling follows the Null Object pattern: methods return ``None``
instead of raising, and the caller decides how to report a missing row.
"""

from __future__ import annotations

from typing import Optional, Tuple

import structlog
from django.core.exceptions import ValidationError

from modules.customers.constants import (
    PLACEHOLDER_ADDRESS,
    PLACEHOLDER_FULL_NAME,
    PLACEHOLDER_PHONE,
)
from modules.customers.models import CustomerProfile
from modules.customers.repositories.interfaces import ICustomerProfileRepository

logger = structlog.get_logger(__name__)


class CustomerProfileDjangoRepository(ICustomerProfileRepository):
    """Concrete CustomerProfile repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[CustomerProfile]:
        """Retrieve a profile by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return CustomerProfile.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_user_id(self, user_id: int | str) -> Optional[CustomerProfile]:
        try:
            return CustomerProfile.objects.filter(user_id=user_id).first()
        except (ValueError, ValidationError):
            return None

    def get_or_create_placeholder(
        self, user_id: int | str
    ) -> Tuple[CustomerProfile, bool]:
        profile, created = CustomerProfile.objects.get_or_create(
            user_id=user_id,
            defaults={
                "full_name": PLACEHOLDER_FULL_NAME,
                "phone_number": PLACEHOLDER_PHONE,
                "shipping_address": PLACEHOLDER_ADDRESS,
                "billing_address": PLACEHOLDER_ADDRESS,
            },
        )
        if created:
            logger.info(
                "customer.placeholder_created",
                customer_id=str(profile.id),
                user_id=str(user_id),
            )
        return profile, created

    def save(self, entity: CustomerProfile) -> CustomerProfile:
        """Persist (create or update) a profile."""
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id))
        return entity
