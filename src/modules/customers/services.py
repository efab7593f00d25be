"""Customer profile service layer (Use Cases).

Backs the ``/customers/me`` endpoints.  The first read of a profile
creates a placeholder one, which the profile gate rejects until the user
supplies a real shipping address.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

if TYPE_CHECKING:
    from modules.customers.dtos import UpdateCustomerProfileDTO
    from modules.customers.models import CustomerProfile
    from modules.customers.repositories.interfaces import ICustomerProfileRepository

logger = structlog.get_logger(__name__)


class CustomerProfileService:
    """Application service for the caller's own customer profile.

    Receives an ``ICustomerProfileRepository`` via constructor injection.
    """

    def __init__(self, repository: ICustomerProfileRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def get_profile(self, user_id: int | str) -> CustomerProfile:
        """Return the user's profile, creating a placeholder if needed."""
        profile, _ = self._repo.get_or_create_placeholder(user_id)
        return profile

    @transaction.atomic
    def update_profile(
        self, user_id: int | str, dto: UpdateCustomerProfileDTO
    ) -> CustomerProfile:
        """Apply the supplied fields to the user's profile."""
        profile, _ = self._repo.get_or_create_placeholder(user_id)
        changes = dto.changes()
        for field, value in changes.items():
            setattr(profile, field, value)
        profile = self._repo.save(profile)
        logger.info(
            "customer.profile_updated",
            customer_id=str(profile.id),
            fields=sorted(changes),
        )
        return profile
