"""Customer profile repository interface.

Extends ``IRepository[CustomerProfile]`` with the user-keyed look-ups
used by the profile gate and the ``/customers/me`` endpoints.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import CustomerProfile


class ICustomerProfileRepository(IRepository["CustomerProfile"]):
    """Repository contract for the CustomerProfile aggregate."""

    @abstractmethod
    def get_by_user_id(self, user_id: int | str) -> Optional[CustomerProfile]:
        """Retrieve the profile owned by *user_id*."""

    @abstractmethod
    def get_or_create_placeholder(
        self, user_id: int | str
    ) -> Tuple[CustomerProfile, bool]:
        """Return the user's profile, creating a placeholder one if absent.

        The boolean is ``True`` when a profile was created.
        """
