"""Customer profile gate.

Read-only check that the ordering user can receive a delivery.  Runs
first inside the order placement unit of work so a rejected profile
aborts before anything is written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from modules.customers.constants import PLACEHOLDER_MARKER
from modules.customers.exceptions import AddressIncomplete, ProfileMissing

if TYPE_CHECKING:
    from modules.core.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DeliverableProfile:
    customer_id: UUID
    shipping_address: str


def is_placeholder_address(address: str | None) -> bool:
    """``True`` for empty, whitespace-only or placeholder addresses."""
    if not address or not address.strip():
        return True
    return PLACEHOLDER_MARKER.lower() in address.lower()


class CustomerProfileGate:
    def require_deliverable_profile(
        self, session: UnitOfWork, user_id: int | str
    ) -> DeliverableProfile:
        """Return the user's customer id and shipping address.

        Raises:
            ProfileMissing: the user has no profile.
            AddressIncomplete: the shipping address is blank or a placeholder.
        """
        profile = session.customers.get_by_user_id(user_id)
        if profile is None:
            logger.info("profile.missing", user_id=str(user_id))
            raise ProfileMissing()

        if is_placeholder_address(profile.shipping_address):
            logger.info(
                "profile.address_incomplete",
                user_id=str(user_id),
                customer_id=str(profile.id),
            )
            raise AddressIncomplete()

        return DeliverableProfile(
            customer_id=profile.id,
            shipping_address=profile.shipping_address.strip(),
        )
