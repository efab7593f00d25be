"""Role → capability table.

Views declare the capability an action needs; the order workflow itself
never inspects roles.  Superusers hold every capability.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, FrozenSet

from modules.accounts.models import Role


class Capability(StrEnum):
    PLACE_ORDER = "place_order"
    VIEW_OWN_ORDERS = "view_own_orders"
    VIEW_ALL_ORDERS = "view_all_orders"
    TRANSITION_ORDER_STATUS = "transition_order_status"
    CORRECT_ORDER = "correct_order"
    DELETE_ORDER = "delete_order"


ROLE_CAPABILITIES: dict[str, FrozenSet[Capability]] = {
    Role.ADMIN: frozenset(Capability),
    Role.FARMER: frozenset({Capability.VIEW_ALL_ORDERS, Capability.DELETE_ORDER}),
    Role.EMPLOYEE: frozenset(
        {Capability.VIEW_ALL_ORDERS, Capability.TRANSITION_ORDER_STATUS}
    ),
    Role.CUSTOMER: frozenset({Capability.PLACE_ORDER, Capability.VIEW_OWN_ORDERS}),
}


def capabilities_for(user: Any) -> FrozenSet[Capability]:
    """Return the capabilities held by *user* (empty for anonymous users)."""
    if user is None or not getattr(user, "is_authenticated", False):
        return frozenset()
    if getattr(user, "is_superuser", False):
        return frozenset(Capability)
    return ROLE_CAPABILITIES.get(getattr(user, "role", ""), frozenset())


def has_capability(user: Any, *capabilities: Capability) -> bool:
    """``True`` when *user* holds at least one of *capabilities*."""
    held = capabilities_for(user)
    return any(capability in held for capability in capabilities)
