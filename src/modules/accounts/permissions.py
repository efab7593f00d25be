"""DRF permission evaluated before any order workflow runs."""

from __future__ import annotations

import structlog
from rest_framework.permissions import BasePermission

from modules.accounts.capabilities import has_capability

logger = structlog.get_logger(__name__)


class HasCapability(BasePermission):
    """Allow an action only when the user holds a capability it requires.

    Views declare ``required_capabilities``: a mapping of action name to a
    tuple of capabilities, any one of which is sufficient.  Actions that
    are not listed are denied (fail closed).
    """

    message = "Your role does not allow this action."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capabilities", {}).get(view.action)
        if not required:
            logger.warning("capability.undeclared_action", action=view.action)
            return False

        allowed = has_capability(user, *required)
        if not allowed:
            logger.info(
                "capability.denied",
                user_id=str(user.pk),
                action=view.action,
                required=[str(c) for c in required],
            )
        return allowed
