"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  They
extend the shared ``DomainError`` taxonomy, so the API exception handler
renders them without any per-view translation.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound, ValidationFailed


class OrderValidationError(ValidationFailed):
    """The requested line items are malformed (empty, non-positive, duplicated)."""

    code = "invalid_order"


class InvalidStatus(ValidationFailed):
    """Unknown status value, or a move out of a terminal state."""

    code = "invalid_status"


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    code = "order_not_found"
    default_message = "Order not found."
