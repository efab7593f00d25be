"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``PlaceOrderItemDTO``: one requested line (product + quantity).
- ``PlaceOrderDTO``: order placement request.
- ``PlacedOrder``: result of a committed placement.
- ``OrderCorrectionDTO``: admin correction command.

Business checks on line items (empty list, non-positive quantity,
duplicates) belong to ``OrderAssembler``; these DTOs only fix the shape.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import MONEY_QUANTUM, OrderStatus

# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


class PlaceOrderItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement requests."""

    model_config = ConfigDict(frozen=True)

    items: List[PlaceOrderItemDTO]


class PlacedOrder(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID
    total_amount: Decimal


# ---------------------------------------------------------------------------
# Correction
# ---------------------------------------------------------------------------


class OrderCorrectionDTO(BaseModel):
    """Immutable DTO for admin order corrections.

    Validates:
    - only ``status``, ``delivery_address`` and ``total_amount`` are accepted;
    - at least one of them is supplied;
    - ``status`` is a known order status (any of them, terminal included);
    - ``delivery_address`` is not blank;
    - ``total_amount`` is non-negative, rounded half-up to cents.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Optional[OrderStatus] = None
    delivery_address: Optional[str] = None
    total_amount: Optional[Decimal] = None

    @field_validator("delivery_address")
    @classmethod
    def address_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Delivery address may not be blank.")
        return v

    @field_validator("total_amount")
    @classmethod
    def total_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        if not v.is_finite() or v < 0:
            raise ValueError("Total amount must be a non-negative number.")
        return v.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)

    @model_validator(mode="after")
    def at_least_one_field(self) -> Self:
        if (
            self.status is None
            and self.delivery_address is None
            and self.total_amount is None
        ):
            raise ValueError("Provide at least one field to correct.")
        return self
