"""Order assembly: turn requested lines into a priced order aggregate.

``OrderAssembler.assemble`` validates the request, reads each product
under a row lock (ascending id order) and snapshots its current price.
It performs no writes; the coordinator persists the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, List, Sequence, Tuple
from uuid import UUID

import structlog

from modules.orders.constants import MONEY_QUANTUM
from modules.orders.exceptions import OrderValidationError
from modules.products.exceptions import InsufficientStock, ProductNotFound

if TYPE_CHECKING:
    from modules.core.unit_of_work import UnitOfWork
    from modules.orders.dtos import PlaceOrderItemDTO

logger = structlog.get_logger(__name__)


def to_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AssembledLineItem:
    product_id: UUID
    product_name: str
    quantity: int
    price_at_purchase: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class AssembledOrder:
    line_items: List[AssembledLineItem]
    total_amount: Decimal


class OrderAssembler:
    """Validates requested items against live stock and prices them."""

    def assemble(
        self, session: UnitOfWork, items: Sequence[PlaceOrderItemDTO]
    ) -> AssembledOrder:
        """Build the priced line items and total for *items*.

        Raises:
            OrderValidationError: empty list, quantity <= 0 or a product
                requested twice.
            ProductNotFound: a product does not exist.
            InsufficientStock: a product has less stock than requested.
        """
        requested = self._validate(items)

        products = {
            product.id: product
            for product in session.products.lock_many(
                str(product_id) for product_id, _ in requested
            )
        }

        line_items: List[AssembledLineItem] = []
        total = Decimal("0.00")
        for product_id, quantity in requested:
            product = products.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            if product.stock_quantity < quantity:
                raise InsufficientStock(
                    product_id=product.id,
                    product_name=product.name,
                    requested=quantity,
                    available=product.stock_quantity,
                )

            price = to_money(Decimal(product.price))
            subtotal = to_money(price * quantity)
            line_items.append(
                AssembledLineItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    price_at_purchase=price,
                    subtotal=subtotal,
                )
            )
            total += subtotal

        assembled = AssembledOrder(line_items=line_items, total_amount=to_money(total))
        logger.debug(
            "order.assembly_priced",
            line_count=len(line_items),
            total_amount=str(assembled.total_amount),
        )
        return assembled

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(items: Sequence[PlaceOrderItemDTO]) -> List[Tuple[UUID, int]]:
        if not items:
            raise OrderValidationError("Order must have at least one item.")

        requested: List[Tuple[UUID, int]] = []
        seen: set[UUID] = set()
        for item in items:
            quantity = item.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                raise OrderValidationError("Quantity must be a whole number.")
            if quantity <= 0:
                raise OrderValidationError("Quantity must be at least 1.")
            try:
                product_id = UUID(str(item.product_id))
            except ValueError:
                raise OrderValidationError(
                    f"Invalid product id: {item.product_id}."
                ) from None
            if product_id in seen:
                raise OrderValidationError(
                    "Duplicate product IDs are not allowed in the same order."
                )
            seen.add(product_id)
            requested.append((product_id, quantity))

        # Lock rows in the same order in every transaction.
        requested.sort(key=lambda pair: pair[0])
        return requested
