"""Order service layer (Use Cases).

Orchestrates order placement and the post-creation lifecycle.  Each
command opens exactly one unit of work; every repository call, ledger
adjustment and profile check made for that command goes through it, so
the command either commits as a whole or leaves no trace.

Placement runs as a fixed sequence inside that unit of work:

1. profile gate (deliverable shipping address),
2. assembly (locked product reads, price snapshot, total),
3. order row + initial history row,
4. per line item: insert the line item, then decrement stock.

Any failure rolls back all of it and is re-raised to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional
from uuid import UUID

import structlog
from django.db import DatabaseError

from modules.core.exceptions import DomainError, TransactionFailure
from modules.core.unit_of_work import DjangoUnitOfWork
from modules.customers.gate import CustomerProfileGate
from modules.orders.assembly import OrderAssembler
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlacedOrder
from modules.orders.exceptions import InvalidStatus, OrderNotFound
from modules.products.ledger import StockLedger

if TYPE_CHECKING:
    from django.db import models

    from modules.core.unit_of_work import UnitOfWork
    from modules.orders.dtos import OrderCorrectionDTO, PlaceOrderDTO
    from modules.orders.models import Order

logger = structlog.get_logger(__name__)


def _parse_status(value: object) -> OrderStatus:
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidStatus(f"'{value}' is not a valid order status.") from None


class OrderService:
    """Application service for Order use-cases.

    Collaborators are injected; the defaults are the Django-backed ones.
    ``session_factory`` returns a fresh, not yet entered ``UnitOfWork``.
    """

    def __init__(
        self,
        session_factory: Callable[[], UnitOfWork] = DjangoUnitOfWork,
        gate: Optional[CustomerProfileGate] = None,
        assembler: Optional[OrderAssembler] = None,
        ledger: Optional[StockLedger] = None,
    ) -> None:
        self._session_factory = session_factory
        self._gate = gate or CustomerProfileGate()
        self._assembler = assembler or OrderAssembler()
        self._ledger = ledger or StockLedger()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(self, user_id: int, dto: PlaceOrderDTO) -> PlacedOrder:
        """Create an order for *user_id* and reserve its stock atomically.

        Raises:
            ProfileMissing / AddressIncomplete: the profile cannot receive
                deliveries.
            OrderValidationError: malformed item list.
            ProductNotFound: a product does not exist.
            InsufficientStock: a product lacks stock (names the product).
            TransactionFailure: the database failed; nothing was written.
        """
        log = logger.bind(user_id=str(user_id), item_count=len(dto.items))
        log.info("order.placement_started")

        try:
            with self._session_factory() as session:
                profile = self._gate.require_deliverable_profile(session, user_id)
                log = log.bind(customer_id=str(profile.customer_id))
                log.info("order.profile_verified")

                assembled = self._assembler.assemble(session, dto.items)
                log.info(
                    "order.assembled",
                    total_amount=str(assembled.total_amount),
                )

                order = session.orders.create(
                    customer_id=profile.customer_id,
                    delivery_address=profile.shipping_address,
                    total_amount=assembled.total_amount,
                )
                session.orders.add_history(
                    order_id=order.id,
                    new_status=OrderStatus.PENDING,
                    changed_by_id=user_id,
                    notes="Order placed",
                )
                log = log.bind(order_id=str(order.id))
                log.info("order.created")

                for line in assembled.line_items:
                    session.orders.add_line_item(order.id, line)
                    adjustment = self._ledger.adjust_stock(
                        session, line.product_id, -line.quantity
                    )
                    log.info(
                        "order.line_item_applied",
                        product_id=str(line.product_id),
                        quantity=line.quantity,
                        remaining=adjustment.new_quantity,
                    )
        except DomainError as exc:
            log.info("order.placement_failed", reason=exc.code, detail=exc.message)
            raise
        except DatabaseError as exc:
            log.error(
                "order.placement_failed",
                reason=TransactionFailure.code,
                error=repr(exc),
            )
            raise TransactionFailure() from exc

        log.info("order.placed", total_amount=str(assembled.total_amount))
        return PlacedOrder(order_id=order.id, total_amount=assembled.total_amount)

    def transition(
        self,
        order_id: UUID | str,
        new_status: str,
        changed_by: Optional[int] = None,
        notes: str = "",
    ) -> Order:
        """Move an order to *new_status*.

        Any move out of a non-terminal state is accepted; moves that skip
        lifecycle steps are logged.  Writing the current status is a no-op.

        Raises:
            InvalidStatus: unknown status, or the order is terminal.
            OrderNotFound: the order does not exist.
        """
        status = _parse_status(new_status)
        log = logger.bind(order_id=str(order_id), new_status=str(status))

        with self._session_factory() as session:
            order = session.orders.get_for_update(str(order_id))
            if order is None:
                raise OrderNotFound()

            old_status = order.status
            log = log.bind(current_status=old_status)
            if old_status == status:
                log.info("order.transition_noop")
                return self._reload(session, order)

            if order.is_terminal:
                log.warning("order.transition_from_terminal")
                raise InvalidStatus(
                    f"Order is {old_status}; its status can no longer change."
                )
            if not order.is_adjacent_transition(status):
                log.warning("order.transition_skips_states")

            order.status = status
            session.orders.update_fields(order, ["status"])
            session.orders.add_history(
                order_id=order.id,
                old_status=old_status,
                new_status=status,
                changed_by_id=changed_by,
                notes=notes,
            )
            log.info("order.status_updated")
            return self._reload(session, order)

    def correct_order(
        self,
        order_id: UUID | str,
        dto: OrderCorrectionDTO,
        changed_by: Optional[int] = None,
    ) -> Order:
        """Overwrite order fields (admin correction).

        Unlike ``transition`` this may rewrite the status of a terminal
        order.  A status change is still recorded in the history.

        Raises:
            OrderNotFound: the order does not exist.
        """
        log = logger.bind(order_id=str(order_id))

        with self._session_factory() as session:
            order = session.orders.get_for_update(str(order_id))
            if order is None:
                raise OrderNotFound()

            old_status = order.status
            changed: list[str] = []
            if dto.status is not None and dto.status != order.status:
                order.status = dto.status
                changed.append("status")
            if (
                dto.delivery_address is not None
                and dto.delivery_address != order.delivery_address
            ):
                order.delivery_address = dto.delivery_address
                changed.append("delivery_address")
            if dto.total_amount is not None and dto.total_amount != order.total_amount:
                order.total_amount = dto.total_amount
                changed.append("total_amount")

            if not changed:
                log.info("order.correction_noop")
                return self._reload(session, order)

            session.orders.update_fields(order, changed)
            if "status" in changed:
                session.orders.add_history(
                    order_id=order.id,
                    old_status=old_status,
                    new_status=order.status,
                    changed_by_id=changed_by,
                    notes="Admin correction",
                )
            log.info("order.corrected", fields=changed)
            return self._reload(session, order)

    def delete_order(self, order_id: UUID | str) -> None:
        """Delete an order with its line items and history.

        Stock is not restored.

        Raises:
            OrderNotFound: the order does not exist.
        """
        with self._session_factory() as session:
            order = session.orders.get_for_update(str(order_id))
            if order is None:
                raise OrderNotFound()
            session.orders.delete(order)
        logger.info("order.deleted", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(
        self, order_id: UUID | str, owner_user_id: Optional[int] = None
    ) -> Order:
        """Retrieve a single order by ID.

        With *owner_user_id*, orders of other customers are reported as
        not found.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        session = self._session_factory()
        order = session.orders.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound()
        if owner_user_id is not None and order.customer.user_id != owner_user_id:
            raise OrderNotFound()
        return order

    def list_orders(self, customer_id: Optional[UUID] = None) -> models.QuerySet[Order]:
        """Return orders, newest first, optionally of one customer."""
        return self._session_factory().orders.list(customer_id)

    def list_orders_for_user(self, user_id: int) -> models.QuerySet[Order]:
        """Return the orders placed through *user_id*'s customer profile."""
        session = self._session_factory()
        profile = session.customers.get_by_user_id(user_id)
        if profile is None:
            return session.orders.none()
        return session.orders.list(profile.id)

    @staticmethod
    def _reload(session: UnitOfWork, order: Order) -> Order:
        return session.orders.get_by_id(str(order.id)) or order
