"""Unit tests for OrderService.transition (order lifecycle)."""

from __future__ import annotations

import logging
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import InvalidStatus, OrderNotFound
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService()


def _history(order):
    return list(
        OrderStatusHistory.objects.filter(order=order).values_list(
            "old_status", "new_status"
        )
    )


class TestTransition:
    def test_forward_step(self, service, placed_order, employee_user):
        order = service.transition(
            placed_order.id,
            OrderStatus.PROCESSING,
            changed_by=employee_user.pk,
            notes="Packing",
        )

        assert order.status == OrderStatus.PROCESSING
        latest = OrderStatusHistory.objects.filter(order=placed_order).last()
        assert latest.old_status == OrderStatus.PENDING
        assert latest.new_status == OrderStatus.PROCESSING
        assert latest.changed_by_id == employee_user.pk
        assert latest.notes == "Packing"

    def test_full_lifecycle_records_every_step(self, service, placed_order):
        for status in ("processing", "shipped", "delivered"):
            service.transition(placed_order.id, status)

        assert _history(placed_order) == [
            (None, "pending"),
            ("pending", "processing"),
            ("processing", "shipped"),
            ("shipped", "delivered"),
        ]

    def test_accepts_mixed_case_status(self, service, placed_order):
        order = service.transition(placed_order.id, " Shipped ")
        assert order.status == OrderStatus.SHIPPED

    def test_skipping_states_is_allowed_and_logged(
        self, service, placed_order, caplog
    ):
        with caplog.at_level(logging.INFO):
            order = service.transition(placed_order.id, OrderStatus.DELIVERED)

        assert order.status == OrderStatus.DELIVERED
        messages = " ".join(r.getMessage() for r in caplog.records)
        assert "order.transition_skips_states" in messages

    def test_cancel_from_non_terminal(self, service, placed_order, stock_snapshot):
        service.transition(placed_order.id, OrderStatus.PROCESSING)
        order = service.transition(placed_order.id, OrderStatus.CANCELLED)

        assert order.status == OrderStatus.CANCELLED
        # Cancelling does not restock.
        product = placed_order.items.get().product
        assert stock_snapshot(product) == [(7, 7)]

    def test_same_status_is_noop(self, service, placed_order):
        order = service.transition(placed_order.id, OrderStatus.PENDING)

        assert order.status == OrderStatus.PENDING
        assert len(_history(placed_order)) == 1

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_state_rejects_transitions(self, service, placed_order, terminal):
        service.transition(placed_order.id, terminal)

        with pytest.raises(InvalidStatus):
            service.transition(placed_order.id, OrderStatus.PROCESSING)

        placed_order.refresh_from_db()
        assert placed_order.status == terminal

    @pytest.mark.parametrize("value", ["archived", "", None, "PENDINGX"])
    def test_unknown_status(self, service, placed_order, value):
        with pytest.raises(InvalidStatus):
            service.transition(placed_order.id, value)

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.transition(uuid4(), OrderStatus.SHIPPED)

    def test_malformed_order_id(self, service):
        with pytest.raises(OrderNotFound):
            service.transition("not-a-uuid", OrderStatus.SHIPPED)

    def test_does_not_change_total(self, service, placed_order):
        service.transition(placed_order.id, OrderStatus.SHIPPED)
        assert Order.objects.get(id=placed_order.id).total_amount == (
            placed_order.total_amount
        )
