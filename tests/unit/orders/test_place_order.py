"""Unit tests for OrderService.place_order (transaction coordinator)."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import DatabaseError

from modules.core.exceptions import TransactionFailure
from modules.customers.exceptions import AddressIncomplete, ProfileMissing
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlacedOrder, PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.exceptions import OrderValidationError
from modules.orders.models import Order, OrderLineItem, OrderStatusHistory
from modules.orders.services import OrderService
from modules.products.exceptions import InsufficientStock, ProductNotFound
from modules.products.ledger import StockLedger

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService()


def _dto(*pairs):
    return PlaceOrderDTO(
        items=[PlaceOrderItemDTO(product_id=p.id, quantity=q) for p, q in pairs]
    )


def _no_order_rows():
    return (
        Order.objects.count() == 0
        and OrderLineItem.objects.count() == 0
        and OrderStatusHistory.objects.count() == 0
    )


class TestPlaceOrderSuccess:
    def test_scenario_single_product(
        self, service, customer_user, customer_profile, product, stock_snapshot
    ):
        placed = service.place_order(customer_user.pk, _dto((product, 3)))

        assert isinstance(placed, PlacedOrder)
        assert placed.total_amount == Decimal("15.00")
        assert stock_snapshot(product) == [(7, 7)]

        order = Order.objects.get(id=placed.order_id)
        assert order.status == OrderStatus.PENDING
        assert order.customer_id == customer_profile.id
        assert order.total_amount == Decimal("15.00")
        assert order.delivery_address == customer_profile.shipping_address

    def test_line_items_snapshot_price(
        self, service, customer_user, customer_profile, product
    ):
        placed = service.place_order(customer_user.pk, _dto((product, 2)))

        product.price = Decimal("9.99")
        product.save()

        item = OrderLineItem.objects.get(order_id=placed.order_id)
        assert item.product_id == product.id
        assert item.quantity == 2
        assert item.price_at_purchase == Decimal("5.00")
        assert item.subtotal == Decimal("10.00")

    def test_delivery_address_is_a_snapshot(
        self, service, customer_user, customer_profile, product
    ):
        placed = service.place_order(customer_user.pk, _dto((product, 1)))

        customer_profile.shipping_address = "New address"
        customer_profile.save()

        order = Order.objects.get(id=placed.order_id)
        assert order.delivery_address == "12 Orchard Lane, Springfield"

    def test_records_initial_history(
        self, service, customer_user, customer_profile, product
    ):
        placed = service.place_order(customer_user.pk, _dto((product, 1)))

        history = OrderStatusHistory.objects.get(order_id=placed.order_id)
        assert history.old_status is None
        assert history.new_status == OrderStatus.PENDING
        assert history.changed_by_id == customer_user.pk

    def test_multiple_products(
        self, service, customer_user, customer_profile, make_product, stock_snapshot
    ):
        compost = make_product(name="Compost", price="12.00", stock=20)
        apples = make_product(name="Apples", price="2.10", stock=50)

        placed = service.place_order(
            customer_user.pk, _dto((compost, 2), (apples, 10))
        )

        assert placed.total_amount == Decimal("45.00")
        assert stock_snapshot(compost, apples) == [(18, 18), (40, 40)]
        assert OrderLineItem.objects.filter(order_id=placed.order_id).count() == 2

    def test_logs_each_step(
        self, service, customer_user, customer_profile, product, caplog
    ):
        with caplog.at_level(logging.INFO):
            service.place_order(customer_user.pk, _dto((product, 1)))

        messages = " ".join(record.getMessage() for record in caplog.records)
        for event in (
            "order.placement_started",
            "order.profile_verified",
            "order.assembled",
            "order.created",
            "order.line_item_applied",
            "order.placed",
        ):
            assert event in messages


class TestPlaceOrderFailures:
    def test_scenario_second_order_exceeds_remaining_stock(
        self, service, customer_user, customer_profile, product, stock_snapshot
    ):
        service.place_order(customer_user.pk, _dto((product, 3)))

        with pytest.raises(InsufficientStock) as exc_info:
            service.place_order(customer_user.pk, _dto((product, 8)))

        assert exc_info.value.product_name == product.name
        assert stock_snapshot(product) == [(7, 7)]
        assert Order.objects.count() == 1

    def test_any_item_over_stock_changes_nothing(
        self, service, customer_user, customer_profile, make_product, stock_snapshot
    ):
        plenty = make_product(name="Plenty", stock=100)
        scarce = make_product(name="Scarce", stock=1)

        with pytest.raises(InsufficientStock):
            service.place_order(customer_user.pk, _dto((plenty, 5), (scarce, 2)))

        assert stock_snapshot(plenty, scarce) == [(100, 100), (1, 1)]
        assert _no_order_rows()

    def test_missing_profile(self, service, customer_user, product, stock_snapshot):
        with pytest.raises(ProfileMissing):
            service.place_order(customer_user.pk, _dto((product, 1)))
        assert stock_snapshot(product) == [(10, 10)]
        assert _no_order_rows()

    def test_placeholder_address(
        self, service, customer_user, make_profile, product, stock_snapshot
    ):
        make_profile(customer_user, shipping_address="Please update your address")

        with pytest.raises(AddressIncomplete):
            service.place_order(customer_user.pk, _dto((product, 1)))
        assert stock_snapshot(product) == [(10, 10)]
        assert _no_order_rows()

    def test_unknown_product(self, service, customer_user, customer_profile, product):
        dto = PlaceOrderDTO(
            items=[
                PlaceOrderItemDTO(product_id=product.id, quantity=1),
                PlaceOrderItemDTO(product_id=uuid4(), quantity=1),
            ]
        )
        with pytest.raises(ProductNotFound):
            service.place_order(customer_user.pk, dto)
        assert _no_order_rows()

    def test_invalid_items(self, service, customer_user, customer_profile):
        with pytest.raises(OrderValidationError):
            service.place_order(customer_user.pk, PlaceOrderDTO(items=[]))

    def test_failure_after_order_insert_rolls_back_everything(
        self, customer_user, customer_profile, make_product, stock_snapshot
    ):
        first = make_product(name="First", stock=10)
        second = make_product(name="Second", stock=10)

        class FailingLedger(StockLedger):
            calls = 0

            def adjust_stock(self, session, product_id, delta):
                FailingLedger.calls += 1
                if FailingLedger.calls == 2:
                    raise DatabaseError("connection lost")
                return super().adjust_stock(session, product_id, delta)

        service = OrderService(ledger=FailingLedger())

        with pytest.raises(TransactionFailure) as exc_info:
            service.place_order(customer_user.pk, _dto((first, 2), (second, 3)))

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert stock_snapshot(first, second) == [(10, 10), (10, 10)]
        assert _no_order_rows()

    def test_failure_is_logged(self, service, customer_user, product, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(ProfileMissing):
                service.place_order(customer_user.pk, _dto((product, 1)))

        messages = " ".join(record.getMessage() for record in caplog.records)
        assert "order.placement_failed" in messages
        assert "profile_missing" in messages
