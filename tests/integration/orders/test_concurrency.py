"""Stock concurrency integration tests.

Proves that the row locks taken during order placement serialize
concurrent reservations of the same product.

Scenario:
- Product with **stock = 5**.
- Two customers each try to buy all 5 units at the same time.
- Exactly one succeeds, the other gets ``InsufficientStock``.
- Final stock is 0 on both the product and its inventory row.

Uses ``TransactionTestCase`` so each thread sees committed data and the
database's row-level locking behaves realistically.  Backends without
``SELECT ... FOR UPDATE`` (SQLite) skip the threaded case; the sequential
case below still checks the same outcome there.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
import structlog
from django.db import connections
from django.test import TransactionTestCase, skipUnlessDBFeature

from modules.accounts.models import Role, User
from modules.customers.models import CustomerProfile
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.models import Order
from modules.orders.services import OrderService
from modules.products.exceptions import InsufficientStock
from modules.products.models import Product

logger = structlog.get_logger(__name__)

INITIAL_STOCK = 5


def _customer(username: str) -> User:
    user = User.objects.create_user(username, password="pass12345", role=Role.CUSTOMER)
    CustomerProfile.objects.create(
        user=user,
        full_name=username.title(),
        shipping_address=f"1 {username.title()} Farm Road",
    )
    return user


def _dto(product: Product, quantity: int) -> PlaceOrderDTO:
    return PlaceOrderDTO(
        items=[PlaceOrderItemDTO(product_id=product.id, quantity=quantity)]
    )


@skipUnlessDBFeature("has_select_for_update")
class TestConcurrentReservation(TransactionTestCase):
    """Two simultaneous orders for the whole stock: exactly one wins."""

    def setUp(self):
        self.buyers = [_customer("alice"), _customer("bruno")]
        self.product = Product.objects.create(
            name="Drip Irrigation Kit",
            price=Decimal("64.00"),
            stock_quantity=INITIAL_STOCK,
        )

    def _place_in_thread(self, user: User) -> str:
        try:
            OrderService().place_order(user.pk, _dto(self.product, INITIAL_STOCK))
            logger.info("concurrency.thread_succeeded", user_id=user.pk)
            return "success"
        except InsufficientStock:
            logger.info("concurrency.thread_rejected", user_id=user.pk)
            return "insufficient"
        finally:
            connections.close_all()

    def test_exactly_one_order_wins(self):
        with ThreadPoolExecutor(max_workers=len(self.buyers)) as pool:
            results = list(pool.map(self._place_in_thread, self.buyers))

        self.assertEqual(sorted(results), ["insufficient", "success"])
        self.assertEqual(Order.objects.count(), 1)

        self.product.refresh_from_db()
        self.product.inventory.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)
        self.assertEqual(self.product.inventory.quantity, 0)


@pytest.mark.integration
class TestSequentialReservation:
    def test_second_order_for_same_stock_rejected(self, make_product, stock_snapshot):
        product = make_product(stock=INITIAL_STOCK)
        first, second = _customer("alice"), _customer("bruno")
        service = OrderService()

        service.place_order(first.pk, _dto(product, INITIAL_STOCK))
        with pytest.raises(InsufficientStock) as exc_info:
            service.place_order(second.pk, _dto(product, INITIAL_STOCK))

        assert exc_info.value.available == 0
        assert Order.objects.count() == 1
        assert stock_snapshot(product) == [(0, 0)]
