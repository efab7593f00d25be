from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import Role
from modules.customers.models import CustomerProfile
from modules.products.models import Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users by role
# ---------------------------------------------------------------------------


def _user(username: str, role: str) -> User:
    return User.objects.create_user(
        username=username, password="pass12345", role=role
    )


@pytest.fixture()
def admin_user():
    return _user("admin", Role.ADMIN)


@pytest.fixture()
def farmer_user():
    return _user("farmer", Role.FARMER)


@pytest.fixture()
def employee_user():
    return _user("employee", Role.EMPLOYEE)


@pytest.fixture()
def customer_user():
    return _user("customer", Role.CUSTOMER)


@pytest.fixture()
def other_customer_user():
    return _user("other-customer", Role.CUSTOMER)


@pytest.fixture()
def client_for():
    """Return an APIClient force-authenticated as the given user."""

    def _make(user) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _make


# ---------------------------------------------------------------------------
# Domain data
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_profile():
    def _make(user, shipping_address="12 Orchard Lane, Springfield", **extra):
        return CustomerProfile.objects.create(
            user=user,
            full_name=extra.pop("full_name", "Ana Moreira"),
            phone_number=extra.pop("phone_number", "555-0101"),
            shipping_address=shipping_address,
            billing_address=extra.pop("billing_address", shipping_address),
        )

    return _make


@pytest.fixture()
def customer_profile(customer_user, make_profile):
    return make_profile(customer_user)


@pytest.fixture()
def make_product(farmer_user):
    def _make(name="Organic Compost", price="5.00", stock=10, **extra):
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            farmer=farmer_user,
            **extra,
        )

    return _make


@pytest.fixture()
def product(make_product):
    """Scenario product: stock 10, price 5.00."""
    return make_product()


@pytest.fixture()
def stock_snapshot():
    """(product stock, inventory quantity) per product, fresh from the DB."""

    def _snapshot(*products):
        snapshot = []
        for p in products:
            p.refresh_from_db()
            p.inventory.refresh_from_db()
            snapshot.append((p.stock_quantity, p.inventory.quantity))
        return snapshot

    return _snapshot


@pytest.fixture()
def placed_order(customer_user, customer_profile, product):
    """A pending order of 3 x product (total 15.00) placed by ``customer_user``."""
    from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
    from modules.orders.models import Order
    from modules.orders.services import OrderService

    placed = OrderService().place_order(
        customer_user.pk,
        PlaceOrderDTO(items=[PlaceOrderItemDTO(product_id=product.id, quantity=3)]),
    )
    return Order.objects.get(id=placed.order_id)
