"""Integration tests for the Celery configuration and stock tasks."""

import pytest

from modules.orders.dtos import PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.services import OrderService

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously in the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    """Celery loads through Django settings."""

    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "farm_backoffice"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "farm_backoffice"

    def test_celery_broker_url_configured(self, settings):
        assert settings.CELERY_BROKER_URL is not None
        assert "redis" in settings.CELERY_BROKER_URL

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE


class TestLowStockNotification:
    def test_enqueued_after_commit_when_threshold_crossed(
        self,
        customer_user,
        customer_profile,
        product,
        django_capture_on_commit_callbacks,
        caplog,
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            OrderService().place_order(
                customer_user.pk,
                PlaceOrderDTO(
                    items=[PlaceOrderItemDTO(product_id=product.id, quantity=3)]
                ),
            )

        assert len(callbacks) == 1
        assert any("stock.low_stock" in r.getMessage() for r in caplog.records)

    def test_not_enqueued_above_threshold(
        self,
        customer_user,
        customer_profile,
        make_product,
        django_capture_on_commit_callbacks,
    ):
        product = make_product(stock=100)
        with django_capture_on_commit_callbacks() as callbacks:
            OrderService().place_order(
                customer_user.pk,
                PlaceOrderDTO(
                    items=[PlaceOrderItemDTO(product_id=product.id, quantity=3)]
                ),
            )

        assert callbacks == []

    def test_disabled_by_setting(
        self,
        settings,
        customer_user,
        customer_profile,
        product,
        django_capture_on_commit_callbacks,
    ):
        settings.LOW_STOCK_NOTIFICATIONS = False
        with django_capture_on_commit_callbacks() as callbacks:
            OrderService().place_order(
                customer_user.pk,
                PlaceOrderDTO(
                    items=[PlaceOrderItemDTO(product_id=product.id, quantity=3)]
                ),
            )

        assert callbacks == []
