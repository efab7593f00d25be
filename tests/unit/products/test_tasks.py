"""Unit tests for the low-stock Celery task."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.products.models import InventoryRecord
from modules.products.tasks import notify_low_stock

pytestmark = pytest.mark.unit


class TestNotifyLowStock:
    def test_reports_low_stock(self, make_product):
        low = make_product(name="Neem Oil", stock=4)
        assert notify_low_stock(str(low.id), 4) is True

    def test_skips_restocked_product(self, make_product):
        restocked = make_product(name="Neem Oil", stock=4)
        InventoryRecord.objects.filter(product=restocked).update(quantity=60)
        assert notify_low_stock(str(restocked.id), 4) is False

    def test_skips_missing_product(self):
        assert notify_low_stock(str(uuid4()), 0) is False

    def test_runs_eagerly_through_delay(self, make_product):
        low = make_product(name="Neem Oil", stock=2)
        result = notify_low_stock.delay(str(low.id), 2)
        assert result.successful()
        assert result.result is True
