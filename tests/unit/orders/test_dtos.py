"""Unit tests for order DTOs."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus
from modules.orders.dtos import OrderCorrectionDTO, PlaceOrderDTO, PlaceOrderItemDTO

pytestmark = pytest.mark.unit


class TestPlaceOrderDTO:
    def test_parses_string_ids(self):
        product_id = uuid4()
        dto = PlaceOrderDTO(
            items=[{"product_id": str(product_id), "quantity": 2}],
        )
        assert dto.items == [PlaceOrderItemDTO(product_id=product_id, quantity=2)]

    def test_rejects_malformed_product_id(self):
        with pytest.raises(ValidationError):
            PlaceOrderItemDTO(product_id="abc", quantity=1)


class TestOrderCorrectionDTO:
    def test_status_must_be_known(self):
        with pytest.raises(ValidationError):
            OrderCorrectionDTO(status="archived")

    def test_any_known_status_accepted(self):
        assert OrderCorrectionDTO(status="delivered").status == OrderStatus.DELIVERED

    def test_requires_a_field(self):
        with pytest.raises(ValidationError, match="at least one field"):
            OrderCorrectionDTO()

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            OrderCorrectionDTO(customer_id=uuid4())

    def test_rejects_negative_total(self):
        with pytest.raises(ValidationError, match="non-negative"):
            OrderCorrectionDTO(total_amount=Decimal("-1"))

    def test_total_rounded_half_up(self):
        dto = OrderCorrectionDTO(total_amount=Decimal("10.005"))
        assert dto.total_amount == Decimal("10.01")

    def test_zero_total_allowed(self):
        assert OrderCorrectionDTO(total_amount=0).total_amount == Decimal("0.00")

    def test_blank_address_rejected(self):
        with pytest.raises(ValidationError, match="blank"):
            OrderCorrectionDTO(delivery_address="  ")
