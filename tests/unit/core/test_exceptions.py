"""Unit tests for the domain error taxonomy and its API translation."""

from __future__ import annotations

import pytest
from rest_framework import exceptions

from modules.core.exceptions import (
    BusinessRuleConflict,
    DomainAPIException,
    DomainError,
    DomainExceptionHandler,
    NotFound,
    ProfileError,
    TransactionFailure,
    ValidationFailed,
)
from modules.customers.exceptions import AddressIncomplete, ProfileMissing
from modules.orders.exceptions import InvalidStatus, OrderNotFound
from modules.products.exceptions import InsufficientStock, ProductNotFound

pytestmark = pytest.mark.unit


def _convert(exc):
    return DomainExceptionHandler(exc, {}).convert_known_exceptions(exc)


class TestTaxonomy:
    @pytest.mark.parametrize(
        "error, status_code",
        [
            (ValidationFailed(), 400),
            (ProfileError(), 400),
            (NotFound(), 404),
            (BusinessRuleConflict(), 409),
            (TransactionFailure(), 500),
        ],
    )
    def test_status_codes(self, error, status_code):
        assert error.status_code == status_code

    def test_default_message(self):
        assert DomainError().message == "The request could not be processed."
        assert str(NotFound("Gone.")) == "Gone."

    def test_concrete_errors(self):
        assert isinstance(ProfileMissing(), ProfileError)
        assert isinstance(AddressIncomplete(), ProfileError)
        assert isinstance(InvalidStatus("x"), ValidationFailed)
        assert isinstance(OrderNotFound(), NotFound)
        assert isinstance(ProductNotFound("p"), NotFound)


class TestDomainExceptionHandler:
    def test_validation_failed_becomes_drf_validation_error(self):
        converted = _convert(InvalidStatus("'x' is not a valid order status."))
        assert isinstance(converted, exceptions.ValidationError)
        assert converted.get_codes() == ["invalid_status"]

    def test_conflict_keeps_status_and_code(self):
        error = InsufficientStock(
            product_id="p", product_name="Compost", requested=5, available=2
        )
        converted = _convert(error)
        assert isinstance(converted, DomainAPIException)
        assert converted.status_code == 409
        assert converted.get_codes() == "insufficient_stock"
        assert "Compost" in str(converted.detail)

    def test_transaction_failure_hides_cause(self):
        try:
            raise TransactionFailure() from RuntimeError("deadlock on products")
        except TransactionFailure as exc:
            converted = _convert(exc)
        assert converted.status_code == 500
        assert "deadlock" not in str(converted.detail)

    def test_unhandled_exception_is_generic(self):
        handler = DomainExceptionHandler(KeyError("secret"), {})
        converted = handler.convert_unhandled_exceptions(KeyError("secret"))
        assert isinstance(converted, exceptions.APIException)
        assert converted.status_code == 500
        assert "secret" not in str(converted.detail)

    def test_non_domain_exceptions_fall_through(self):
        exc = exceptions.PermissionDenied()
        assert _convert(exc) is exc
