"""Unit tests for CustomerProfileService."""

from __future__ import annotations

import pytest

from modules.customers.constants import (
    PLACEHOLDER_ADDRESS,
    PLACEHOLDER_FULL_NAME,
    PLACEHOLDER_PHONE,
)
from modules.customers.dtos import UpdateCustomerProfileDTO
from modules.customers.models import CustomerProfile
from modules.customers.repositories.django_repository import (
    CustomerProfileDjangoRepository,
)
from modules.customers.services import CustomerProfileService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CustomerProfileService(repository=CustomerProfileDjangoRepository())


class TestGetProfile:
    def test_creates_placeholder_on_first_access(self, service, customer_user):
        profile = service.get_profile(customer_user.pk)

        assert profile.full_name == PLACEHOLDER_FULL_NAME
        assert profile.phone_number == PLACEHOLDER_PHONE
        assert profile.shipping_address == PLACEHOLDER_ADDRESS
        assert profile.billing_address == PLACEHOLDER_ADDRESS

    def test_returns_existing_profile(self, service, customer_user, customer_profile):
        profile = service.get_profile(customer_user.pk)

        assert profile.id == customer_profile.id
        assert CustomerProfile.objects.filter(user=customer_user).count() == 1


class TestUpdateProfile:
    def test_updates_supplied_fields_only(
        self, service, customer_user, customer_profile
    ):
        dto = UpdateCustomerProfileDTO(shipping_address="22 Harvest Way")
        profile = service.update_profile(customer_user.pk, dto)

        profile.refresh_from_db()
        assert profile.shipping_address == "22 Harvest Way"
        assert profile.full_name == customer_profile.full_name

    def test_update_without_profile_starts_from_placeholder(
        self, service, customer_user
    ):
        dto = UpdateCustomerProfileDTO(shipping_address="22 Harvest Way")
        profile = service.update_profile(customer_user.pk, dto)

        assert profile.shipping_address == "22 Harvest Way"
        assert profile.full_name == PLACEHOLDER_FULL_NAME
