"""Customer profile DRF serializers for API input/output.

Business validation lives in ``UpdateCustomerProfileDTO``; these only
handle request parsing and response rendering.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.gate import is_placeholder_address
from modules.customers.models import CustomerProfile


class UpdateCustomerProfileSerializer(serializers.Serializer):
    """Parses a profile update request; all fields optional."""

    full_name = serializers.CharField(required=False, max_length=255)
    phone_number = serializers.CharField(
        required=False, max_length=32, allow_blank=True
    )
    shipping_address = serializers.CharField(required=False)
    billing_address = serializers.CharField(required=False, allow_blank=True)


class CustomerProfileSerializer(serializers.ModelSerializer):
    """Read serializer for the caller's profile."""

    can_place_orders = serializers.SerializerMethodField()

    class Meta:
        model = CustomerProfile
        fields = [
            "id",
            "full_name",
            "phone_number",
            "shipping_address",
            "billing_address",
            "can_place_orders",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_can_place_orders(self, obj: CustomerProfile) -> bool:
        return not is_placeholder_address(obj.shipping_address)
