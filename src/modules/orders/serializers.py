"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderLineItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order placement request."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class PlaceOrderSerializer(serializers.Serializer):
    """Validates the order placement request payload."""

    items = PlaceOrderItemSerializer(many=True, allow_empty=False)


class TransitionStatusSerializer(serializers.Serializer):
    """Status value is checked by the service so unknown values share one code."""

    status = serializers.CharField()
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class OrderCorrectionSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    delivery_address = serializers.CharField(required=False)
    total_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False
    )

    def validate(self, attrs):
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError(
                {field: ["This field cannot be corrected."] for field in unknown}
            )
        return attrs


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class PlacedOrderSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    total_amount = serializers.DecimalField(max_digits=10, decimal_places=2)


class OrderLineItemSerializer(serializers.ModelSerializer):
    """Read serializer for line items with the purchase-time price."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderLineItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "price_at_purchase",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "changed_by_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    items = OrderLineItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "status",
            "total_amount",
            "delivery_address",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "status",
            "total_amount",
            "created_at",
        ]
        read_only_fields = fields
