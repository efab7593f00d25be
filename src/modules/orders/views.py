"""Order API views.

Exposes ``OrderService`` via HTTP using a DRF ViewSet.  Capability checks
run first (``HasCapability``); domain exceptions raised by the service are
rendered by the project exception handler, so no view builds an error
body itself.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.capabilities import Capability, has_capability
from modules.accounts.permissions import HasCapability
from modules.core.validation import build_dto
from modules.orders.dtos import OrderCorrectionDTO, PlaceOrderDTO, PlaceOrderItemDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.serializers import (
    OrderCorrectionSerializer,
    OrderListSerializer,
    OrderSerializer,
    PlacedOrderSerializer,
    PlaceOrderSerializer,
    TransitionStatusSerializer,
)
from modules.orders.services import OrderService

_VIEW_ORDERS = (Capability.VIEW_ALL_ORDERS, Capability.VIEW_OWN_ORDERS)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [HasCapability]
    required_capabilities = {
        "create": (Capability.PLACE_ORDER,),
        "list": _VIEW_ORDERS,
        "retrieve": _VIEW_ORDERS,
        "set_status": (Capability.TRANSITION_ORDER_STATUS,),
        "update": (Capability.CORRECT_ORDER,),
        "partial_update": (Capability.CORRECT_ORDER,),
        "destroy": (Capability.DELETE_ORDER,),
    }

    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService()

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_placement"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _sees_all_orders(self) -> bool:
        return has_capability(self.request.user, Capability.VIEW_ALL_ORDERS)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @extend_schema(request=PlaceOrderSerializer, responses={201: PlacedOrderSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = PlaceOrderDTO(
            items=[
                PlaceOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in serializer.validated_data["items"]
            ]
        )
        placed = self._service.place_order(request.user.pk, dto)

        out = PlacedOrderSerializer(placed)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Order.objects.none()
        if self._sees_all_orders():
            return self._service.list_orders()
        return self._service.list_orders_for_user(self.request.user.pk)

    @extend_schema(responses=OrderListSerializer(many=True))
    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer, date range, total range) is handled
        by ``OrderFilter``; customers only ever see their own orders.
        """
        queryset = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = OrderListSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        serializer = OrderListSerializer(queryset, many=True)
        return Response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        owner = None if self._sees_all_orders() else request.user.pk
        order = self._service.get_order(pk, owner_user_id=owner)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @extend_schema(request=TransitionStatusSerializer, responses=OrderSerializer)
    @action(detail=True, methods=["put"], url_path="status", url_name="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/status/"""
        serializer = TransitionStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.transition(
            order_id=pk,
            new_status=serializer.validated_data["status"],
            changed_by=request.user.pk,
            notes=serializer.validated_data["notes"],
        )
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Admin correction / deletion
    # ------------------------------------------------------------------

    @extend_schema(request=OrderCorrectionSerializer, responses=OrderSerializer)
    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/orders/{pk}/"""
        serializer = OrderCorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = build_dto(OrderCorrectionDTO, **serializer.validated_data)

        order = self._service.correct_order(pk, dto, changed_by=request.user.pk)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=OrderCorrectionSerializer, responses=OrderSerializer)
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        self._service.delete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
