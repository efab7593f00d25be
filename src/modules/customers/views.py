"""Customer profile API views.

Exposes ``CustomerProfileService`` for the authenticated caller only;
there is no way to read or edit another user's profile here.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.validation import build_dto
from modules.customers.dtos import UpdateCustomerProfileDTO
from modules.customers.repositories.django_repository import (
    CustomerProfileDjangoRepository,
)
from modules.customers.serializers import (
    CustomerProfileSerializer,
    UpdateCustomerProfileSerializer,
)
from modules.customers.services import CustomerProfileService


class CustomerProfileView(APIView):
    """GET/PUT/PATCH /api/v1/customers/me/"""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerProfileService(
            repository=CustomerProfileDjangoRepository()
        )

    @extend_schema(responses=CustomerProfileSerializer)
    def get(self, request: Request) -> Response:
        profile = self._service.get_profile(request.user.pk)
        return Response(CustomerProfileSerializer(profile).data)

    @extend_schema(
        request=UpdateCustomerProfileSerializer,
        responses=CustomerProfileSerializer,
    )
    def put(self, request: Request) -> Response:
        serializer = UpdateCustomerProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = build_dto(UpdateCustomerProfileDTO, **serializer.validated_data)

        profile = self._service.update_profile(request.user.pk, dto)
        return Response(CustomerProfileSerializer(profile).data)

    def patch(self, request: Request) -> Response:
        return self.put(request)
