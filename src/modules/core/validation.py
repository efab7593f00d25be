"""Bridge between pydantic DTOs and DRF validation errors."""

from __future__ import annotations

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from rest_framework import serializers

DTO = TypeVar("DTO", bound=BaseModel)


def build_dto(dto_class: Type[DTO], **data: Any) -> DTO:
    """Instantiate *dto_class*, re-raising pydantic errors as a DRF 400."""
    try:
        return dto_class(**data)
    except PydanticValidationError as exc:
        raise serializers.ValidationError(_as_drf_detail(exc)) from exc


def _as_drf_detail(exc: PydanticValidationError) -> Dict[str, List[str]]:
    detail: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        message = error["msg"].removeprefix("Value error, ")
        detail.setdefault(field, []).append(message)
    return detail
