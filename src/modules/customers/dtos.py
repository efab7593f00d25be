"""Customer profile DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

_PROFILE_FIELDS = ("full_name", "phone_number", "shipping_address", "billing_address")


class UpdateCustomerProfileDTO(BaseModel):
    """Immutable DTO for profile updates.

    All fields are optional; only supplied fields are written.  Supplied
    names and shipping addresses must not be blank.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    full_name: str | None = None
    phone_number: str | None = None
    shipping_address: str | None = None
    billing_address: str | None = None

    @field_validator("full_name", "shipping_address")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is not None and not v:
            raise ValueError("This field may not be blank.")
        return v

    @model_validator(mode="after")
    def at_least_one_field(self) -> Self:
        if all(getattr(self, name) is None for name in _PROFILE_FIELDS):
            raise ValueError("Provide at least one profile field to update.")
        return self

    def changes(self) -> dict[str, str]:
        """Supplied fields only."""
        return self.model_dump(exclude_none=True)
