"""
Address schema — field rules applied before the book accepts a record.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from kungfu import Result, Ok, Error


INDIAN_STATES: tuple[str, ...] = (
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka",
    "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya", "Mizoram",
    "Nagaland", "Odisha", "Punjab", "Rajasthan", "Sikkim", "Tamil Nadu",
    "Telangana", "Tripura", "Uttar Pradesh", "Uttarakhand", "West Bengal",
    "Andaman and Nicobar Islands", "Chandigarh", "Dadra and Nagar Haveli",
    "Daman and Diu", "Delhi", "Jammu and Kashmir", "Ladakh", "Lakshadweep",
    "Puducherry",
)


class AddressType(str, Enum):
    HOME = "Home"
    WORK = "Work"
    OTHER = "Other"


# Message shown for any rule failing on a field.
FIELD_MESSAGES: dict[str, str] = {
    "full_name": "Full name must be 3-50 characters, letters and spaces only",
    "phone": "Please enter a valid 10-digit Indian mobile number",
    "address_line": "Address must be between 10 and 200 characters",
    "city": "City must be 2-50 characters, letters and spaces only",
    "state": "Please select a state",
    "pincode": "Please enter a valid 6-digit PIN code",
    "type": "Address type must be Home, Work or Other",
    "is_default": "Default flag must be true or false",
}


class AddressFields(BaseModel):
    """
    Validated address form payload.

    Accepts snake_case or the storefront's camelCase keys (fullName, addressLine).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    full_name: str = Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z\s]+$")
    phone: str = Field(pattern=r"^[6-9][0-9]{9}$")
    address_line: str = Field(min_length=10, max_length=200)
    city: str = Field(min_length=2, max_length=50, pattern=r"^[a-zA-Z\s]+$")
    state: str
    pincode: str = Field(pattern=r"^[1-9][0-9]{5}$")
    type: AddressType = AddressType.HOME
    is_default: bool = False

    @field_validator("state")
    @classmethod
    def _known_state(cls, value: str) -> str:
        if value not in INDIAN_STATES:
            raise ValueError("unknown state")
        return value


_FIELD_BY_ALIAS = {to_camel(name): name for name in AddressFields.model_fields}


def normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase form keys onto field names."""
    return {_FIELD_BY_ALIAS.get(k, k): v for k, v in data.items()}


@dataclass(frozen=True, slots=True)
class ValidationError:
    """
    Address rejected by the schema.

    fields maps each offending field (snake_case) to a user-facing message.
    """

    fields: dict[str, str] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return "; ".join(f"{name}: {msg}" for name, msg in self.fields.items())


def validate_address(data: Mapping[str, Any] | AddressFields) -> Result[AddressFields, ValidationError]:
    """Validate a raw form mapping. Never raises on bad input."""
    if isinstance(data, AddressFields):
        data = data.model_dump()

    try:
        return Ok(AddressFields.model_validate(dict(data)))
    except pydantic.ValidationError as exc:
        fields: dict[str, str] = {}
        for err in exc.errors():
            loc = str(err["loc"][0]) if err["loc"] else "__root__"
            name = _FIELD_BY_ALIAS.get(loc, loc)
            fields.setdefault(name, FIELD_MESSAGES.get(name, err["msg"]))
        return Error(ValidationError(fields))


__all__ = (
    "INDIAN_STATES",
    "AddressType",
    "AddressFields",
    "ValidationError",
    "validate_address",
    "normalize_keys",
    "FIELD_MESSAGES",
)
