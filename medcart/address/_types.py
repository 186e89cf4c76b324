"""
Address types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from medcart.address._schema import AddressFields, AddressType


@dataclass(frozen=True, slots=True)
class Address:
    """A saved delivery address. id is opaque and generated on creation."""

    id: str
    full_name: str
    phone: str
    address_line: str
    city: str
    state: str
    pincode: str
    type: AddressType = AddressType.HOME
    is_default: bool = False

    @classmethod
    def from_fields(cls, address_id: str, fields: AddressFields, is_default: bool) -> Address:
        return cls(
            id=address_id,
            full_name=fields.full_name,
            phone=fields.phone,
            address_line=fields.address_line,
            city=fields.city,
            state=fields.state,
            pincode=fields.pincode,
            type=fields.type,
            is_default=is_default,
        )

    def form_data(self) -> dict[str, Any]:
        """Fields as a form mapping (for re-validation or partial edits)."""
        return {
            "full_name": self.full_name,
            "phone": self.phone,
            "address_line": self.address_line,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "type": self.type,
            "is_default": self.is_default,
        }

    @property
    def one_line(self) -> str:
        return f"{self.address_line}, {self.city}, {self.state} - {self.pincode}"


@dataclass(frozen=True, slots=True)
class UnknownAddress:
    address_id: str

    @property
    def message(self) -> str:
        return f"Address {self.address_id} not found"


__all__ = ("Address", "UnknownAddress")
