"""
Address — validated delivery addresses and the active selection.

    from medcart import address as A

    book = A.AddressBook()
    match book.create({"fullName": "Asha Rao", "phone": "9876543210", ...}):
        case Ok(addr): ...
        case Error(err): show(err.fields)
"""

from medcart.address._schema import (
    INDIAN_STATES,
    AddressType,
    AddressFields,
    ValidationError,
    validate_address,
)
from medcart.address._types import Address, UnknownAddress
from medcart.address._book import AddressBook, AddressError, new_address_id

__all__ = (
    "INDIAN_STATES",
    "AddressType",
    "AddressFields",
    "ValidationError",
    "validate_address",
    "Address",
    "UnknownAddress",
    "AddressBook",
    "AddressError",
    "new_address_id",
)
