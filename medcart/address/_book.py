"""
Address book — saved delivery addresses plus the active selection.

Every operation validates first and mutates only on success.
Exactly one address is default whenever the book is non-empty.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from kungfu import Result, Ok, Error

from medcart.address._schema import (
    AddressFields,
    ValidationError,
    normalize_keys,
    validate_address,
)
from medcart.address._types import Address, UnknownAddress

logger = logging.getLogger(__name__)

type AddressError = ValidationError | UnknownAddress


def new_address_id() -> str:
    return uuid.uuid4().hex[:9]


class AddressBook:
    def __init__(
        self,
        addresses: Iterable[Address] = (),
        selected_id: str | None = None,
        id_factory: Callable[[], str] = new_address_id,
    ) -> None:
        self._addresses: list[Address] = list(addresses)
        self._selected_id = selected_id if self._find(selected_id) is not None else None
        self._new_id = id_factory

        defaults = [a for a in self._addresses if a.is_default]
        if self._addresses and len(defaults) != 1:
            keep = defaults[0].id if defaults else self._addresses[0].id
            self._addresses = [_with_default(a, a.id == keep) for a in self._addresses]

    # ───────────────────────────────────────────────────────────────────────────
    # Operations
    # ───────────────────────────────────────────────────────────────────────────

    def create(self, fields: Mapping[str, Any] | AddressFields) -> Result[Address, ValidationError]:
        """
        Validate and insert.

        The first address of an empty book is always default and selected.
        """
        match validate_address(fields):
            case Error(err):
                return Error(err)
            case Ok(valid):
                pass

        first = not self._addresses
        address = Address.from_fields(self._new_id(), valid, is_default=first or valid.is_default)

        if address.is_default:
            self._clear_default()
        self._addresses.append(address)

        if self._selected_id is None:
            self._selected_id = address.id

        logger.debug("Address %s created (default=%s)", address.id, address.is_default)
        return Ok(address)

    def update(self, address_id: str, fields: Mapping[str, Any] | AddressFields) -> Result[Address, AddressError]:
        """
        Replace the given fields of an existing address.

        Omitted fields keep their current value. is_default=True promotes the
        address; demotion only happens by promoting another one.
        """
        index = self._index(address_id)
        if index is None:
            return Error(UnknownAddress(address_id))

        current = self._addresses[index]
        incoming = fields.model_dump() if isinstance(fields, AddressFields) else normalize_keys(fields)
        merged = {**current.form_data(), **incoming}

        match validate_address(merged):
            case Error(err):
                return Error(err)
            case Ok(valid):
                pass

        promote = valid.is_default and not current.is_default
        updated = Address.from_fields(address_id, valid, is_default=current.is_default or promote)
        if promote:
            self._clear_default()
        self._addresses[index] = updated
        return Ok(updated)

    def delete(self, address_id: str) -> Result[Address, UnknownAddress]:
        index = self._index(address_id)
        if index is None:
            return Error(UnknownAddress(address_id))

        removed = self._addresses.pop(index)

        if removed.is_default and self._addresses:
            first = self._addresses[0]
            self._addresses[0] = _with_default(first, True)

        if self._selected_id == address_id:
            self._selected_id = self._addresses[0].id if self._addresses else None

        return Ok(removed)

    def select(self, address_id: str) -> Result[Address, UnknownAddress]:
        address = self._find(address_id)
        if address is None:
            return Error(UnknownAddress(address_id))
        self._selected_id = address_id
        return Ok(address)

    def set_default(self, address_id: str) -> Result[Address, UnknownAddress]:
        if self._find(address_id) is None:
            return Error(UnknownAddress(address_id))
        self._addresses = [_with_default(a, a.id == address_id) for a in self._addresses]
        return Ok(self._find(address_id))  # type: ignore[arg-type]

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def addresses(self) -> tuple[Address, ...]:
        return tuple(self._addresses)

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected(self) -> Address | None:
        return self._find(self._selected_id)

    @property
    def default(self) -> Address | None:
        return next((a for a in self._addresses if a.is_default), None)

    def get(self, address_id: str) -> Address | None:
        return self._find(address_id)

    def __len__(self) -> int:
        return len(self._addresses)

    # ───────────────────────────────────────────────────────────────────────────
    # Serialize boundary
    # ───────────────────────────────────────────────────────────────────────────

    def dump(self) -> tuple[tuple[Address, ...], str | None]:
        return self.addresses, self._selected_id

    @classmethod
    def load(cls, addresses: Iterable[Address], selected_id: str | None) -> AddressBook:
        return cls(addresses, selected_id)

    # ───────────────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────────────

    def _find(self, address_id: str | None) -> Address | None:
        if address_id is None:
            return None
        return next((a for a in self._addresses if a.id == address_id), None)

    def _index(self, address_id: str) -> int | None:
        for i, a in enumerate(self._addresses):
            if a.id == address_id:
                return i
        return None

    def _clear_default(self) -> None:
        self._addresses = [_with_default(a, False) for a in self._addresses]


def _with_default(address: Address, is_default: bool) -> Address:
    if address.is_default == is_default:
        return address
    return Address(
        id=address.id,
        full_name=address.full_name,
        phone=address.phone,
        address_line=address.address_line,
        city=address.city,
        state=address.state,
        pincode=address.pincode,
        type=address.type,
        is_default=is_default,
    )


__all__ = ("AddressBook", "AddressError", "new_address_id")
