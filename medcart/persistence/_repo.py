"""
State repository — the serialize/deserialize boundary for CartStore and
AddressBook at process start and stop.

Each save replaces the stored state wholesale in one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from medcart.address import Address, AddressBook, AddressType
from medcart.cart import CartLine, CartStore

from medcart.persistence._tables import AddressRow, CartLineRow, SelectionRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersistenceError:
    message: str
    cause: Exception | None = None


class StateRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ───────────────────────────────────────────────────────────────────────────
    # Cart
    # ───────────────────────────────────────────────────────────────────────────

    async def load_cart(self) -> Result[CartStore, PersistenceError]:
        try:
            async with self._session_factory() as session:
                rows = (
                    await session.execute(select(CartLineRow).order_by(CartLineRow.position))
                ).scalars().all()
        except Exception as e:
            return Error(PersistenceError(f"Failed to load cart: {e}", e))

        return Ok(CartStore.from_snapshot(
            CartLine(row.product_id, row.unit_price, row.quantity)
            for row in rows
            if row.quantity >= 1
        ))

    async def save_cart(self, cart: CartStore) -> Result[None, PersistenceError]:
        try:
            async with self._session_factory() as session:
                await session.execute(delete(CartLineRow))
                session.add_all(
                    CartLineRow(
                        product_id=line.product_id,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                        position=i,
                    )
                    for i, line in enumerate(cart.snapshot())
                )
                await session.commit()
        except Exception as e:
            return Error(PersistenceError(f"Failed to save cart: {e}", e))

        logger.debug("Saved %d cart line(s)", len(cart))
        return Ok(None)

    # ───────────────────────────────────────────────────────────────────────────
    # Address book
    # ───────────────────────────────────────────────────────────────────────────

    async def load_address_book(self) -> Result[AddressBook, PersistenceError]:
        try:
            async with self._session_factory() as session:
                rows = (
                    await session.execute(select(AddressRow).order_by(AddressRow.position))
                ).scalars().all()
                selection = await session.get(SelectionRow, 1)
        except Exception as e:
            return Error(PersistenceError(f"Failed to load addresses: {e}", e))

        addresses = [
            Address(
                id=row.id,
                full_name=row.full_name,
                phone=row.phone,
                address_line=row.address_line,
                city=row.city,
                state=row.state,
                pincode=row.pincode,
                type=AddressType(row.type),
                is_default=row.is_default,
            )
            for row in rows
        ]
        return Ok(AddressBook.load(addresses, selection.address_id if selection else None))

    async def save_address_book(self, book: AddressBook) -> Result[None, PersistenceError]:
        addresses, selected_id = book.dump()
        try:
            async with self._session_factory() as session:
                await session.execute(delete(AddressRow))
                await session.execute(delete(SelectionRow))
                session.add_all(
                    AddressRow(
                        id=a.id,
                        full_name=a.full_name,
                        phone=a.phone,
                        address_line=a.address_line,
                        city=a.city,
                        state=a.state,
                        pincode=a.pincode,
                        type=a.type.value,
                        is_default=a.is_default,
                        position=i,
                    )
                    for i, a in enumerate(addresses)
                )
                session.add(SelectionRow(id=1, address_id=selected_id))
                await session.commit()
        except Exception as e:
            return Error(PersistenceError(f"Failed to save addresses: {e}", e))

        logger.debug("Saved %d address(es)", len(addresses))
        return Ok(None)


__all__ = ("PersistenceError", "StateRepository")
