"""
Cart store — the only owner of cart lines.

Totals are folded over the line list on every read; there is no cached
subtotal to drift out of sync.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kungfu import Result, Ok, Error

from medcart._types import Money, ZERO, to_money
from medcart.cart._types import CartLine, CartTotals, QuantityClamped

logger = logging.getLogger(__name__)


class CartStore:
    """
    Ordered collection of CartLine keyed by product_id.

    Example:
        cart = CartStore()
        cart.add_line("101", Decimal("120"), max_quantity=5)
        cart.set_quantity("101", 3)
        cart.totals()  # CartTotals(subtotal=Decimal('360'), item_count=3)
    """

    def __init__(self, lines: Iterable[CartLine] = ()) -> None:
        self._lines: dict[str, CartLine] = {}
        for line in lines:
            if line.quantity >= 1:
                self._lines[line.product_id] = line

    # ───────────────────────────────────────────────────────────────────────────
    # Mutations
    # ───────────────────────────────────────────────────────────────────────────

    def add_line(
        self,
        product_id: str,
        unit_price: Money | int | float | str,
        max_quantity: int,
    ) -> Result[CartLine, QuantityClamped]:
        """
        Add one unit of product_id.

        Returns Error(QuantityClamped) when the ceiling was hit; the line then
        holds max_quantity units (or is absent when max_quantity < 1).
        """
        existing = self._lines.get(product_id)
        requested = existing.quantity + 1 if existing else 1

        if requested > max_quantity:
            clamp = QuantityClamped(product_id, requested, max_quantity)
            if max_quantity < 1:
                self._lines.pop(product_id, None)
            else:
                price = existing.unit_price if existing else to_money(unit_price)
                self._lines[product_id] = CartLine(product_id, price, max_quantity)
            logger.info("Clamped %s at %d (requested %d)", product_id, clamp.quantity, requested)
            return Error(clamp)

        if existing:
            line = CartLine(product_id, existing.unit_price, requested)
        else:
            line = CartLine(product_id, to_money(unit_price), 1)
        self._lines[product_id] = line
        return Ok(line)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """quantity <= 0 removes the line; unknown products are ignored."""
        existing = self._lines.get(product_id)
        if existing is None:
            return
        if quantity <= 0:
            del self._lines[product_id]
            return
        self._lines[product_id] = CartLine(product_id, existing.unit_price, quantity)

    def remove_line(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    def totals(self) -> CartTotals:
        subtotal = ZERO
        item_count = 0
        for line in self._lines.values():
            subtotal += line.line_total
            item_count += line.quantity
        return CartTotals(subtotal=subtotal, item_count=item_count)

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, product_id: str) -> CartLine | None:
        return self._lines.get(product_id)

    def contains(self, product_id: str) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def __len__(self) -> int:
        return len(self._lines)

    # ───────────────────────────────────────────────────────────────────────────
    # Serialize boundary
    # ───────────────────────────────────────────────────────────────────────────

    def snapshot(self) -> tuple[CartLine, ...]:
        """Immutable copy of the current lines."""
        return self.lines

    @classmethod
    def from_snapshot(cls, lines: Iterable[CartLine]) -> CartStore:
        return cls(lines)


__all__ = ("CartStore",)
