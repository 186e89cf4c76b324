"""
Cart types — line items, totals, clamp signal.
"""

from __future__ import annotations

from dataclasses import dataclass

from medcart._types import Money


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One product in the cart.

    Invariant: quantity >= 1 for every line held by a CartStore.
    """

    product_id: str
    unit_price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True)
class CartTotals:
    subtotal: Money
    item_count: int


@dataclass(frozen=True, slots=True)
class QuantityClamped:
    """
    Signal: requested quantity exceeded the caller's stock ceiling.

    The line (if any) holds `quantity`, which equals `max_quantity`.
    """

    product_id: str
    requested: int
    max_quantity: int

    @property
    def quantity(self) -> int:
        return max(self.max_quantity, 0)

    @property
    def message(self) -> str:
        return f"Only {self.quantity} unit(s) of {self.product_id} available"


__all__ = ("CartLine", "CartTotals", "QuantityClamped")
