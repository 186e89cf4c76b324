"""
Delivery pricing — flat fee below a free-delivery threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from medcart._types import Money, ZERO, to_money


@dataclass(frozen=True, slots=True)
class DeliveryPricing:
    """
    Delivery fee rule.

    fee(subtotal) == 0 when subtotal >= free_threshold, else flat_fee.
    """

    free_threshold: Money = Decimal("499")
    flat_fee: Money = Decimal("40")

    def fee(self, subtotal: Money | int | float) -> Money:
        if to_money(subtotal) >= self.free_threshold:
            return ZERO
        return self.flat_fee

    def total(self, subtotal: Money | int | float) -> Money:
        amount = to_money(subtotal)
        return amount + self.fee(amount)


DEFAULT_PRICING = DeliveryPricing()


def delivery_fee(
    subtotal: Money | int | float,
    pricing: DeliveryPricing = DEFAULT_PRICING,
) -> Money:
    return pricing.fee(subtotal)


__all__ = ("DeliveryPricing", "DEFAULT_PRICING", "delivery_fee")
