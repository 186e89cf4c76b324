"""
Cart — line items and derived totals.

    from medcart import cart as C

    store = C.CartStore()
    match store.add_line("101", Decimal("120"), max_quantity=2):
        case Ok(line): ...
        case Error(clamped): show(clamped.message)
"""

from medcart.cart._types import CartLine, CartTotals, QuantityClamped
from medcart.cart._store import CartStore

__all__ = (
    "CartLine",
    "CartTotals",
    "QuantityClamped",
    "CartStore",
)
