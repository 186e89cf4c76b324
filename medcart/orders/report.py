"""
Order report — aggregates over GET /orders-detailed rows for the internal view.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from medcart._types import Money, ZERO
from medcart.orders._types import OrderDetailRow


@dataclass(frozen=True, slots=True)
class OrdersSummary:
    unique_orders: int
    unique_customers: int
    revenue: Money
    items: int


def summarize(rows: Iterable[OrderDetailRow]) -> OrdersSummary:
    """Revenue sums total_bill per row, matching the reporting view."""
    rows = list(rows)
    return OrdersSummary(
        unique_orders=len({r.order_id for r in rows}),
        unique_customers=len({r.contact_number for r in rows}),
        revenue=sum((r.total_bill for r in rows), ZERO),
        items=sum(r.quantity for r in rows),
    )


def search(
    rows: Sequence[OrderDetailRow],
    query: str = "",
    payment_method: str | None = None,
) -> list[OrderDetailRow]:
    """
    Case-insensitive match on customer or product name; substring match on
    contact number or order id. payment_method None or "All" disables that filter.
    """
    needle = query.strip().lower()

    def matches(row: OrderDetailRow) -> bool:
        if payment_method not in (None, "All") and row.payment_method != payment_method:
            return False
        if not needle:
            return True
        return (
            needle in row.customer_name.lower()
            or needle in row.contact_number
            or needle in row.product_name.lower()
            or needle in str(row.order_id)
        )

    return [r for r in rows if matches(r)]


__all__ = ("OrdersSummary", "summarize", "search")
