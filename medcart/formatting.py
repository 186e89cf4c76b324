"""
Display helpers for amounts, dates and support notices (en-IN conventions).
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_EVEN

from medcart._types import Money, to_money


def _group_indian(digits: str) -> str:
    """'1234567' → '12,34,567' (last three, then pairs)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_price(amount: Money | int | float) -> str:
    """₹ with Indian digit grouping and no decimals: 123456 → '₹1,23,456'."""
    value = to_money(amount).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN)
    sign = "-" if value < 0 else ""
    return f"{sign}₹{_group_indian(str(abs(int(value))))}"


def calculate_discount(original_price: Money | int | float, sale_price: Money | int | float) -> int:
    original = to_money(original_price)
    if original <= 0:
        return 0
    ratio = (original - to_money(sale_price)) / original * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def format_date(value: date) -> str:
    """'19 October 2026'."""
    return f"{value.day} {value.strftime('%B %Y')}"


def expected_delivery(today: date | None = None, rng: random.Random | None = None) -> date:
    """A date three to five days out."""
    today = today or date.today()
    days = (rng or random).randint(3, 5)
    return today + timedelta(days=days)


def format_delivery(value: date) -> str:
    """'Thursday, 22 October'."""
    return f"{value.strftime('%A')}, {value.day} {value.strftime('%B')}"


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "..."


def support_message(reference: str) -> str:
    return (
        "Payment succeeded but your order was not recorded. "
        f"Please contact support with reference {reference}."
    )


__all__ = (
    "format_price",
    "calculate_discount",
    "format_date",
    "expected_delivery",
    "format_delivery",
    "truncate_text",
    "support_message",
)
