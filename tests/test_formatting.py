"""Tests for display helpers."""

import random
from datetime import date
from decimal import Decimal

from medcart.formatting import (
    calculate_discount,
    expected_delivery,
    format_date,
    format_delivery,
    format_price,
    support_message,
    truncate_text,
)


class TestFormatPrice:
    def test_indian_grouping(self):
        assert format_price(123456) == "₹1,23,456"
        assert format_price(Decimal("12345678")) == "₹1,23,45,678"
        assert format_price(999) == "₹999"
        assert format_price(1000) == "₹1,000"

    def test_no_decimals(self):
        assert format_price(Decimal("490.40")) == "₹490"
        assert format_price(0) == "₹0"


class TestDates:
    def test_expected_delivery_window(self):
        today = date(2026, 10, 19)
        rng = random.Random(7)

        days = {(expected_delivery(today, rng) - today).days for _ in range(50)}

        assert days <= {3, 4, 5}
        assert days

    def test_format_date(self):
        assert format_date(date(2026, 10, 9)) == "9 October 2026"

    def test_format_delivery(self):
        assert format_delivery(date(2026, 10, 22)) == "Thursday, 22 October"


class TestText:
    def test_discount(self):
        assert calculate_discount(200, 150) == 25
        assert calculate_discount(0, 10) == 0

    def test_truncate(self):
        assert truncate_text("Paracetamol 500mg", 11) == "Paracetamol..."
        assert truncate_text("Short", 10) == "Short"

    def test_support_message_carries_reference(self):
        message = support_message("pay_123")

        assert "pay_123" in message
        assert "not recorded" in message
