"""Tests for delivery pricing."""

from decimal import Decimal

from medcart.pricing import DEFAULT_PRICING, DeliveryPricing, delivery_fee


class TestDeliveryFee:
    def test_below_threshold_pays_flat_fee(self):
        assert delivery_fee(Decimal("450")) == Decimal("40")
        assert DEFAULT_PRICING.total(Decimal("450")) == Decimal("490")

    def test_above_threshold_is_free(self):
        assert delivery_fee(Decimal("500")) == Decimal("0")
        assert DEFAULT_PRICING.total(Decimal("500")) == Decimal("500")

    def test_threshold_is_inclusive(self):
        assert delivery_fee(Decimal("499")) == Decimal("0")
        assert delivery_fee(Decimal("498.99")) == Decimal("40")

    def test_empty_cart_still_pays_fee(self):
        assert delivery_fee(0) == Decimal("40")

    def test_custom_pricing(self):
        pricing = DeliveryPricing(free_threshold=Decimal("1000"), flat_fee=Decimal("60"))

        assert pricing.fee(999) == Decimal("60")
        assert pricing.fee(1000) == Decimal("0")
