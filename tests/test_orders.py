"""Tests for the order submission client and report helpers."""

import asyncio
from decimal import Decimal

import httpx
from kungfu import Ok, Error

from medcart.cart import CartLine
from medcart.orders import (
    GENERIC_ERROR,
    OrderDetailRow,
    OrderSubmissionErrorKind,
    PaymentMethod,
    search,
    summarize,
    wire_product_id,
)

LINES = (
    CartLine("101", Decimal("150"), 2),
    CartLine("abc", Decimal("99.50"), 1),
)


def resolve(lazy):
    async def _run():
        return await lazy
    return asyncio.run(_run())


class TestPaymentMethod:
    def test_wire_values(self):
        assert [m.value for m in PaymentMethod] == ["UPI", "Card", "COD"]

    def test_uses_gateway(self):
        assert PaymentMethod.UPI.uses_gateway
        assert PaymentMethod.CARD.uses_gateway
        assert not PaymentMethod.COD.uses_gateway


class TestSubmit:
    def test_payload(self, book, order_api):
        address = book.selected

        result = resolve(order_api.client().submit(address, LINES, Decimal("40"), PaymentMethod.UPI))

        assert isinstance(result, Ok)
        assert result.value.order_id == 42
        assert result.value.user_id == 7
        assert order_api.payload() == {
            "phone": "9876543210",
            "full_name": "Asha Rao",
            "address_line": "12 MG Road, Indiranagar",
            "city": "Bengaluru",
            "state": "Karnataka",
            "pincode": "560038",
            "delivery_charge": 40.0,
            "payment_method": "UPI",
            "items": [
                {"product_id": 101, "quantity": 2, "price": 150.0},
                {"product_id": 1, "quantity": 1, "price": 99.5},
            ],
        }

    def test_server_error(self, book, failing_order_api):
        result = resolve(failing_order_api.client().submit(book.selected, LINES, Decimal("0"), PaymentMethod.COD))

        assert isinstance(result, Error)
        assert result.value.kind is OrderSubmissionErrorKind.SERVER
        assert result.value.message == "Service unavailable"
        assert result.value.status == 503

    def test_client_error_without_message(self, book, make_order_api):
        api = make_order_api(status=422, body={"detail": "bad"})

        result = resolve(api.client().submit(book.selected, LINES, Decimal("0"), PaymentMethod.COD))

        assert result.value.kind is OrderSubmissionErrorKind.REJECTED
        assert result.value.message == GENERIC_ERROR

    def test_missing_order_id(self, book, make_order_api):
        api = make_order_api(status=200, body={"message": "ok"})

        result = resolve(api.client().submit(book.selected, LINES, Decimal("0"), PaymentMethod.COD))

        assert isinstance(result, Error)
        assert result.value.kind is OrderSubmissionErrorKind.MALFORMED

    def test_timeout(self, book, make_order_api):
        api = make_order_api(raise_exc=httpx.ConnectTimeout("timed out"))

        result = resolve(api.client().submit(book.selected, LINES, Decimal("0"), PaymentMethod.COD))

        assert isinstance(result, Error)
        assert result.value.kind is OrderSubmissionErrorKind.TIMEOUT

    def test_submit_is_lazy(self, book, order_api):
        order_api.client().submit(book.selected, LINES, Decimal("0"), PaymentMethod.COD)

        assert order_api.requests == []

    def test_wire_product_id(self):
        assert wire_product_id("17") == 17
        assert wire_product_id("med-17") == 1
        assert wire_product_id("0") == 1


ROWS = [
    OrderDetailRow(1, "Asha Rao", "9876543210", "12 MG Road", "UPI", "2026-10-01", "Paracetamol", 2, Decimal("30"), Decimal("100")),
    OrderDetailRow(1, "Asha Rao", "9876543210", "12 MG Road", "UPI", "2026-10-01", "Cough Syrup", 1, Decimal("40"), Decimal("100")),
    OrderDetailRow(2, "Ravi Kumar", "6123456789", "Lake View", "COD", "2026-10-02", "Vitamin C", 3, Decimal("50"), Decimal("190")),
]


class TestOrdersDetailed:
    def test_parses_rows(self, make_order_api):
        api = make_order_api(status=200, body=[{
            "order_id": 5,
            "customer_name": "Asha Rao",
            "contact_number": "9876543210",
            "full_address": "12 MG Road",
            "payment_method": "COD",
            "ordered_date": "2026-10-01T10:00:00",
            "product_name": "Paracetamol",
            "quantity": 2,
            "price": 30,
            "total_bill": 100,
        }])

        result = resolve(api.client().orders_detailed())

        assert isinstance(result, Ok)
        assert result.value[0].order_id == 5
        assert result.value[0].total_bill == Decimal("100")

    def test_summary(self):
        summary = summarize(ROWS)

        assert summary.unique_orders == 2
        assert summary.unique_customers == 2
        assert summary.revenue == Decimal("390")
        assert summary.items == 6

    def test_search(self):
        assert {r.order_id for r in search(ROWS, "asha")} == {1}
        assert [r.product_name for r in search(ROWS, "vitamin")] == ["Vitamin C"]
        assert len(search(ROWS, "6123")) == 1
        assert len(search(ROWS, "")) == 3
        assert len(search(ROWS, "", payment_method="COD")) == 1
        assert len(search(ROWS, "asha", payment_method="All")) == 2
