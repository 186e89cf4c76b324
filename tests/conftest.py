"""Pytest fixtures for medcart tests."""

import asyncio
import json
from decimal import Decimal

import httpx
import pytest

from medcart.address import AddressBook
from medcart.cart import CartStore
from medcart.gateway import Completed, SessionHandle
from medcart.lift import from_result
from medcart.orders import OrderClient
from kungfu import Ok, Error


def address_form(**overrides):
    form = {
        "fullName": "Asha Rao",
        "phone": "9876543210",
        "addressLine": "12 MG Road, Indiranagar",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560038",
        "type": "Home",
    }
    form.update(overrides)
    return form


@pytest.fixture
def valid_form():
    return address_form()


@pytest.fixture
def book(valid_form):
    book = AddressBook()
    book.create(valid_form)
    return book


@pytest.fixture
def cart():
    """Subtotal 450: below the free delivery threshold."""
    cart = CartStore()
    cart.add_line("101", Decimal("150"), max_quantity=10)
    cart.add_line("101", Decimal("150"), max_quantity=10)
    cart.add_line("205", Decimal("150"), max_quantity=10)
    return cart


# ═══════════════════════════════════════════════════════════════════════════════
# Fake gateway
# ═══════════════════════════════════════════════════════════════════════════════


class FakeGateway:
    """Scripted PaymentGateway; optionally holds the widget open until released."""

    provider = "fake"

    def __init__(self, outcome=None, session_error=None, hold=False):
        self.outcome = outcome if outcome is not None else Completed("pay_123")
        self.session_error = session_error
        self.sessions = []
        self.presented = 0
        self.opened = asyncio.Event() if hold else None
        self.release = asyncio.Event() if hold else None

    def create_session(self, amount, customer):
        self.sessions.append((amount, customer))
        if self.session_error is not None:
            return from_result(Error(self.session_error))
        return from_result(Ok(SessionHandle(
            provider=self.provider,
            token=f"tok_{len(self.sessions)}",
            amount=amount,
            currency="INR",
            order_ref=f"order_{len(self.sessions)}",
            customer=customer,
        )))

    async def present_checkout(self, handle):
        self.presented += 1
        if self.opened is not None:
            self.opened.set()
            await self.release.wait()
        return self.outcome


@pytest.fixture
def gateway():
    return FakeGateway()


# ═══════════════════════════════════════════════════════════════════════════════
# Fake order API
# ═══════════════════════════════════════════════════════════════════════════════


class OrderApi:
    """httpx.MockTransport handler recording every request."""

    def __init__(self, status=201, body=None, raise_exc=None):
        self.status = status
        self.body = body if body is not None else {"message": "Order created", "order_id": 42, "user_id": 7}
        self.raise_exc = raise_exc
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.raise_exc is not None:
            raise self.raise_exc
        return httpx.Response(self.status, json=self.body)

    @property
    def create_calls(self):
        return [r for r in self.requests if r.url.path == "/create-order"]

    def payload(self, index=0):
        return json.loads(self.create_calls[index].content)

    def client(self):
        return OrderClient(httpx.AsyncClient(
            transport=httpx.MockTransport(self),
            base_url="https://api.test",
        ))


@pytest.fixture
def order_api():
    return OrderApi()


@pytest.fixture
def failing_order_api():
    return OrderApi(status=503, body={"message": "Service unavailable"})


@pytest.fixture
def make_gateway():
    return FakeGateway


@pytest.fixture
def make_order_api():
    return OrderApi


@pytest.fixture
def make_form():
    return address_form
