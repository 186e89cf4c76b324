"""
Request/response codecs — pydantic models at the HTTP edge.

In-models validate loosely and convert with to_domain(); out-models are
built from a domain Result with from_domain().
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from kungfu import Result, Ok, Error
from pydantic import BaseModel, ConfigDict

from medcart._types import to_money
from medcart.gateway import sanitize_customer_id, to_minor_units
from medcart.proxy._types import (
    RazorpayOrderRequest,
    RazorpayOrder,
    CashfreeCustomer,
    CashfreeOrderRequest,
    CashfreeSession,
    ProxyError,
)

DEFAULT_PHONE = "9999999999"
DEFAULT_EMAIL = "customer@medicare.in"
DEFAULT_CUSTOMER_NAME = "Customer"

INVALID_AMOUNT = ProxyError(400, "Invalid amount")


def _positive_amount(raw: Any) -> Decimal | None:
    """Numbers only (bool excluded); zero is rejected."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    amount = to_money(raw)
    if amount <= 0:
        return None
    return amount


# ═══════════════════════════════════════════════════════════════════════════════
# Razorpay
# ═══════════════════════════════════════════════════════════════════════════════


class RazorpayOrderIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    amount: Any = None
    currency: str = "INR"
    receipt: str | None = None

    def to_domain(self, now_ms: int) -> Result[RazorpayOrderRequest, ProxyError]:
        amount = _positive_amount(self.amount)
        if amount is None:
            return Error(INVALID_AMOUNT)
        return Ok(RazorpayOrderRequest(
            amount_paise=to_minor_units(amount),
            currency=self.currency or "INR",
            receipt=self.receipt or f"rcpt_{now_ms}",
        ))


class RazorpayOrderOut(BaseModel):
    id: str
    amount: int
    currency: str

    @classmethod
    def from_domain(cls, order: RazorpayOrder) -> RazorpayOrderOut:
        return cls(id=order.id, amount=order.amount, currency=order.currency)


# ═══════════════════════════════════════════════════════════════════════════════
# Cashfree
# ═══════════════════════════════════════════════════════════════════════════════


class CashfreeOrderIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    amount: Any = None
    customerId: str | None = None
    customerPhone: str | None = None
    customerEmail: str | None = None

    def to_domain(self, now_ms: int) -> Result[CashfreeOrderRequest, ProxyError]:
        amount = _positive_amount(self.amount)
        if amount is None:
            return Error(INVALID_AMOUNT)
        return Ok(CashfreeOrderRequest(
            order_id=f"order_{now_ms}",
            order_amount=amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
            currency="INR",
            customer=CashfreeCustomer(
                customer_id=sanitize_customer_id(self.customerId or f"cust{now_ms}"),
                phone=self.customerPhone or DEFAULT_PHONE,
                email=self.customerEmail or DEFAULT_EMAIL,
                name=self.customerId or DEFAULT_CUSTOMER_NAME,
            ),
        ))


class CashfreeOrderOut(BaseModel):
    order_id: str
    payment_session_id: str

    @classmethod
    def from_domain(cls, session: CashfreeSession) -> CashfreeOrderOut:
        return cls(order_id=session.order_id, payment_session_id=session.payment_session_id)


__all__ = (
    "RazorpayOrderIn",
    "RazorpayOrderOut",
    "CashfreeOrderIn",
    "CashfreeOrderOut",
    "DEFAULT_PHONE",
    "DEFAULT_EMAIL",
)
