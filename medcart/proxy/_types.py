"""
Proxy domain types — validated upstream requests and the error shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class RazorpayOrderRequest:
    amount_paise: int
    currency: str
    receipt: str


@dataclass(frozen=True, slots=True)
class RazorpayOrder:
    id: str
    amount: int
    currency: str


@dataclass(frozen=True, slots=True)
class CashfreeCustomer:
    customer_id: str
    phone: str
    email: str
    name: str


@dataclass(frozen=True, slots=True)
class CashfreeOrderRequest:
    order_id: str
    order_amount: Decimal
    currency: str
    customer: CashfreeCustomer


@dataclass(frozen=True, slots=True)
class CashfreeSession:
    order_id: str
    payment_session_id: str


@dataclass(frozen=True, slots=True)
class ProxyError:
    """Rendered as {"error": message} with the given HTTP status."""

    status: int
    message: str


__all__ = (
    "RazorpayOrderRequest",
    "RazorpayOrder",
    "CashfreeCustomer",
    "CashfreeOrderRequest",
    "CashfreeSession",
    "ProxyError",
)
