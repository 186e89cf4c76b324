"""
Order types — payment method, submission result, and the finalized Order projection.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto

from medcart._types import Money
from medcart.address import Address
from medcart.cart import CartLine


# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentMethod(str, Enum):
    """Wire values match the order API."""

    UPI = "UPI"
    CARD = "Card"
    COD = "COD"

    @property
    def uses_gateway(self) -> bool:
        return self is not PaymentMethod.COD


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class OrderStatus(str, Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderReceipt:
    """Body of a successful POST /create-order."""

    order_id: int
    user_id: int | None
    message: str = ""


@dataclass(frozen=True, slots=True)
class Order:
    """
    Client-side projection of a submitted order.

    total_amount is the item subtotal; delivery_charge is kept separate.
    """

    order_id: int
    user_id: int | None
    items: tuple[CartLine, ...]
    address: Address
    total_amount: Money
    delivery_charge: Money
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_at: datetime
    status: OrderStatus = OrderStatus.PLACED
    payment_reference: str | None = None

    @property
    def grand_total(self) -> Money:
        return self.total_amount + self.delivery_charge


@dataclass(frozen=True, slots=True)
class OrderDetailRow:
    """One (order, product) row from GET /orders-detailed."""

    order_id: int
    customer_name: str
    contact_number: str
    full_address: str
    payment_method: str
    ordered_date: str
    product_name: str
    quantity: int
    price: Money
    total_bill: Money


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class OrderSubmissionErrorKind(Enum):
    TIMEOUT = auto()
    TRANSPORT = auto()  # Connection refused, DNS, protocol errors
    SERVER = auto()  # 5xx
    REJECTED = auto()  # 4xx
    MALFORMED = auto()  # 2xx without an order identifier


@dataclass(frozen=True, slots=True)
class OrderSubmissionError:
    kind: OrderSubmissionErrorKind
    message: str
    status: int | None = None


class OrderSubmissionFailure(Exception):
    """Raised inside the client; mapped to OrderSubmissionError at the boundary."""

    def __init__(self, error: OrderSubmissionError) -> None:
        super().__init__(error.message)
        self.error = error


__all__ = (
    "PaymentMethod",
    "PaymentStatus",
    "OrderStatus",
    "OrderReceipt",
    "Order",
    "OrderDetailRow",
    "OrderSubmissionErrorKind",
    "OrderSubmissionError",
    "OrderSubmissionFailure",
)
