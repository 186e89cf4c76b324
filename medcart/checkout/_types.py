"""
Checkout types — phases, the ephemeral session, errors and user notices.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from medcart._types import Money, ZERO
from medcart.address import Address
from medcart.cart import CartLine
from medcart.gateway import SessionHandle
from medcart.orders import PaymentMethod


# ═══════════════════════════════════════════════════════════════════════════════
# Phase
# ═══════════════════════════════════════════════════════════════════════════════


class Phase(Enum):
    """
    CART → ADDRESS → PAYMENT → SUBMITTING → SUCCESS

    CANCELLED and FAILED are terminal; leaving them takes begin() or reset().
    """

    CART = auto()
    ADDRESS = auto()
    PAYMENT = auto()
    SUBMITTING = auto()
    SUCCESS = auto()
    CANCELLED = auto()
    FAILED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutSession:
    """
    One in-progress checkout. Never persisted.

    lines, address and delivery_fee are snapshots: the amount charged and
    submitted comes from here, not from the live cart.
    """

    id: str
    phase: Phase
    lines: tuple[CartLine, ...] = ()
    address: Address | None = None
    subtotal: Money = ZERO
    delivery_fee: Money = ZERO
    payment_method: PaymentMethod | None = None
    gateway_session: SessionHandle | None = None

    @property
    def address_id(self) -> str | None:
        return self.address.id if self.address else None

    @property
    def grand_total(self) -> Money:
        return self.subtotal + self.delivery_fee


# ═══════════════════════════════════════════════════════════════════════════════
# Errors / Notices
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutErrorKind(Enum):
    NO_CART_LINES = auto()
    NO_ADDRESS_SELECTED = auto()
    INVALID_TRANSITION = auto()  # Operation not allowed in the current phase
    CHECKOUT_IN_PROGRESS = auto()  # A submission is in flight
    ALREADY_SUBMITTED = auto()  # Session already claimed its one submission
    GATEWAY_SESSION_FAILED = auto()
    GATEWAY_CANCELLED = auto()
    GATEWAY_FAILED = auto()
    ORDER_SUBMISSION_FAILED = auto()  # Before any payment; safe to retry
    PAYMENT_UNRECORDED = auto()  # Paid, order not recorded; support only
    INTERRUPTED = auto()  # confirm() cancelled or raised before payment completed


_INFO_KINDS = frozenset({CheckoutErrorKind.GATEWAY_CANCELLED, CheckoutErrorKind.INTERRUPTED})


class NoticeLevel(Enum):
    INFO = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class Notice:
    level: NoticeLevel
    message: str


@dataclass(frozen=True, slots=True)
class CheckoutError:
    """
    retryable: the user may confirm again from PAYMENT.
    reference: payment reference to quote to support (PAYMENT_UNRECORDED).
    """

    kind: CheckoutErrorKind
    message: str
    retryable: bool = True
    reference: str | None = None

    @property
    def notice(self) -> Notice:
        level = NoticeLevel.INFO if self.kind in _INFO_KINDS else NoticeLevel.ERROR
        return Notice(level, self.message)


__all__ = (
    "Phase",
    "CheckoutSession",
    "CheckoutErrorKind",
    "CheckoutError",
    "NoticeLevel",
    "Notice",
)
