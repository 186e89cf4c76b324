"""
Gateway types — session handles and the closed checkout Outcome.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from medcart._types import Money

# ═══════════════════════════════════════════════════════════════════════════════
# Customer / Session
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Customer:
    name: str
    phone: str
    email: str | None = None

    @property
    def customer_id(self) -> str:
        """Name-derived id, e.g. 'Asha Rao' → 'asharao' after sanitizing."""
        return sanitize_customer_id(re.sub(r"\s+", "_", self.name).lower())


@dataclass(frozen=True, slots=True)
class SessionHandle:
    """
    Server-issued authorization for one hosted widget invocation.

    token: Razorpay order id (variant A) or Cashfree payment_session_id (variant B).
    order_ref: provider-side order reference used in support messages.
    """

    provider: str
    token: str
    amount: Money
    currency: str
    order_ref: str
    customer: Customer | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Outcome — Closed Variant
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Completed:
    """Payment captured. reference identifies the payment at the provider."""

    reference: str


@dataclass(frozen=True, slots=True)
class Cancelled:
    """User dismissed the widget. Not an error."""


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str


type Outcome = Completed | Cancelled | Failed


# ═══════════════════════════════════════════════════════════════════════════════
# Session Errors
# ═══════════════════════════════════════════════════════════════════════════════


class GatewaySessionErrorKind(Enum):
    TRANSPORT = auto()  # Timeout, connection refused
    REJECTED = auto()  # Non-2xx from proxy/provider
    MALFORMED = auto()  # Missing order/session identifier or bad JSON


@dataclass(frozen=True, slots=True)
class GatewaySessionError:
    kind: GatewaySessionErrorKind
    message: str
    status: int | None = None


class GatewaySessionFailure(Exception):
    """Raised inside session creation; mapped to GatewaySessionError at the boundary."""

    def __init__(self, error: GatewaySessionError) -> None:
        super().__init__(error.message)
        self.error = error


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def sanitize_customer_id(raw: str) -> str:
    """Alphanumeric only, at most 50 characters."""
    return _NON_ALNUM.sub("", raw)[:50]


__all__ = (
    "Customer",
    "SessionHandle",
    "Completed",
    "Cancelled",
    "Failed",
    "Outcome",
    "GatewaySessionErrorKind",
    "GatewaySessionError",
    "GatewaySessionFailure",
    "sanitize_customer_id",
)
