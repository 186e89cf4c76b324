"""
Gateway protocol — the one capability the orchestrator depends on.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Protocol

import httpx
from kungfu import LazyCoroResult

from medcart._types import Money
from medcart.gateway._types import (
    Customer,
    SessionHandle,
    Outcome,
    GatewaySessionError,
    GatewaySessionErrorKind,
    GatewaySessionFailure,
)


# ═══════════════════════════════════════════════════════════════════════════════
# PaymentGateway Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentGateway(Protocol):
    """
    Hosted-checkout provider behind one interface.

    Example:
        match await gateway.create_session(Decimal("490"), customer):
            case Ok(handle):
                outcome = await gateway.present_checkout(handle)
            case Error(err):
                ...

    present_checkout suspends until the user completes, cancels, or the widget
    errors. It never raises; every widget result maps onto Outcome.
    """

    @property
    def provider(self) -> str: ...

    def create_session(
        self, amount: Money, customer: Customer
    ) -> LazyCoroResult[SessionHandle, GatewaySessionError]: ...

    async def present_checkout(self, handle: SessionHandle) -> Outcome: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Shared HTTP helpers
# ═══════════════════════════════════════════════════════════════════════════════


async def post_session_request(
    client: httpx.AsyncClient,
    url: str,
    payload: Mapping[str, Any],
    *,
    default_error: str,
) -> dict[str, Any]:
    """POST to the session proxy; raises GatewaySessionFailure on any problem."""
    try:
        response = await client.post(url, json=dict(payload))
    except httpx.TimeoutException as e:
        raise GatewaySessionFailure(GatewaySessionError(
            GatewaySessionErrorKind.TRANSPORT, "Payment service timed out. Please try again.",
        )) from e
    except httpx.HTTPError as e:
        raise GatewaySessionFailure(GatewaySessionError(
            GatewaySessionErrorKind.TRANSPORT, str(e) or default_error,
        )) from e

    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_error:
        message = body.get("error") if isinstance(body, dict) else None
        raise GatewaySessionFailure(GatewaySessionError(
            GatewaySessionErrorKind.REJECTED, message or default_error, response.status_code,
        ))

    if not isinstance(body, dict):
        raise GatewaySessionFailure(GatewaySessionError(
            GatewaySessionErrorKind.MALFORMED, "Payment service returned an unreadable response",
            response.status_code,
        ))
    return body


def to_session_error(exc: Exception) -> GatewaySessionError:
    if isinstance(exc, GatewaySessionFailure):
        return exc.error
    return GatewaySessionError(GatewaySessionErrorKind.TRANSPORT, str(exc) or "Payment session failed")


def to_minor_units(amount: Money) -> int:
    """Rupees → paise, rounding half up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


__all__ = (
    "PaymentGateway",
    "post_session_request",
    "to_session_error",
    "to_minor_units",
)
