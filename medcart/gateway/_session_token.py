"""
Variant B — session-token gateway (Cashfree style).

The server returns a payment_session_id; the widget is driven by that token
and resolves once with a result object.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx
from kungfu import LazyCoroResult

from medcart._types import Money, to_money
from medcart.lift import from_awaitable
from medcart.gateway._protocol import post_session_request, to_session_error
from medcart.gateway._types import (
    Customer,
    SessionHandle,
    Outcome,
    Completed,
    Cancelled,
    Failed,
    GatewaySessionError,
    GatewaySessionErrorKind,
    GatewaySessionFailure,
)

logger = logging.getLogger(__name__)

CANCEL_MESSAGE = "Payment cancelled by user"


class SessionWidget(Protocol):
    """
    Promise-style hosted checkout (cashfree.checkout in the browser).

    Resolves with {"error": {"message": ...}} | {"redirect": ...} | {"paymentDetails": ...}.
    """

    async def checkout(self, payment_session_id: str) -> Mapping[str, Any]: ...


def outcome_from_result(result: Mapping[str, Any], reference: str) -> Outcome:
    """
    Map a widget result onto Outcome.

    A result carrying neither an error nor payment evidence counts as a
    dismissal, never as a completed payment.
    """
    error = result.get("error")
    if error:
        message = error.get("message") if isinstance(error, Mapping) else str(error)
        if message == CANCEL_MESSAGE:
            return Cancelled()
        return Failed(message or "Payment failed")

    if result.get("paymentDetails") or result.get("redirect"):
        return Completed(reference)

    return Cancelled()


class SessionTokenGateway:
    """
    Example:
        gateway = SessionTokenGateway(
            client=httpx.AsyncClient(base_url=settings.proxy_base_url),
            widget=bridge,
        )
    """

    provider = "cashfree"

    def __init__(
        self,
        client: httpx.AsyncClient,
        widget: SessionWidget,
        *,
        currency: str = "INR",
        endpoint: str = "/api/cashfree/create-order",
    ) -> None:
        self._client = client
        self._widget = widget
        self._currency = currency
        self._endpoint = endpoint

    def create_session(
        self, amount: Money, customer: Customer
    ) -> LazyCoroResult[SessionHandle, GatewaySessionError]:
        async def _create() -> SessionHandle:
            payload: dict[str, Any] = {
                "amount": float(amount),
                "customerId": customer.customer_id,
                "customerPhone": customer.phone,
            }
            if customer.email:
                payload["customerEmail"] = customer.email

            data = await post_session_request(
                self._client, self._endpoint, payload,
                default_error="Could not create Cashfree order",
            )
            session_id = data.get("payment_session_id")
            if not isinstance(session_id, str) or not session_id:
                raise GatewaySessionFailure(GatewaySessionError(
                    GatewaySessionErrorKind.MALFORMED, "Cashfree did not return a payment session",
                ))
            order_id = str(data.get("order_id") or session_id)
            logger.info("Cashfree session created for order %s", order_id)
            return SessionHandle(
                provider=self.provider,
                token=session_id,
                amount=to_money(amount),
                currency=self._currency,
                order_ref=order_id,
                customer=customer,
            )

        return from_awaitable(_create, on_error=to_session_error)

    async def present_checkout(self, handle: SessionHandle) -> Outcome:
        try:
            result = await self._widget.checkout(handle.token)
        except Exception as e:
            message = str(e)
            if message == CANCEL_MESSAGE:
                return Cancelled()
            logger.warning("Cashfree checkout raised: %s", message)
            return Failed(message or "Payment failed")

        return outcome_from_result(result, handle.order_ref)


__all__ = ("CANCEL_MESSAGE", "SessionWidget", "SessionTokenGateway", "outcome_from_result")
