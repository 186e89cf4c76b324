"""
Variant A — order-object gateway (Razorpay style).

The server creates an order object up front; the widget is opened with that
order's id and reports back through success / dismiss / failure callbacks.
Callbacks are bridged into a single awaited future.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import httpx
from kungfu import LazyCoroResult

from medcart._types import Money, to_money
from medcart.lift import from_awaitable
from medcart.gateway._protocol import post_session_request, to_session_error, to_minor_units
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


class OrderWidget(Protocol):
    """Callback-driven hosted checkout (window.Razorpay in the browser)."""

    def open(
        self,
        options: Mapping[str, Any],
        on_success: Callable[[Mapping[str, Any]], None],
        on_dismiss: Callable[[], None],
        on_failure: Callable[[Mapping[str, Any]], None],
    ) -> None: ...


def _default_receipt() -> str:
    return f"rcpt_{int(time.time() * 1000)}"


def _failure_reason(payload: Mapping[str, Any]) -> str:
    error = payload.get("error")
    if isinstance(error, Mapping):
        reason = error.get("description") or error.get("reason")
        if reason:
            return str(reason)
    return "Payment failed"


class OrderObjectGateway:
    """
    Example:
        gateway = OrderObjectGateway(
            client=httpx.AsyncClient(base_url=settings.proxy_base_url),
            widget=bridge,
            key_id=settings.razorpay_key_id,
        )
    """

    provider = "razorpay"

    def __init__(
        self,
        client: httpx.AsyncClient,
        widget: OrderWidget,
        *,
        key_id: str,
        store_name: str = "MediCare",
        currency: str = "INR",
        endpoint: str = "/api/razorpay/create-order",
        receipt_factory: Callable[[], str] = _default_receipt,
    ) -> None:
        self._client = client
        self._widget = widget
        self._key_id = key_id
        self._store_name = store_name
        self._currency = currency
        self._endpoint = endpoint
        self._receipt = receipt_factory

    def create_session(
        self, amount: Money, customer: Customer
    ) -> LazyCoroResult[SessionHandle, GatewaySessionError]:
        async def _create() -> SessionHandle:
            data = await post_session_request(
                self._client,
                self._endpoint,
                {"amount": float(amount), "currency": self._currency, "receipt": self._receipt()},
                default_error="Could not create Razorpay order",
            )
            order_id = data.get("id")
            if not isinstance(order_id, str) or not order_id:
                raise GatewaySessionFailure(GatewaySessionError(
                    GatewaySessionErrorKind.MALFORMED, "Razorpay did not return an order id",
                ))
            logger.info("Razorpay order %s created for %s", order_id, amount)
            return SessionHandle(
                provider=self.provider,
                token=order_id,
                amount=to_money(amount),
                currency=str(data.get("currency") or self._currency),
                order_ref=order_id,
                customer=customer,
            )

        return from_awaitable(_create, on_error=to_session_error)

    async def present_checkout(self, handle: SessionHandle) -> Outcome:
        loop = asyncio.get_running_loop()
        settled: asyncio.Future[Outcome] = loop.create_future()

        def settle(outcome: Outcome) -> None:
            if not settled.done():
                settled.set_result(outcome)

        def on_success(response: Mapping[str, Any]) -> None:
            settle(Completed(str(response.get("razorpay_payment_id") or handle.order_ref)))

        def on_dismiss() -> None:
            settle(Cancelled())

        def on_failure(payload: Mapping[str, Any]) -> None:
            settle(Failed(_failure_reason(payload)))

        try:
            self._widget.open(self._options(handle), on_success, on_dismiss, on_failure)
        except Exception as e:
            logger.warning("Razorpay widget failed to open: %s", e)
            return Failed(str(e) or "Payment window could not be opened")

        return await settled

    def _options(self, handle: SessionHandle) -> dict[str, Any]:
        prefill: dict[str, str] = {}
        if handle.customer is not None:
            prefill["name"] = handle.customer.name
            prefill["contact"] = handle.customer.phone
            if handle.customer.email:
                prefill["email"] = handle.customer.email
        return {
            "key": self._key_id,
            "amount": to_minor_units(handle.amount),
            "currency": handle.currency,
            "name": self._store_name,
            "order_id": handle.token,
            "prefill": prefill,
        }


__all__ = ("OrderWidget", "OrderObjectGateway")
