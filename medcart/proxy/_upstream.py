"""
Upstream provider calls. Credentials never leave this module.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from kungfu import Result, Ok, Error

from medcart.config import Settings
from medcart.proxy._types import (
    RazorpayOrderRequest,
    RazorpayOrder,
    CashfreeOrderRequest,
    CashfreeSession,
    ProxyError,
)

logger = logging.getLogger(__name__)

RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"
CASHFREE_API_VERSION = "2023-08-01"

RAZORPAY_FAILED = "Failed to create Razorpay order"
CASHFREE_FAILED = "Failed to create Cashfree order"
CASHFREE_NO_SESSION = "Cashfree did not return a payment session"


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Razorpay
# ═══════════════════════════════════════════════════════════════════════════════


async def create_razorpay_order(
    client: httpx.AsyncClient,
    settings: Settings,
    request: RazorpayOrderRequest,
) -> Result[RazorpayOrder, ProxyError]:
    try:
        response = await client.post(
            RAZORPAY_ORDERS_URL,
            json={
                "amount": request.amount_paise,
                "currency": request.currency,
                "receipt": request.receipt,
            },
            auth=(settings.razorpay_key_id, settings.razorpay_key_secret),
        )
    except httpx.HTTPError as e:
        logger.error("Razorpay create-order error: %s", e)
        return Error(ProxyError(500, RAZORPAY_FAILED))

    data = _json_or_none(response)
    if response.is_error or not isinstance(data, dict) or not data.get("id"):
        logger.error("Razorpay create-order error: %s %s", response.status_code, data)
        return Error(ProxyError(500, RAZORPAY_FAILED))

    return Ok(RazorpayOrder(
        id=str(data["id"]),
        amount=int(data.get("amount", request.amount_paise)),
        currency=str(data.get("currency", request.currency)),
    ))


# ═══════════════════════════════════════════════════════════════════════════════
# Cashfree
# ═══════════════════════════════════════════════════════════════════════════════


def cashfree_payload(request: CashfreeOrderRequest, app_url: str) -> dict[str, Any]:
    """return_url / notify_url are only sent for an https app url."""
    payload: dict[str, Any] = {
        "order_id": request.order_id,
        "order_amount": float(request.order_amount),
        "order_currency": request.currency,
        "customer_details": {
            "customer_id": request.customer.customer_id,
            "customer_phone": request.customer.phone,
            "customer_email": request.customer.email,
            "customer_name": request.customer.name,
        },
    }
    if app_url.startswith("https://"):
        payload["order_meta"] = {
            "return_url": f"{app_url}/order-success?order_id={{order_id}}",
            "notify_url": f"{app_url}/api/cashfree/webhook",
        }
    return payload


async def create_cashfree_order(
    client: httpx.AsyncClient,
    settings: Settings,
    request: CashfreeOrderRequest,
) -> Result[CashfreeSession, ProxyError]:
    try:
        response = await client.post(
            settings.cashfree_orders_url,
            json=cashfree_payload(request, settings.app_url),
            headers={
                "x-client-id": settings.cashfree_app_id,
                "x-client-secret": settings.cashfree_secret_key,
                "x-api-version": CASHFREE_API_VERSION,
            },
        )
    except httpx.HTTPError as e:
        logger.error("Cashfree create-order error: %s", e)
        return Error(ProxyError(500, CASHFREE_FAILED))

    data = _json_or_none(response)
    message = data.get("message") if isinstance(data, dict) else None

    if response.is_error:
        logger.error("Cashfree create-order error: %s %s", response.status_code, data)
        return Error(ProxyError(response.status_code, message or CASHFREE_FAILED))

    session_id = data.get("payment_session_id") if isinstance(data, dict) else None
    if not session_id:
        logger.error("Cashfree returned no payment_session_id: %s", data)
        return Error(ProxyError(502, message or CASHFREE_NO_SESSION))

    logger.info("Cashfree order %s created", data.get("order_id") or request.order_id)
    return Ok(CashfreeSession(
        order_id=str(data.get("order_id") or request.order_id),
        payment_session_id=str(session_id),
    ))


__all__ = (
    "RAZORPAY_ORDERS_URL",
    "CASHFREE_API_VERSION",
    "cashfree_payload",
    "create_razorpay_order",
    "create_cashfree_order",
)
