"""
Order submission client — the remote order API.

Calls are never retried here. Whether a failed submission may be retried is
decided by the checkout orchestrator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from medcart._types import Lazy, Money, to_money
from medcart.address import Address
from medcart.cart import CartLine
from medcart.config import Settings
from medcart.lift import from_awaitable
from medcart.orders._types import (
    PaymentMethod,
    OrderReceipt,
    OrderDetailRow,
    OrderSubmissionErrorKind,
    OrderSubmissionError,
    OrderSubmissionFailure,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


# ═══════════════════════════════════════════════════════════════════════════════
# Wire encoding
# ═══════════════════════════════════════════════════════════════════════════════


def wire_product_id(product_id: str) -> int:
    """Catalog ids are numeric strings; anything else is sent as 1."""
    try:
        value = int(product_id)
    except ValueError:
        return 1
    return value or 1


def order_payload(
    address: Address,
    lines: Iterable[CartLine],
    delivery_fee: Money,
    payment_method: PaymentMethod,
) -> dict[str, Any]:
    return {
        "phone": address.phone,
        "full_name": address.full_name,
        "address_line": address.address_line,
        "city": address.city,
        "state": address.state,
        "pincode": address.pincode,
        "delivery_charge": float(delivery_fee),
        "payment_method": payment_method.value,
        "items": [
            {
                "product_id": wire_product_id(line.product_id),
                "quantity": line.quantity,
                "price": float(line.unit_price),
            }
            for line in lines
        ],
    }


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return GENERIC_ERROR


def _to_submission_error(exc: Exception) -> OrderSubmissionError:
    if isinstance(exc, OrderSubmissionFailure):
        return exc.error
    if isinstance(exc, httpx.TimeoutException):
        return OrderSubmissionError(OrderSubmissionErrorKind.TIMEOUT, str(exc) or GENERIC_ERROR)
    return OrderSubmissionError(OrderSubmissionErrorKind.TRANSPORT, str(exc) or GENERIC_ERROR)


def _raise_for_status(response: httpx.Response) -> None:
    if not response.is_error:
        return
    kind = (
        OrderSubmissionErrorKind.SERVER
        if response.is_server_error
        else OrderSubmissionErrorKind.REJECTED
    )
    raise OrderSubmissionFailure(
        OrderSubmissionError(kind, _error_message(response), response.status_code)
    )


def _row_from_wire(raw: Mapping[str, Any]) -> OrderDetailRow:
    return OrderDetailRow(
        order_id=int(raw["order_id"]),
        customer_name=str(raw.get("customer_name") or ""),
        contact_number=str(raw.get("contact_number") or ""),
        full_address=str(raw.get("full_address") or ""),
        payment_method=str(raw.get("payment_method") or ""),
        ordered_date=str(raw.get("ordered_date") or ""),
        product_name=str(raw.get("product_name") or ""),
        quantity=int(raw.get("quantity") or 0),
        price=to_money(raw.get("price") or 0),
        total_bill=to_money(raw.get("total_bill") or 0),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Client
# ═══════════════════════════════════════════════════════════════════════════════


class OrderClient:
    """
    Example:
        client = OrderClient.from_settings(load_settings())
        match await client.submit(address, lines, Decimal("40"), PaymentMethod.COD):
            case Ok(receipt): ...
            case Error(err): ...
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        create_path: str = "/create-order",
        detailed_path: str = "/orders-detailed",
    ) -> None:
        self._client = client
        self._create_path = create_path
        self._detailed_path = detailed_path

    @classmethod
    def from_settings(cls, settings: Settings) -> OrderClient:
        return cls(httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
            headers={"Content-Type": "application/json"},
        ))

    def submit(
        self,
        address: Address,
        lines: Iterable[CartLine],
        delivery_fee: Money,
        payment_method: PaymentMethod,
    ) -> Lazy[OrderReceipt, OrderSubmissionError]:
        payload = order_payload(address, lines, delivery_fee, payment_method)

        async def _submit() -> OrderReceipt:
            response = await self._client.post(self._create_path, json=payload)
            _raise_for_status(response)
            try:
                body = response.json()
            except ValueError:
                body = None

            order_id = body.get("order_id") if isinstance(body, Mapping) else None
            if isinstance(order_id, bool) or not isinstance(order_id, int):
                raise OrderSubmissionFailure(OrderSubmissionError(
                    OrderSubmissionErrorKind.MALFORMED,
                    "Order API did not return an order id",
                    response.status_code,
                ))

            user_id = body.get("user_id")
            logger.info("Order %s created (%s)", order_id, payment_method.value)
            return OrderReceipt(
                order_id=order_id,
                user_id=user_id if isinstance(user_id, int) else None,
                message=str(body.get("message") or ""),
            )

        return from_awaitable(_submit, on_error=_to_submission_error)

    def orders_detailed(self) -> Lazy[list[OrderDetailRow], OrderSubmissionError]:
        async def _fetch() -> list[OrderDetailRow]:
            response = await self._client.get(self._detailed_path)
            _raise_for_status(response)
            body = response.json()
            if not isinstance(body, list):
                raise OrderSubmissionFailure(OrderSubmissionError(
                    OrderSubmissionErrorKind.MALFORMED, "Expected a list of order rows",
                ))
            return [_row_from_wire(raw) for raw in body]

        return from_awaitable(_fetch, on_error=_to_submission_error)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ("OrderClient", "order_payload", "wire_product_id", "GENERIC_ERROR")
