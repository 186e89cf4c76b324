"""
Orders — remote order API client and the finalized Order projection.

    from medcart import orders as O

    client = O.OrderClient.from_settings(settings)
    match await client.submit(address, lines, fee, O.PaymentMethod.COD):
        case Ok(receipt): receipt.order_id
        case Error(err): err.kind, err.message
"""

from medcart.orders._types import (
    PaymentMethod,
    PaymentStatus,
    OrderStatus,
    OrderReceipt,
    Order,
    OrderDetailRow,
    OrderSubmissionErrorKind,
    OrderSubmissionError,
    OrderSubmissionFailure,
)
from medcart.orders._client import OrderClient, order_payload, wire_product_id, GENERIC_ERROR
from medcart.orders.report import OrdersSummary, summarize, search

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
    "OrderClient",
    "order_payload",
    "wire_product_id",
    "GENERIC_ERROR",
    "OrdersSummary",
    "summarize",
    "search",
)
