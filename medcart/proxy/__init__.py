"""
Proxy — FastAPI routes that create gateway orders/sessions server-side.

    POST /api/razorpay/create-order   {amount, currency?, receipt?} → {id, amount, currency}
    POST /api/cashfree/create-order   {amount, customerId?, customerPhone?, customerEmail?}
                                      → {order_id, payment_session_id}

Errors are {"error": message} with 400 (bad amount), the upstream status,
502 (no session id) or 500.
"""

from medcart.proxy._types import (
    RazorpayOrderRequest,
    RazorpayOrder,
    CashfreeCustomer,
    CashfreeOrderRequest,
    CashfreeSession,
    ProxyError,
)
from medcart.proxy._codecs import (
    RazorpayOrderIn,
    RazorpayOrderOut,
    CashfreeOrderIn,
    CashfreeOrderOut,
)
from medcart.proxy._upstream import cashfree_payload, create_razorpay_order, create_cashfree_order
from medcart.proxy._app import create_app, app_from_env

__all__ = (
    "RazorpayOrderRequest",
    "RazorpayOrder",
    "CashfreeCustomer",
    "CashfreeOrderRequest",
    "CashfreeSession",
    "ProxyError",
    "RazorpayOrderIn",
    "RazorpayOrderOut",
    "CashfreeOrderIn",
    "CashfreeOrderOut",
    "cashfree_payload",
    "create_razorpay_order",
    "create_cashfree_order",
    "create_app",
    "app_from_env",
)
