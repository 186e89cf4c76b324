"""
Gateway — hosted-checkout providers behind one protocol.

    from medcart import gateway as G

    gw = G.SessionTokenGateway(client, widget)
    match await gw.create_session(Decimal("529"), G.Customer("Asha Rao", "9876543210")):
        case Ok(handle):
            match await gw.present_checkout(handle):
                case G.Completed(ref): ...
                case G.Cancelled(): ...
                case G.Failed(reason): ...
        case Error(err): ...

Variants:
    OrderObjectGateway  — server order id + callback widget (Razorpay)
    SessionTokenGateway — server session token + promise widget (Cashfree)
"""

from medcart.gateway._types import (
    Customer,
    SessionHandle,
    Completed,
    Cancelled,
    Failed,
    Outcome,
    GatewaySessionErrorKind,
    GatewaySessionError,
    GatewaySessionFailure,
    sanitize_customer_id,
)
from medcart.gateway._protocol import PaymentGateway, to_minor_units
from medcart.gateway._order_object import OrderObjectGateway, OrderWidget
from medcart.gateway._session_token import (
    CANCEL_MESSAGE,
    SessionTokenGateway,
    SessionWidget,
    outcome_from_result,
)
from medcart.gateway._select import gateway_from_settings

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
    "PaymentGateway",
    "to_minor_units",
    "OrderObjectGateway",
    "OrderWidget",
    "SessionTokenGateway",
    "SessionWidget",
    "CANCEL_MESSAGE",
    "outcome_from_result",
    "gateway_from_settings",
)
