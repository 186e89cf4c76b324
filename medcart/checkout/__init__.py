"""
Checkout — the state machine from cart to placed order.

    from medcart import checkout as C

    flow = C.CheckoutOrchestrator(cart, book, gateway, orders, pricing=settings.delivery_pricing())
    flow.begin()                     # CART → ADDRESS
    flow.proceed_to_payment()        # ADDRESS → PAYMENT
    match await flow.confirm(PaymentMethod.COD):
        case Ok(order): ...          # SUCCESS, cart cleared
        case Error(err):
            err.kind                 # C.CheckoutErrorKind
            err.retryable            # False only for PAYMENT_UNRECORDED / duplicates
            err.notice               # C.Notice(level, message)

Phases:

    CART → ADDRESS → PAYMENT → SUBMITTING → SUCCESS
                        ↑           │
                        └───────────┤  cancelled / gateway failed / COD failed
                                    ▼
                                  FAILED   (paid, order not recorded)
"""

from medcart.checkout._types import (
    Phase,
    CheckoutSession,
    CheckoutErrorKind,
    CheckoutError,
    NoticeLevel,
    Notice,
)
from medcart.checkout._orchestrator import (
    CheckoutOrchestrator,
    new_session_id,
    CANCELLED_NOTICE,
    INTERRUPTED_NOTICE,
)

__all__ = (
    "Phase",
    "CheckoutSession",
    "CheckoutErrorKind",
    "CheckoutError",
    "NoticeLevel",
    "Notice",
    "CheckoutOrchestrator",
    "new_session_id",
    "CANCELLED_NOTICE",
    "INTERRUPTED_NOTICE",
)
