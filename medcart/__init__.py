"""
medcart — cart, address book, delivery pricing and checkout for an online pharmacy.

    from medcart import cart as Ct        # Cart lines and totals
    from medcart import address as A      # Validated address book
    from medcart import gateway as G      # Hosted payment widgets behind one protocol
    from medcart import orders as O       # Remote order API
    from medcart import checkout as C     # Checkout state machine

Server-side pieces are imported explicitly:

    from medcart import persistence       # SQLAlchemy state repository
    from medcart import proxy             # FastAPI gateway proxy
"""

from medcart import cart
from medcart import address
from medcart import gateway
from medcart import orders
from medcart import idempotency
from medcart import checkout
from medcart import lift
from medcart._types import Lazy, Money, ZERO, to_money
from medcart.pricing import DeliveryPricing, DEFAULT_PRICING, delivery_fee

__version__ = "0.1.0"

__all__ = (
    "cart",
    "address",
    "gateway",
    "orders",
    "idempotency",
    "checkout",
    "lift",
    "Lazy",
    "Money",
    "ZERO",
    "to_money",
    "DeliveryPricing",
    "DEFAULT_PRICING",
    "delivery_fee",
)
