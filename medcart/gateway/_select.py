"""
Pick the configured gateway variant. Nothing downstream branches on provider.
"""

from __future__ import annotations

import httpx

from medcart.config import Settings
from medcart.gateway._order_object import OrderObjectGateway, OrderWidget
from medcart.gateway._protocol import PaymentGateway
from medcart.gateway._session_token import SessionTokenGateway, SessionWidget


def gateway_from_settings(
    settings: Settings,
    client: httpx.AsyncClient,
    widget: OrderWidget | SessionWidget,
) -> PaymentGateway:
    if settings.gateway == "razorpay":
        return OrderObjectGateway(
            client,
            widget,  # type: ignore[arg-type]
            key_id=settings.razorpay_key_id,
            store_name=settings.store_name,
            currency=settings.currency,
        )
    if settings.gateway == "cashfree":
        return SessionTokenGateway(client, widget, currency=settings.currency)  # type: ignore[arg-type]
    raise ValueError(f"Unknown gateway: {settings.gateway!r}")


__all__ = ("gateway_from_settings",)
