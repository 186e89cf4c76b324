from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

from medcart.pricing import DeliveryPricing

ROOT_DIR = Path(__file__).resolve().parents[1]

DEFAULT_API_BASE_URL = "https://conversion-engine-api.onrender.com"


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


def _get_decimal(*keys: str, default: str) -> Decimal:
    v = _get_env(*keys, default=None)
    return Decimal(v if v is not None else default)


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout: float = 30.0
    proxy_base_url: str = "http://localhost:3000"
    gateway: str = "cashfree"
    currency: str = "INR"
    store_name: str = "MediCare"
    free_delivery_threshold: Decimal = Decimal("499")
    delivery_fee: Decimal = Decimal("40")
    database_url: str = "sqlite+aiosqlite:///medcart.db"
    log_level: str = "INFO"
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    cashfree_app_id: str = ""
    cashfree_secret_key: str = ""
    cashfree_env: str = "production"
    app_url: str = ""

    def delivery_pricing(self) -> DeliveryPricing:
        return DeliveryPricing(
            free_threshold=self.free_delivery_threshold,
            flat_fee=self.delivery_fee,
        )

    @property
    def cashfree_orders_url(self) -> str:
        if self.cashfree_env == "sandbox":
            return "https://sandbox.cashfree.com/pg/orders"
        return "https://api.cashfree.com/pg/orders"


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read settings from the environment, loading a .env file first."""
    load_dotenv(dotenv_path=env_file or ROOT_DIR / ".env")

    gateway = (_get_env("MEDCART_GATEWAY", default="cashfree") or "cashfree").lower()
    if gateway not in ("razorpay", "cashfree"):
        raise ValueError(f"MEDCART_GATEWAY must be razorpay or cashfree, got {gateway!r}")

    return Settings(
        api_base_url=_get_env(
            "MEDCART_API_BASE_URL", "NEXT_PUBLIC_API_BASE_URL", default=DEFAULT_API_BASE_URL
        ) or DEFAULT_API_BASE_URL,
        api_timeout=_get_float("MEDCART_API_TIMEOUT", default=30.0),
        proxy_base_url=_get_env("MEDCART_PROXY_BASE_URL", default="http://localhost:3000")
        or "http://localhost:3000",
        gateway=gateway,
        currency=_get_env("MEDCART_CURRENCY", default="INR") or "INR",
        store_name=_get_env("MEDCART_STORE_NAME", default="MediCare") or "MediCare",
        free_delivery_threshold=_get_decimal("MEDCART_FREE_DELIVERY_THRESHOLD", default="499"),
        delivery_fee=_get_decimal("MEDCART_DELIVERY_FEE", default="40"),
        database_url=_get_env("MEDCART_DATABASE_URL", default="sqlite+aiosqlite:///medcart.db")
        or "sqlite+aiosqlite:///medcart.db",
        log_level=_get_env("MEDCART_LOG_LEVEL", "LOG_LEVEL", default="INFO") or "INFO",
        razorpay_key_id=_get_env("RAZORPAY_KEY_ID", default="") or "",
        razorpay_key_secret=_get_env("RAZORPAY_KEY_SECRET", default="") or "",
        cashfree_app_id=_get_env("CASHFREE_APP_ID", default="") or "",
        cashfree_secret_key=_get_env("CASHFREE_SECRET_KEY", default="") or "",
        cashfree_env=(_get_env("CASHFREE_ENV", "NEXT_PUBLIC_CASHFREE_ENV", default="production")
                      or "production").lower(),
        app_url=_get_env("MEDCART_APP_URL", "NEXT_PUBLIC_APP_URL", default="") or "",
    )


__all__ = ("Settings", "load_settings")
