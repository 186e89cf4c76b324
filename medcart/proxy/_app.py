"""
Gateway proxy app — server-side session creation for both gateway variants.

    app = create_app(load_settings())
    # uvicorn medcart.proxy:app_from_env --factory
"""

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import fastapi
import httpx
from fastapi.responses import JSONResponse
from kungfu import Ok, Error

from medcart.config import Settings, load_settings
from medcart.log import setup_logging
from medcart.proxy._codecs import (
    RazorpayOrderIn,
    RazorpayOrderOut,
    CashfreeOrderIn,
    CashfreeOrderOut,
)
from medcart.proxy._types import ProxyError
from medcart.proxy._upstream import create_razorpay_order, create_cashfree_order


def _now_ms() -> int:
    return int(time.time() * 1000)


def _error_response(err: ProxyError) -> JSONResponse:
    return JSONResponse({"error": err.message}, status_code=err.status)


def create_app(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    clock_ms: Callable[[], int] = _now_ms,
) -> fastapi.FastAPI:
    upstream = client or httpx.AsyncClient(timeout=settings.api_timeout)

    @asynccontextmanager
    async def lifespan(_: fastapi.FastAPI) -> AsyncIterator[None]:
        yield
        if client is None:
            await upstream.aclose()

    app = fastapi.FastAPI(title=f"{settings.store_name} payments proxy", lifespan=lifespan)

    @app.post("/api/razorpay/create-order", response_model=RazorpayOrderOut)
    async def razorpay_create_order(req: RazorpayOrderIn) -> Any:
        match req.to_domain(clock_ms()):
            case Error(err):
                return _error_response(err)
            case Ok(domain):
                pass
        match await create_razorpay_order(upstream, settings, domain):
            case Ok(order):
                return RazorpayOrderOut.from_domain(order)
            case Error(err):
                return _error_response(err)

    @app.post("/api/cashfree/create-order", response_model=CashfreeOrderOut)
    async def cashfree_create_order(req: CashfreeOrderIn) -> Any:
        match req.to_domain(clock_ms()):
            case Error(err):
                return _error_response(err)
            case Ok(domain):
                pass
        match await create_cashfree_order(upstream, settings, domain):
            case Ok(session):
                return CashfreeOrderOut.from_domain(session)
            case Error(err):
                return _error_response(err)

    return app


def app_from_env() -> fastapi.FastAPI:
    settings = load_settings()
    setup_logging(settings.log_level)
    return create_app(settings)
