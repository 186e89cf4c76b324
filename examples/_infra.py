"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable, Coroutine, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from medcart.orders import OrderClient


# Fake order API
@dataclass(slots=True)
class FakeOrderApi:
    """Answers POST /create-order; `down` simulates an outage."""

    down: bool = False
    calls: int = 0
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1001))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        print(f"  [API] {request.method} {request.url.path} (call #{self.calls})")
        if self.down:
            return httpx.Response(503, json={"message": "Service unavailable"})
        return httpx.Response(201, json={"message": "Order created", "order_id": next(self._ids), "user_id": 7})

    def client(self) -> OrderClient:
        return OrderClient(httpx.AsyncClient(transport=httpx.MockTransport(self), base_url="https://api.demo"))


# Fake payment proxy
def fake_proxy() -> httpx.AsyncClient:
    counter = itertools.count(1)

    def handler(request: httpx.Request) -> httpx.Response:
        n = next(counter)
        return httpx.Response(200, json={"order_id": f"order_{n}", "payment_session_id": f"session_{n}"})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://proxy.demo")


# Scripted widget
@dataclass(slots=True)
class ScriptedWidget:
    """SessionWidget that replays canned widget results in order."""

    results: list[Mapping[str, Any]]

    async def checkout(self, payment_session_id: str) -> Mapping[str, Any]:
        await asyncio.sleep(0.01)
        result = self.results.pop(0)
        print(f"  [WIDGET] {payment_session_id} → {dict(result)}")
        return result


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
