"""
Lift — how medcart turns remote calls into LazyCoroResult.

The gateway proxy and the order API are reached through httpx; both clients
wrap their request coroutine with from_awaitable and a module-specific error
mapper, so callers always match on Ok / Error and never catch httpx errors.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult, Result

from combinators.lift import catching_async


def from_result[T, E](result: Result[T, E]) -> LazyCoroResult[T, E]:
    """Already settled outcome (e.g. a scripted gateway in tests) as a lazy value."""
    async def _run() -> Result[T, E]:
        return result
    return LazyCoroResult(_run)


def from_awaitable[T, E](
    awaitable_fn: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
) -> LazyCoroResult[T, E]:
    """
    Example:
        return from_awaitable(_create, on_error=to_session_error)

    on_error receives whatever _create raised (GatewaySessionFailure,
    httpx.HTTPError, ...) and returns the module's error value.
    """
    return catching_async(awaitable_fn, on_error=on_error)


__all__ = ("from_result", "from_awaitable")
