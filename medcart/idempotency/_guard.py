"""
Submission guard — at most one order submission per checkout session.

The orchestrator claims the session key before any network call. A second
claim while the first is pending, completed or failed-and-kept is refused.
"""

from __future__ import annotations

import logging
from typing import Any

from kungfu import Result, Ok, Error

from medcart.idempotency._policy import Policy
from medcart.idempotency._store import MemoryStore, Store
from medcart.idempotency._types import (
    IdempotencyError,
    IdempotencyErrorKind,
    IdempotencyRecord,
)

logger = logging.getLogger(__name__)


def submission_key(session_id: str) -> str:
    return f"checkout:{session_id}"


class SubmissionGuard[T]:
    """
    Example:
        guard = SubmissionGuard[Order]()
        match await guard.acquire(session.id):
            case Error(err): refuse(err)
            case Ok(None): ...
        # then exactly one of:
        await guard.complete(session.id, order)
        await guard.fail(session.id, reason)
        await guard.release(session.id)
    """

    def __init__(self, store: Store[T] | None = None, policy: Policy | None = None) -> None:
        self._store: Store[T] = store if store is not None else MemoryStore()
        self._policy = policy or Policy()

    async def acquire(self, session_id: str) -> Result[None, IdempotencyError]:
        key = submission_key(session_id)
        match await self._store.set_pending(key, None):
            case Error(err):
                return Error(IdempotencyError(IdempotencyErrorKind.STORE_ERROR, err.message))
            case Ok(True):
                return Ok(None)
            case Ok(_):
                pass

        existing = await self.record(session_id)
        state = existing.state.name.lower() if existing else "pending"
        logger.warning("Submission for %s refused: already %s", key, state)
        return Error(IdempotencyError(
            IdempotencyErrorKind.CONFLICT,
            f"Checkout {session_id} is already {state}",
            existing,
        ))

    async def complete(self, session_id: str, value: T) -> Result[None, IdempotencyError]:
        return _lift(await self._store.set_completed(
            submission_key(session_id), value, self._policy.result_ttl,
        ))

    async def fail(self, session_id: str, error: Any) -> Result[None, IdempotencyError]:
        """Keep the record when persist_failed, otherwise release the key."""
        if not self._policy.persist_failed:
            return await self.release(session_id)
        return _lift(await self._store.set_failed(
            submission_key(session_id), error, self._policy.failed_ttl,
        ))

    async def release(self, session_id: str) -> Result[None, IdempotencyError]:
        match await self._store.delete(submission_key(session_id)):
            case Error(err):
                return Error(IdempotencyError(IdempotencyErrorKind.STORE_ERROR, err.message))
            case Ok(_):
                return Ok(None)

    async def record(self, session_id: str) -> IdempotencyRecord[T] | None:
        match await self._store.get(submission_key(session_id)):
            case Ok(found):
                return found
            case Error(_):
                return None


def _lift(result: Result[None, Any]) -> Result[None, IdempotencyError]:
    match result:
        case Ok(_):
            return Ok(None)
        case Error(err):
            return Error(IdempotencyError(IdempotencyErrorKind.STORE_ERROR, err.message))


__all__ = ("SubmissionGuard", "submission_key")
