"""
Idempotency — one order submission per checkout session.

    from medcart import idempotency as I

    guard = I.SubmissionGuard(I.MemoryStore(), I.Policy().with_ttl(hours=1))
    match await guard.acquire(session_id):
        case Ok(None): ...               # this call owns the submission
        case Error(err): err.kind        # CONFLICT: already pending/completed/failed
"""

from medcart.idempotency._types import (
    RecordState,
    IdempotencyRecord,
    IdempotencyErrorKind,
    IdempotencyError,
)
from medcart.idempotency._store import Store, StoreError, MemoryStore
from medcart.idempotency._policy import Policy
from medcart.idempotency._guard import SubmissionGuard, submission_key

__all__ = (
    "RecordState",
    "IdempotencyRecord",
    "IdempotencyErrorKind",
    "IdempotencyError",
    "Store",
    "StoreError",
    "MemoryStore",
    "Policy",
    "SubmissionGuard",
    "submission_key",
)
