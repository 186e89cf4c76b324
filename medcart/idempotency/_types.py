"""
Submission record types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any


# ═══════════════════════════════════════════════════════════════════════════════
# Record State
# ═══════════════════════════════════════════════════════════════════════════════


class RecordState(Enum):
    """
    Lifecycle of one checkout session's submission slot.

        PENDING → COMPLETED (order recorded)
                → FAILED    (paid, order not recorded; kept for support)
                → (released: slot deleted, session may try again)
    """

    PENDING = auto()
    COMPLETED = auto()
    FAILED = auto()


@dataclass(frozen=True, slots=True)
class IdempotencyRecord[T]:
    """
    value: the recorded result, only for COMPLETED.
    error: the failure detail, only for FAILED.
    """

    key: str
    state: RecordState
    value: T | None
    error: Any
    created_at: datetime
    expires_at: datetime | None

    @property
    def is_failed(self) -> bool:
        return self.state == RecordState.FAILED


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class IdempotencyErrorKind(Enum):
    CONFLICT = auto()  # Slot already pending or completed
    STORE_ERROR = auto()  # Storage backend error


@dataclass(frozen=True, slots=True)
class IdempotencyError:
    kind: IdempotencyErrorKind
    message: str
    record: IdempotencyRecord[Any] | None = None


__all__ = (
    "RecordState",
    "IdempotencyRecord",
    "IdempotencyErrorKind",
    "IdempotencyError",
)
