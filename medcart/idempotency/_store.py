"""
Submission store — typed storage protocol plus the in-memory implementation.

All methods return Result for explicit error handling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol

from kungfu import Result, Ok, Error

from medcart.idempotency._types import RecordState, IdempotencyRecord


@dataclass(frozen=True)
class StoreError:
    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Store[T](Protocol):
    async def get(self, key: str) -> Result[IdempotencyRecord[T] | None, StoreError]:
        """Ok(None) if not found or expired."""
        ...

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]:
        """
        Atomically claim the key.

        Ok(True) if claimed, Ok(False) if a live record already exists.
        """
        ...

    async def set_completed(self, key: str, value: T, ttl: timedelta | None) -> Result[None, StoreError]: ...

    async def set_failed(self, key: str, error: Any, ttl: timedelta | None) -> Result[None, StoreError]: ...

    async def delete(self, key: str) -> Result[bool, StoreError]:
        """Ok(True) if the record existed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class _StoredRecord[T]:
    key: str
    state: RecordState
    value: T | None
    error: Any
    created_at: datetime
    expires_at: datetime | None

    def to_record(self) -> IdempotencyRecord[T]:
        return IdempotencyRecord(
            key=self.key,
            state=self.state,
            value=self.value,
            error=self.error,
            created_at=self.created_at,
            expires_at=self.expires_at,
        )

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and datetime.now() > self.expires_at


class MemoryStore[T]:
    """
    Single-process store. Checkout sessions are ephemeral, so nothing here
    needs to outlive the process.
    """

    def __init__(self) -> None:
        self._records: dict[str, _StoredRecord[T]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Result[IdempotencyRecord[T] | None, StoreError]:
        async with self._lock:
            record = self._records.get(key)
            if record is None:
                return Ok(None)
            if record.expired:
                del self._records[key]
                return Ok(None)
            return Ok(record.to_record())

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]:
        async with self._lock:
            self._purge_expired()
            existing = self._records.get(key)
            if existing is not None and not existing.expired:
                return Ok(False)

            now = datetime.now()
            self._records[key] = _StoredRecord(
                key=key,
                state=RecordState.PENDING,
                value=None,
                error=None,
                created_at=now,
                expires_at=now + ttl if ttl else None,
            )
            return Ok(True)

    async def set_completed(self, key: str, value: T, ttl: timedelta | None) -> Result[None, StoreError]:
        return await self._settle(key, RecordState.COMPLETED, value, None, ttl)

    async def set_failed(self, key: str, error: Any, ttl: timedelta | None) -> Result[None, StoreError]:
        return await self._settle(key, RecordState.FAILED, None, error, ttl)

    async def delete(self, key: str) -> Result[bool, StoreError]:
        async with self._lock:
            return Ok(self._records.pop(key, None) is not None)

    def __len__(self) -> int:
        return len(self._records)

    def _purge_expired(self) -> None:
        for key in [k for k, r in self._records.items() if r.expired]:
            del self._records[key]

    async def _settle(
        self,
        key: str,
        state: RecordState,
        value: T | None,
        error: Any,
        ttl: timedelta | None,
    ) -> Result[None, StoreError]:
        async with self._lock:
            existing = self._records.get(key)
            if existing is None:
                return Error(StoreError(f"No pending record for key: {key}"))
            existing.state = state
            existing.value = value
            existing.error = error
            existing.expires_at = datetime.now() + ttl if ttl else None
            return Ok(None)


__all__ = ("StoreError", "Store", "MemoryStore")
