"""
Guard policy — how long settled records live.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class Policy:
    """
    Immutable; each with_* returns a new Policy.

    Example:
        policy = Policy().with_ttl(hours=1).with_store_failed(True)

    persist_failed=True keeps FAILED records, so a paid-but-unrecorded
    session cannot be submitted again while the record lives. With False they
    are deleted and the key may be reclaimed. Settled records expire after
    their TTL; None keeps them for the life of the store.
    """

    result_ttl: timedelta | None = timedelta(hours=1)
    persist_failed: bool = True
    failed_result_ttl: timedelta | None = None

    def with_ttl(
        self,
        *,
        seconds: float | None = None,
        minutes: float | None = None,
        hours: float | None = None,
        delta: timedelta | None = None,
    ) -> Policy:
        if delta is not None:
            ttl_val: timedelta | None = delta
        else:
            total_seconds = (seconds or 0) + (minutes or 0) * 60 + (hours or 0) * 3600
            ttl_val = timedelta(seconds=total_seconds) if total_seconds > 0 else None
        return replace(self, result_ttl=ttl_val)

    def with_store_failed(self, store: bool = True) -> Policy:
        return replace(self, persist_failed=store)

    def with_failed_ttl(self, *, seconds: float | None = None, delta: timedelta | None = None) -> Policy:
        ttl_val = delta if delta else timedelta(seconds=seconds or 0)
        return replace(self, failed_result_ttl=ttl_val if ttl_val.total_seconds() > 0 else None)

    @property
    def failed_ttl(self) -> timedelta | None:
        """Falls back to result_ttl when no separate failed TTL is set."""
        return self.failed_result_ttl or self.result_ttl


__all__ = ("Policy",)
