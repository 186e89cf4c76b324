"""
Core types for medcart.

Re-exports from kungfu + custom type aliases.
"""

from __future__ import annotations

from decimal import Decimal

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail (network-bound operations)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Amounts in major currency units (rupees)."""

ZERO: Money = Decimal("0")


def to_money(value: Decimal | int | float | str) -> Money:
    """Coerce to Decimal without float noise (450.1 → Decimal('450.1'))."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Lazy",
    "Money",
    "ZERO",
    "to_money",
)
