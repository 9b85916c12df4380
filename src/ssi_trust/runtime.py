"""Injectable clocks and randomness sources.

Identity, credential, and presentation construction never read the wall
clock or the global RNG directly. Production code uses :class:`SystemClock`
and :class:`SecureRandom`; tests substitute :class:`FixedClock` and
:class:`SeededRandom` for reproducible output.
"""
from __future__ import annotations

import datetime
import random
import secrets
from typing import Protocol


class Clock(Protocol):
    """Source of timezone-aware "now" values."""

    def now(self) -> datetime.datetime: ...


class RandomSource(Protocol):
    """Source of random bytes."""

    def token_bytes(self, length: int) -> bytes: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)


class FixedClock:
    """A clock that only moves when told to.

    Parameters
    ----------
    at:
        Initial instant. Must be timezone-aware.
    """

    def __init__(self, at: datetime.datetime) -> None:
        self._now = _require_aware(at)

    def now(self) -> datetime.datetime:
        return self._now

    def set(self, at: datetime.datetime) -> None:
        self._now = _require_aware(at)

    def advance(self, delta: datetime.timedelta) -> datetime.datetime:
        """Move the clock forward by *delta* and return the new instant."""
        self._now = self._now + delta
        return self._now


class SecureRandom:
    """Cryptographically secure randomness from the operating system."""

    def token_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)


class SeededRandom:
    """Deterministic pseudo-random bytes for tests.

    Not suitable for key material outside of tests: the output is fully
    determined by *seed*.
    """

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(seed)

    def token_bytes(self, length: int) -> bytes:
        return self._rng.randbytes(length)


def _require_aware(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("FixedClock requires a timezone-aware datetime.")
    return value


__all__ = [
    "Clock",
    "FixedClock",
    "RandomSource",
    "SecureRandom",
    "SeededRandom",
    "SystemClock",
]
