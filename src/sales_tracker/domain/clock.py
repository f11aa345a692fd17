"""
Clock abstraction.

Time-dependent rules (happy hour) and order timestamps read the time through
a `Clock` instead of calling `datetime.now()` directly, so tests can pin the
time of day.
"""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Anything with a `now() -> datetime` method."""

    def now(self) -> datetime: ...


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Always returns the same instant. Move it with `set()`."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant
