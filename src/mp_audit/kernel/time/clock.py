"""Kernel time – the clock that stamps audit records."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


def utc_now() -> datetime:
    return datetime.now(UTC)


class Clock(Protocol):
    """Source of the moment a change was detected."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock, always timezone-aware UTC."""

    def now(self) -> datetime:
        return utc_now()


class FrozenClock:
    """Clock that only moves when told to.

    A naive *moment* is taken to be UTC, matching how records treat naive
    timestamps.
    """

    def __init__(self, moment: datetime) -> None:
        self._moment = moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> datetime:
        """Move forward by *delta* (or ``timedelta(**kwargs)``); return the new time."""
        self._moment += delta if delta is not None else timedelta(**kwargs)
        return self._moment


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
