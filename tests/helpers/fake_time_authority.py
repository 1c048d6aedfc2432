"""FakeTimeAuthority - controllable clock for deterministic workflow tests.

Usage:
    >>> clock = FakeTimeAuthority(frozen_at=datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc))
    >>> service = AbsenceEscalationService(case_repo, log, identity, clock)
    >>> clock.advance(delta=timedelta(days=2))

With tick_seconds set, every now() call moves the clock forward, which
gives each committed transition a distinct timestamp:

    >>> clock = FakeTimeAuthority(tick_seconds=1)
    >>> clock.now() < clock.now()
    True
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from student_affairs.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FAKE_TIME = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Controllable time authority for deterministic tests.

    Attributes:
        _current_time: The controlled current time.
        _monotonic_advances: Accumulated advances for the monotonic clock.
        _tick: Seconds added after every now()/utcnow() call (0 = frozen).
    """

    def __init__(
        self,
        frozen_at: datetime | None = None,
        *,
        tick_seconds: float = 0.0,
        start_monotonic: float = 0.0,
    ) -> None:
        """Initialize the fake time authority.

        Args:
            frozen_at: Time to start at; defaults to 2026-01-01T00:00:00 UTC.
                A naive datetime is taken as UTC.
            tick_seconds: Auto-advance applied after each read.
            start_monotonic: Starting value for the monotonic clock.
        """
        if frozen_at is None:
            frozen_at = DEFAULT_FAKE_TIME
        if frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=timezone.utc)
        if tick_seconds < 0:
            raise ValueError(f"tick_seconds must be >= 0, got {tick_seconds}")

        self._current_time: datetime = frozen_at
        self._monotonic_base: float = start_monotonic
        self._monotonic_advances: float = 0.0
        self._tick: float = tick_seconds
        self._reads: int = 0

    def now(self) -> datetime:
        """Return the controlled current time, then apply the tick."""
        current = self._current_time
        self._reads += 1
        if self._tick:
            self.advance(seconds=self._tick)
        return current

    def utcnow(self) -> datetime:
        """Same as now(); the fake clock is always UTC."""
        return self.now()

    def monotonic(self) -> float:
        """Return the controlled monotonic clock value."""
        return self._monotonic_base + self._monotonic_advances

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Advance time by the specified amount.

        Raises:
            ValueError: If neither argument is given or the amount is negative.
        """
        if delta is not None:
            advance_seconds = delta.total_seconds()
        elif seconds is not None:
            advance_seconds = float(seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")

        if advance_seconds < 0:
            raise ValueError(
                f"Cannot advance time backwards. Got {advance_seconds} seconds. "
                "Use set_time() for explicit time changes."
            )

        self._current_time += timedelta(seconds=advance_seconds)
        self._monotonic_advances += advance_seconds

    def set_time(self, dt: datetime) -> None:
        """Jump to an explicit time without touching the monotonic clock."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        self._current_time = dt

    @property
    def current_time(self) -> datetime:
        """Current time without triggering a tick."""
        return self._current_time

    @property
    def read_count(self) -> int:
        """How many times now()/utcnow() were called."""
        return self._reads

    def __repr__(self) -> str:
        return (
            f"FakeTimeAuthority("
            f"current_time={self._current_time.isoformat()}, "
            f"tick={self._tick}, "
            f"monotonic={self.monotonic():.3f})"
        )
