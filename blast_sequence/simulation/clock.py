"""Tick sources: recurring timers the scheduler can start and cancel.

The scheduler never sleeps or spawns threads itself.  It asks a
:class:`TickSource` for a recurring callback and keeps the returned
:class:`TickHandle` so it can cancel the timer the moment it leaves the
running state.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class TickSource(Protocol):
    """Anything that can call *callback* every *interval_ms* milliseconds."""

    def schedule_tick(
        self, interval_ms: int, callback: Callable[[], None]
    ) -> TickHandle: ...


# ── Deterministic simulated clock ────────────────────────────────────


class _ManualTimer:
    def __init__(
        self,
        source: ManualTickSource,
        interval_ms: int,
        callback: Callable[[], None],
    ) -> None:
        self.source = source
        self.interval_ms = interval_ms
        self.callback = callback
        self.next_due = source.now + interval_ms
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        self.source._discard(self)


class ManualTickSource:
    """Simulated clock advanced explicitly by the caller.

    :meth:`advance` walks time forward and fires every timer that falls due
    in chronological order; timers due at the same instant fire in the order
    they were scheduled.  A timer cancelled from inside a callback does not
    fire again, even later in the same :meth:`advance` call.
    """

    def __init__(self) -> None:
        self.now = 0
        self._timers: list[_ManualTimer] = []

    @property
    def pending(self) -> int:
        """Number of active (not cancelled) timers."""
        return len(self._timers)

    def schedule_tick(
        self, interval_ms: int, callback: Callable[[], None]
    ) -> _ManualTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        timer = _ManualTimer(self, interval_ms, callback)
        self._timers.append(timer)
        return timer

    def _discard(self, timer: _ManualTimer) -> None:
        if timer in self._timers:
            self._timers.remove(timer)

    def advance(self, ms: int) -> int:
        """Move simulated time forward by *ms*; return the number of ticks fired."""
        target = self.now + ms
        fired = 0
        while True:
            due = [t for t in self._timers if t.next_due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_due)
            self.now = timer.next_due
            timer.next_due += timer.interval_ms
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, limit_ms: int = 600_000) -> int:
        """Advance until no timer is pending or *limit_ms* has elapsed."""
        start = self.now
        fired = 0
        while self._timers and self.now - start < limit_ms:
            step = min(t.next_due for t in self._timers) - self.now
            fired += self.advance(max(step, 0))
        return fired


# ── Real-time cooperative timer ──────────────────────────────────────


class _AsyncioTimer:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_ms: int,
        callback: Callable[[], None],
    ) -> None:
        self.loop = loop
        self.interval = interval_ms / 1000.0
        self.callback = callback
        self.cancelled = False
        self._handle = loop.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        if self.cancelled:
            return
        # Re-arm before running so a cancel() inside the callback wins.
        self._handle = self.loop.call_later(self.interval, self._fire)
        self.callback()

    def cancel(self) -> None:
        self.cancelled = True
        self._handle.cancel()


class AsyncioTickSource:
    """Recurring timers on an asyncio event loop (single-threaded)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def schedule_tick(
        self, interval_ms: int, callback: Callable[[], None]
    ) -> _AsyncioTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        return _AsyncioTimer(self.loop, interval_ms, callback)
