"""Detonation scheduler: the time-driven blast-sequence state machine.

A :class:`BlastSequence` owns the layout, the current well set and the run
state.  Its commands (:meth:`~BlastSequence.regenerate`,
:meth:`~BlastSequence.start`, :meth:`~BlastSequence.tick`,
:meth:`~BlastSequence.reset`) are the only mutators.  Every commit replaces
the whole well tuple, and readers receive immutable
:class:`SequenceSnapshot` values.

States::

    Idle --start--> Running --tick--> Running
    Running --elapsed >= max_delay + tail--> Idle
    any --reset / regenerate--> Idle
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Sequence

from ..config.constants import (
    COMPLETION_TAIL_MS,
    IMMINENT_WINDOW_MS,
    TICK_INTERVAL_MS,
)
from ..core.grid import generate, max_delay
from ..core.layout import LayoutParameters, SummaryMetrics, summarize
from ..core.well import Well
from ..utils.logging import get_logger
from .clock import ManualTickSource, TickHandle, TickSource

logger = get_logger(__name__)


class WellStatus(Enum):
    """Display status of one well."""

    IDLE = "idle"
    IMMINENT = "imminent"
    EXPLODED = "exploded"


@dataclass(frozen=True)
class RunState:
    """Run progress; ``max_delay`` is fixed when the run starts."""

    is_running: bool = False
    elapsed: int = 0
    max_delay: int = 0
    run_id: int = 0


# ── Pure helpers ─────────────────────────────────────────────────────


def advance_wells(wells: Sequence[Well], elapsed: int) -> tuple[Well, ...]:
    """Mark every well with ``delay <= elapsed`` as exploded.

    Wells already exploded stay exploded; nothing is ever reverted.
    """
    return tuple(w.detonated() if w.delay <= elapsed else w for w in wells)


def is_imminent(well: Well, elapsed: int) -> bool:
    return not well.exploded and abs(well.delay - elapsed) <= IMMINENT_WINDOW_MS


def progress_fraction(elapsed: int, run_max_delay: int) -> float:
    """``elapsed / (max_delay + tail)`` clamped to ``[0, 1]``."""
    total = run_max_delay + COMPLETION_TAIL_MS
    return min(max(elapsed / total, 0.0), 1.0)


@dataclass(frozen=True)
class SequenceSnapshot:
    """Read-only view of a sequence at one committed instant."""

    params: LayoutParameters
    wells: tuple[Well, ...]
    run: RunState
    generation: int

    @property
    def elapsed(self) -> int:
        return self.run.elapsed

    @property
    def is_running(self) -> bool:
        return self.run.is_running

    @property
    def progress(self) -> float:
        return progress_fraction(self.run.elapsed, self.run.max_delay)

    @property
    def summary(self) -> SummaryMetrics:
        return summarize(self.params)

    def is_imminent(self, well: Well) -> bool:
        return is_imminent(well, self.run.elapsed)

    def status_of(self, well: Well) -> WellStatus:
        if well.exploded:
            return WellStatus.EXPLODED
        if self.is_imminent(well):
            return WellStatus.IMMINENT
        return WellStatus.IDLE


SnapshotListener = Callable[[SequenceSnapshot], None]


# ── State machine ────────────────────────────────────────────────────


class BlastSequence:
    """Blast plan plus its detonation run.

    Each run schedules exactly one recurring timer on *tick_source*.  The
    callback carries the ``run_id`` it was created for; once a reset,
    regeneration or natural completion bumps the id, any late callback is
    discarded without touching state.
    """

    def __init__(
        self,
        params: LayoutParameters | None = None,
        tick_source: TickSource | None = None,
        tick_interval: int = TICK_INTERVAL_MS,
    ) -> None:
        self.tick_source: TickSource = tick_source or ManualTickSource()
        self.tick_interval = tick_interval
        self.params = params or LayoutParameters()
        self.wells: tuple[Well, ...] = generate(self.params)
        self.run_state = RunState()
        self.generation = 0
        self._handle: TickHandle | None = None
        self._listeners: list[SnapshotListener] = []

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.run_state.is_running

    @property
    def elapsed(self) -> int:
        return self.run_state.elapsed

    @property
    def progress(self) -> float:
        return progress_fraction(self.run_state.elapsed, self.run_state.max_delay)

    def is_imminent(self, well: Well) -> bool:
        return is_imminent(well, self.run_state.elapsed)

    def snapshot(self) -> SequenceSnapshot:
        return SequenceSnapshot(
            params=self.params,
            wells=self.wells,
            run=self.run_state,
            generation=self.generation,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with every committed snapshot.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def regenerate(self, params: LayoutParameters) -> tuple[Well, ...]:
        """Replace the layout and rebuild the well set from scratch."""
        self._cancel_timer()
        self.params = params
        self.wells = generate(params)
        self.generation += 1
        self.run_state = RunState(run_id=self.run_state.run_id + 1)
        logger.info(
            "sequence_regenerated",
            generation=self.generation,
            rows=params.rows,
            cols=params.cols,
            wells=len(self.wells),
        )
        self._publish()
        return self.wells

    def start(self) -> bool:
        """Begin a run; return ``False`` if one is already in progress."""
        if self.run_state.is_running:
            logger.warning("start_ignored", run_id=self.run_state.run_id)
            return False

        self._cancel_timer()
        self.wells = tuple(w.cleared() for w in self.wells)
        run_id = self.run_state.run_id + 1
        self.run_state = RunState(
            is_running=True,
            elapsed=0,
            max_delay=max_delay(self.wells),
            run_id=run_id,
        )
        self._handle = self.tick_source.schedule_tick(
            self.tick_interval, lambda: self._on_timer(run_id)
        )
        logger.info(
            "sequence_started",
            run_id=run_id,
            wells=len(self.wells),
            max_delay=self.run_state.max_delay,
        )
        self._publish()
        return True

    def tick(self) -> bool:
        """Advance the running sequence by one interval.

        Returns ``False`` (and changes nothing) when idle.
        """
        run = self.run_state
        if not run.is_running:
            return False

        elapsed = run.elapsed + self.tick_interval
        self.wells = advance_wells(self.wells, elapsed)

        if elapsed >= run.max_delay + COMPLETION_TAIL_MS:
            self._cancel_timer()
            self.run_state = RunState(run_id=run.run_id + 1)
            logger.info(
                "sequence_completed",
                run_id=run.run_id,
                elapsed=elapsed,
                exploded=sum(1 for w in self.wells if w.exploded),
            )
        else:
            self.run_state = replace(run, elapsed=elapsed)
        self._publish()
        return True

    def reset(self) -> None:
        """Stop any run and clear every detonation flag."""
        was_running = self.run_state.is_running
        self._cancel_timer()
        self.wells = tuple(w.cleared() for w in self.wells)
        self.run_state = RunState(run_id=self.run_state.run_id + 1)
        logger.info("sequence_reset", was_running=was_running)
        self._publish()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_timer(self, run_id: int) -> None:
        if run_id != self.run_state.run_id or not self.run_state.is_running:
            logger.debug(
                "stale_tick_discarded",
                run_id=run_id,
                current_run_id=self.run_state.run_id,
            )
            return
        self.tick()

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _publish(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
