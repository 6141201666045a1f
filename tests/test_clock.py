"""Tests for tick sources."""

from __future__ import annotations

import asyncio

import pytest

from blast_sequence.simulation.clock import AsyncioTickSource, ManualTickSource


class TestManualTickSource:
    def test_fires_on_interval(self):
        clock = ManualTickSource()
        calls: list[int] = []
        clock.schedule_tick(50, lambda: calls.append(clock.now))
        fired = clock.advance(175)
        assert fired == 3
        assert calls == [50, 100, 150]
        assert clock.now == 175

    def test_partial_advances_accumulate(self):
        clock = ManualTickSource()
        calls: list[int] = []
        clock.schedule_tick(50, lambda: calls.append(clock.now))
        clock.advance(30)
        clock.advance(30)
        assert calls == [50]

    def test_cancel_stops_timer(self):
        clock = ManualTickSource()
        calls: list[int] = []
        handle = clock.schedule_tick(10, lambda: calls.append(1))
        clock.advance(20)
        handle.cancel()
        clock.advance(100)
        assert len(calls) == 2
        assert clock.pending == 0

    def test_cancel_from_callback(self):
        clock = ManualTickSource()
        calls: list[int] = []
        handle = None

        def cb():
            calls.append(clock.now)
            if len(calls) == 2:
                handle.cancel()

        handle = clock.schedule_tick(10, cb)
        clock.advance(1000)
        assert calls == [10, 20]

    def test_timers_fire_in_time_order(self):
        clock = ManualTickSource()
        order: list[str] = []
        clock.schedule_tick(30, lambda: order.append("slow"))
        clock.schedule_tick(20, lambda: order.append("fast"))
        clock.advance(60)
        assert order == ["fast", "slow", "fast", "slow", "fast"]

    def test_run_until_idle(self):
        clock = ManualTickSource()
        handle = None

        def cb():
            if clock.now >= 200:
                handle.cancel()

        handle = clock.schedule_tick(50, cb)
        assert clock.run_until_idle() == 4
        assert clock.now == 200

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ManualTickSource().schedule_tick(0, lambda: None)


class TestAsyncioTickSource:
    def test_recurring_and_cancel(self):
        async def scenario() -> int:
            calls: list[int] = []
            source = AsyncioTickSource()
            handle = None

            def cb():
                calls.append(1)
                if len(calls) == 3:
                    handle.cancel()

            handle = source.schedule_tick(5, cb)
            await asyncio.sleep(0.2)
            return len(calls)

        assert asyncio.run(scenario()) == 3
