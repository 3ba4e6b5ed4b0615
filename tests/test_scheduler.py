"""
Unit tests for the TickScheduler and timer services.

Tests cover:
- Interval selection from the cached power state (low-power cadence)
- Arm → fire → tick → mark_dirty → re-arm cycle on a virtual clock
- Power changes apply at the next re-arm
- Registration failure: retry at double interval, then stall
- Teardown: pending tick cancelled once, nothing fires afterwards
- ManualTimerService ordering and cancellation
- AsyncioTimerService on a real event loop
"""

import asyncio
import logging

import pytest

from aquarium.core.config import SimConfig
from aquarium.simulation.engine import SimulationEngine
from aquarium.simulation.scheduler import (
    AsyncioTimerService,
    ManualTimerService,
    PowerState,
    TickScheduler,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def engine() -> SimulationEngine:
    eng = SimulationEngine(SimConfig())
    eng.initialize()
    return eng


@pytest.fixture
def timer() -> ManualTimerService:
    return ManualTimerService()


@pytest.fixture
def dirty() -> list:
    return []


@pytest.fixture
def scheduler(engine, timer, dirty) -> TickScheduler:
    return TickScheduler(engine, timer, mark_dirty=lambda: dirty.append(engine.current_tick))


# ---------------------------------------------------------------------------
# Power state and interval selection
# ---------------------------------------------------------------------------

class TestPowerState:
    def test_default_interval(self, scheduler):
        assert scheduler.select_interval() == 100

    def test_low_power_cadence(self, scheduler):
        scheduler.on_power_change(PowerState(charge_percent=15, is_charging=False))
        assert scheduler.select_interval() == 300

    def test_charging_keeps_default(self, scheduler):
        scheduler.on_power_change(PowerState(charge_percent=15, is_charging=True))
        assert scheduler.select_interval() == 100

    def test_threshold_is_strict(self, scheduler):
        scheduler.on_power_change(PowerState(charge_percent=20))
        assert scheduler.select_interval() == 100
        scheduler.on_power_change(PowerState(charge_percent=19))
        assert scheduler.select_interval() == 300

    def test_initial_power_argument(self, engine, timer):
        s = TickScheduler(engine, timer, power=PowerState(charge_percent=5))
        assert s.power.charge_percent == 5
        assert s.select_interval() == 300


# ---------------------------------------------------------------------------
# Tick cycle
# ---------------------------------------------------------------------------

class TestCycle:
    def test_start_arms(self, scheduler, timer):
        assert scheduler.start()
        assert scheduler.armed
        assert timer.pending_count == 1
        assert timer.next_due() == 100

    def test_fire_ticks_and_marks_dirty(self, scheduler, timer, engine, dirty):
        scheduler.start()
        assert timer.advance(100) == 1
        assert engine.current_tick == 1
        assert dirty == [1]
        assert scheduler.armed

    def test_steady_cadence(self, scheduler, timer, engine):
        scheduler.start()
        timer.advance(1000)
        assert engine.current_tick == 10
        assert scheduler.ticks_fired == 10

    def test_no_tick_before_due(self, scheduler, timer, engine):
        scheduler.start()
        timer.advance(99)
        assert engine.current_tick == 0

    def test_start_is_idempotent(self, scheduler, timer):
        scheduler.start()
        scheduler.start()
        assert timer.pending_count == 1

    def test_low_power_applies_on_rearm(self, scheduler, timer, engine):
        scheduler.start()
        scheduler.on_power_change(PowerState(charge_percent=15))
        timer.advance(100)
        assert engine.current_tick == 1
        assert scheduler.last_interval_ms == 300
        timer.advance(299)
        assert engine.current_tick == 1
        timer.advance(1)
        assert engine.current_tick == 2

    def test_low_power_cadence_over_time(self, engine, timer):
        s = TickScheduler(engine, timer, power=PowerState(charge_percent=15))
        s.start()
        timer.advance(3000)
        assert engine.current_tick == 10


# ---------------------------------------------------------------------------
# Registration failure
# ---------------------------------------------------------------------------

class TestFailure:
    def test_retry_at_double_interval(self, scheduler, timer):
        timer.fail_next = 1
        assert scheduler.start()
        assert scheduler.retries == 1
        assert scheduler.last_interval_ms == 200
        assert timer.next_due() == 200

    def test_stall_after_second_failure(self, scheduler, timer, engine, caplog):
        timer.fail_next = 2
        with caplog.at_level(logging.WARNING, logger="aquarium.simulation.scheduler"):
            assert not scheduler.start()
        assert scheduler.stalled
        assert not scheduler.armed
        assert "stalled" in caplog.text
        timer.advance(10_000)
        assert engine.current_tick == 0

    def test_restart_after_stall(self, scheduler, timer, engine):
        timer.fail_next = 2
        scheduler.start()
        assert scheduler.start()
        assert not scheduler.stalled
        timer.advance(100)
        assert engine.current_tick == 1

    def test_stall_on_rearm(self, scheduler, timer, engine):
        scheduler.start()
        timer.advance(100)
        timer.fail_next = 2
        timer.advance(100)
        assert engine.current_tick == 2
        assert scheduler.stalled
        timer.advance(1000)
        assert engine.current_tick == 2

    def test_capacity_limit(self, engine):
        timer = ManualTimerService(capacity=0)
        s = TickScheduler(engine, timer)
        assert not s.start()
        assert timer.failures == 2


# ---------------------------------------------------------------------------
# Teardown
# ---------------------------------------------------------------------------

class TestTeardown:
    def test_stop_cancels_pending(self, scheduler, timer, engine):
        scheduler.start()
        scheduler.stop()
        assert timer.pending_count == 0
        timer.advance(1000)
        assert engine.current_tick == 0
        assert scheduler.torn_down

    def test_stop_twice(self, scheduler):
        scheduler.start()
        scheduler.stop()
        scheduler.stop()
        assert scheduler.torn_down

    def test_no_start_after_stop(self, scheduler, timer):
        scheduler.stop()
        assert not scheduler.start()
        assert timer.pending_count == 0

    def test_stop_from_mark_dirty(self, engine, timer):
        holder = {}
        s = TickScheduler(engine, timer, mark_dirty=lambda: holder["s"].stop())
        holder["s"] = s
        s.start()
        timer.advance(1000)
        assert engine.current_tick == 1
        assert timer.pending_count == 0


# ---------------------------------------------------------------------------
# Timer services
# ---------------------------------------------------------------------------

class TestManualTimer:
    def test_fire_order(self):
        timer = ManualTimerService()
        order = []
        timer.register(50, lambda: order.append("b"))
        timer.register(10, lambda: order.append("a"))
        timer.register(50, lambda: order.append("c"))
        assert timer.advance(100) == 3
        assert order == ["a", "b", "c"]
        assert timer.now_ms == 100

    def test_cancel(self):
        timer = ManualTimerService()
        fired = []
        handle = timer.register(10, lambda: fired.append(1))
        timer.cancel(handle)
        timer.advance(100)
        assert fired == []
        assert timer.next_due() is None

    def test_callback_registration_in_window(self):
        timer = ManualTimerService()
        fired = []

        def first():
            fired.append(timer.now_ms)
            timer.register(10, lambda: fired.append(timer.now_ms))

        timer.register(10, first)
        timer.advance(30)
        assert fired == [10, 20]


class TestAsyncioTimer:
    def test_drives_engine(self):
        config = SimConfig()
        config.scheduler.default_interval_ms = 5
        config.scheduler.low_power_interval_ms = 15
        engine = SimulationEngine(config)

        async def drive():
            s = TickScheduler(engine, AsyncioTimerService())
            s.start()
            await asyncio.sleep(0.2)
            s.stop()
            after_stop = engine.current_tick
            await asyncio.sleep(0.05)
            return s, after_stop

        s, after_stop = asyncio.run(drive())
        assert s.ticks_fired >= 1
        assert engine.current_tick == after_stop

    def test_register_without_loop_fails_soft(self, caplog):
        service = AsyncioTimerService()
        with caplog.at_level(logging.WARNING, logger="aquarium.simulation.scheduler"):
            assert service.register(10, lambda: None) is None
        assert "Timer registration failed" in caplog.text
