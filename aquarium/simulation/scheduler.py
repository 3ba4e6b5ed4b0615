"""
Tick Scheduler for the Aquarium Simulator.

Drives the engine with a re-armed one-shot timer:

    armed(T + interval) --fire--> engine.tick() -> mark_dirty() -> re-arm

The interval comes from one of two presets, chosen from the most recently
cached power state (low-power preset when the battery is below the threshold
and not charging). A failed registration is retried once at double the
interval; if that fails too the scheduler stalls quietly until the host
calls `start()` again. `stop()` withdraws the pending callback exactly once
and guarantees no tick runs afterwards.

Timer services:
  - ManualTimerService: virtual clock for headless runs and tests
  - AsyncioTimerService: `loop.call_later` for real-time hosts
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from aquarium.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------

class TimerService(Protocol):
    """One-shot timer registration."""

    def register(self, delay_ms: int, callback: Callable[[], None]) -> Optional[Any]:
        """Schedule callback after delay_ms. Returns a handle, or None on failure."""
        ...

    def cancel(self, handle: Any) -> None:
        ...


@dataclass(frozen=True)
class PowerState:
    """Latest battery reading delivered by the host."""
    charge_percent: int = 100
    is_charging: bool = False

    def is_low_power(self, threshold: int) -> bool:
        return self.charge_percent < threshold and not self.is_charging


# ---------------------------------------------------------------------------
# Timer services
# ---------------------------------------------------------------------------

class ManualTimerService:
    """
    Deterministic timer service on a virtual millisecond clock.

    Callbacks only run inside `advance()`, in due-time order (registration
    order breaks ties).

    Attributes:
        now_ms: Current virtual time.
        capacity: Maximum pending timers (None = unlimited); registrations
                  beyond it fail.
        fail_next: Number of upcoming registrations to refuse.
        registrations: Successful registrations so far.
        failures: Refused registrations so far.
    """

    def __init__(self, capacity: Optional[int] = None):
        self.now_ms: int = 0
        self.capacity = capacity
        self.fail_next: int = 0
        self.registrations: int = 0
        self.failures: int = 0
        self._seq = itertools.count()
        self._heap: list[tuple[int, int]] = []
        self._live: dict[int, Callable[[], None]] = {}

    def register(self, delay_ms: int, callback: Callable[[], None]) -> Optional[int]:
        if self.fail_next > 0:
            self.fail_next -= 1
            self.failures += 1
            return None
        if self.capacity is not None and len(self._live) >= self.capacity:
            self.failures += 1
            return None
        handle = next(self._seq)
        heapq.heappush(self._heap, (self.now_ms + delay_ms, handle))
        self._live[handle] = callback
        self.registrations += 1
        return handle

    def cancel(self, handle: int) -> None:
        self._live.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._live)

    def next_due(self) -> Optional[int]:
        """Due time of the earliest live timer, or None."""
        while self._heap and self._heap[0][1] not in self._live:
            heapq.heappop(self._heap)
        return self._heap[0][0] if self._heap else None

    def advance(self, ms: int) -> int:
        """
        Move the clock forward, firing every timer that comes due.

        Timers registered by a callback fire in the same call if they fall
        inside the window.

        Returns:
            Number of callbacks fired.
        """
        target = self.now_ms + ms
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            _, handle = heapq.heappop(self._heap)
            callback = self._live.pop(handle)
            self.now_ms = due
            callback()
            fired += 1
        self.now_ms = target
        return fired


class AsyncioTimerService:
    """Timer service on an asyncio event loop (callbacks stay on the loop thread)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def register(self, delay_ms: int, callback: Callable[[], None]) -> Optional[asyncio.TimerHandle]:
        try:
            loop = self._loop or asyncio.get_running_loop()
            return loop.call_later(delay_ms / 1000.0, callback)
        except RuntimeError as exc:
            logger.warning("Timer registration failed: %s", exc)
            return None

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------

class TickScheduler:
    """
    Re-armed one-shot driver for a SimulationEngine.

    Attributes:
        engine: Engine to tick.
        timer: Timer service.
        mark_dirty: Host callback invoked after every tick (canvas invalidation).
        ticks_fired: Ticks run by this scheduler.
        retries: Registrations retried at double interval.
        stalled: True after a retry also failed; cleared by `start()`.
        last_interval_ms: Interval of the currently armed timer.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        timer: TimerService,
        mark_dirty: Optional[Callable[[], None]] = None,
        power: Optional[PowerState] = None,
    ):
        self.engine = engine
        self.timer = timer
        self.mark_dirty = mark_dirty
        self.config = engine.config.scheduler
        self._power = power or PowerState()
        self._handle: Optional[Any] = None
        self._running: bool = False
        self._torn_down: bool = False

        self.ticks_fired: int = 0
        self.retries: int = 0
        self.stalled: bool = False
        self.last_interval_ms: Optional[int] = None

    # ------------------------------------------------------------------
    # Power signal
    # ------------------------------------------------------------------

    def on_power_change(self, state: PowerState) -> None:
        """Cache the latest power reading; used when the next interval is chosen."""
        self._power = state

    @property
    def power(self) -> PowerState:
        return self._power

    def select_interval(self) -> int:
        """Interval preset for the cached power state."""
        if self._power.is_low_power(self.config.low_battery_threshold):
            return self.config.low_power_interval_ms
        return self.config.default_interval_ms

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """
        Arm the first tick (or re-arm after a stall).

        Returns:
            True if a timer is now pending.
        """
        if self._torn_down:
            return False
        if self._handle is not None:
            return True
        self._running = True
        self.stalled = False
        return self._arm()

    def stop(self) -> None:
        """Teardown: cancel the pending tick once; nothing fires afterwards."""
        if self._torn_down:
            return
        self._torn_down = True
        self._running = False
        if self._handle is not None:
            self.timer.cancel(self._handle)
            self._handle = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _arm(self) -> bool:
        interval = self.select_interval()
        handle = self.timer.register(interval, self._fire)
        if handle is None:
            self.retries += 1
            interval *= 2
            handle = self.timer.register(interval, self._fire)
        if handle is None:
            logger.warning(
                "Tick timer registration failed twice (last interval %d ms); "
                "simulation stalled at tick %d", interval, self.engine.current_tick,
            )
            self._handle = None
            self._running = False
            self.stalled = True
            return False
        self._handle = handle
        self.last_interval_ms = interval
        return True

    def _fire(self) -> None:
        self._handle = None
        if self._torn_down or not self._running:
            return
        self.engine.tick()
        self.ticks_fired += 1
        if self.mark_dirty is not None:
            self.mark_dirty()
        if not self._torn_down:
            self._arm()

    def __repr__(self) -> str:
        state = "torn_down" if self._torn_down else ("stalled" if self.stalled else
                                                     ("armed" if self.armed else "idle"))
        return f"TickScheduler(state={state}, ticks={self.ticks_fired}, interval={self.last_interval_ms})"
