"""
Simulation Engine: one full tick of the Aquarium Simulator.

A tick runs the whole pipeline synchronously:
  lifecycle pre-update -> behavior rules -> lifecycle post-motion
  -> grid rebuild -> collision resolution -> stats.

The engine owns its World, grid, lifecycle manager and collision resolver,
so any number of independent engines can coexist (one per test, one per
viewer session). Scheduling is external; see `aquarium.simulation.scheduler`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Optional, Callable

from aquarium.core.config import SimConfig
from aquarium.core.world import World
from aquarium.simulation.behavior import advance_all
from aquarium.simulation.collision import CollisionResolver
from aquarium.simulation.grid import SpatialGrid
from aquarium.simulation.lifecycle import LifecycleManager

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tick statistics: lightweight counters for one tick
# ---------------------------------------------------------------------------

@dataclass
class TickStats:
    """Statistics collected during a single tick."""
    fish_respawned: int = 0
    fish_recycled: int = 0
    bubbles_spawned: int = 0
    bubbles_popped: int = 0
    plankton_spawned: int = 0
    predations: int = 0
    shark_kills: int = 0
    bursts_spawned: int = 0
    bursts_dropped: int = 0
    grid_dropped: int = 0
    entities_advanced: int = 0
    shark_appeared: bool = False
    shark_departed: bool = False

    @classmethod
    def counter_names(cls) -> list[str]:
        """Integer counter fields (summable across ticks)."""
        return [f.name for f in fields(cls) if f.type in ("int", int)]


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

@dataclass
class RunResult:
    """Result of a multi-tick run."""
    config: SimConfig
    seed: int
    total_ticks: int = 0
    total_predations: int = 0
    total_shark_kills: int = 0
    shark_appearances: int = 0
    final_active_fish: int = 0
    total_bursts_dropped: int = 0


# ---------------------------------------------------------------------------
# Simulation Engine
# ---------------------------------------------------------------------------

class SimulationEngine:
    """
    Core simulation engine.

    Attributes:
        config: Simulation configuration.
        world: Engine-owned entity storage.
        grid: Spatial grid rebuilt every tick.
        lifecycle: Spawn/respawn/recycle/shark policy.
        resolver: Predation rules.
        tick_stats: Statistics for the most recent tick.
        on_tick: Optional callback invoked after each tick(tick_number, engine).
    """

    def __init__(self, config: SimConfig, seed: Optional[int] = None):
        """
        Create a simulation engine.

        Args:
            config: Simulation configuration.
            seed: Random seed override. None = use config.canvas.seed.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config

        if seed is not None:
            self.config.canvas.seed = seed

        errors = self.config.validate()
        if errors:
            raise ValueError("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))

        self.world = World(self.config)
        self.rng = self.world.rng  # share the world's seeded RNG

        collision = self.config.collision
        self.grid = SpatialGrid(
            self.world.width, self.world.height,
            collision.grid_cols, collision.grid_rows,
            capacity=self.config.population.fish,
        )
        self.lifecycle = LifecycleManager(self.config)
        self.resolver = CollisionResolver(self.config)

        self.tick_stats = TickStats()
        self._accumulated = TickStats()  # running totals since the last reset
        self._initialized = False

        # Callbacks
        self.on_tick: Optional[Callable[[int, "SimulationEngine"], None]] = None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Seed every population and bucket the starting fish."""
        self.world.initialize_population()
        self.grid.rebuild(self.world.fish)
        self._initialized = True
        logger.debug("Engine initialized: %r", self.world)

    # ------------------------------------------------------------------
    # Core tick
    # ------------------------------------------------------------------

    def tick(self) -> TickStats:
        """
        Execute one simulation tick.

        Processing order:
          1. Lifecycle pre-update (respawn, ambient spawn, shark countdown)
          2. Behavior rules for every active entity
          3. Lifecycle post-motion (edge recycling, bubble pop, shark departure)
          4. Grid rebuild from current fish positions
          5. Collision resolution (fish predation, then shark)
          6. Increment tick counter, store stats, fire callback

        Returns:
            TickStats for this tick.
        """
        if not self._initialized:
            self.initialize()

        stats = TickStats()
        world = self.world

        # --- 1. Populations and timers ---
        self.lifecycle.pre_update(world, stats)

        # --- 2. Motion and phases ---
        stats.entities_advanced = advance_all(world)

        # --- 3. Recycling ---
        self.lifecycle.post_motion(world, stats)

        # --- 4. Grid ---
        self.grid.rebuild(world.fish)
        stats.grid_dropped = self.grid.dropped

        # --- 5. Predation ---
        report = self.resolver.resolve(world, self.grid)
        stats.predations = report.predations
        stats.shark_kills = report.shark_kills
        stats.bursts_spawned = report.bursts_spawned
        stats.bursts_dropped = report.bursts_dropped

        # --- 6. Bookkeeping ---
        world.tick_count += 1
        self.tick_stats = stats
        self._accumulate(stats)

        if self.on_tick is not None:
            self.on_tick(world.tick_count, self)

        return stats

    # ------------------------------------------------------------------
    # Multi-tick run
    # ------------------------------------------------------------------

    def run(self, max_ticks: int) -> RunResult:
        """
        Run the simulation for a fixed number of ticks (no scheduler).

        Args:
            max_ticks: Number of ticks to simulate.

        Returns:
            RunResult with summary statistics.
        """
        result = RunResult(config=self.config, seed=self.config.canvas.seed)
        for _ in range(max_ticks):
            stats = self.tick()
            result.total_predations += stats.predations
            result.total_shark_kills += stats.shark_kills
            result.total_bursts_dropped += stats.bursts_dropped

        result.total_ticks = self.world.tick_count
        result.shark_appearances = self.lifecycle.shark_appearances
        result.final_active_fish = self.world.active_fish_count
        return result

    # ------------------------------------------------------------------
    # Accumulated stats
    # ------------------------------------------------------------------

    def _accumulate(self, stats: TickStats) -> None:
        for name in TickStats.counter_names():
            setattr(self._accumulated, name, getattr(self._accumulated, name) + getattr(stats, name))

    def get_accumulated_stats(self) -> dict[str, int]:
        """
        Totals of every counter since the last reset.

        Returns:
            Dict of stat_name -> total_value.
        """
        return {name: getattr(self._accumulated, name) for name in TickStats.counter_names()}

    def reset_accumulated_stats(self) -> dict[str, int]:
        """Zero the running totals and return what they held."""
        old = self.get_accumulated_stats()
        for name in TickStats.counter_names():
            setattr(self._accumulated, name, 0)
        return old

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def current_tick(self) -> int:
        return self.world.tick_count

    @property
    def active_fish_count(self) -> int:
        return self.world.active_fish_count

    @property
    def shark_active(self) -> bool:
        return self.world.shark.active

    def __repr__(self) -> str:
        return (
            f"SimulationEngine(tick={self.current_tick}, "
            f"fish={self.active_fish_count}, shark_active={self.shark_active})"
        )
