"""
KPI Metrics collection for the Aquarium Simulator.

MetricsCollector turns the world state plus one tick's statistics into a
flat dictionary, suitable for CSV export and charting.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from aquarium.core.config import SimConfig
from aquarium.core.world import World
from aquarium.simulation.engine import TickStats


# ---------------------------------------------------------------------------
# KPI columns
# ---------------------------------------------------------------------------

KPI_DTYPES: dict[str, str] = {
    "tick": "int64",
    "fish_active": "int64",
    "fish_large": "int64",
    "fish_small": "int64",
    "bubbles_active": "int64",
    "plankton_active": "int64",
    "clams_open": "int64",
    "avg_fish_speed": "float64",
    "fish_heading_right_pct": "float64",
    "predations": "int64",
    "shark_kills": "int64",
    "bursts_spawned": "int64",
    "bursts_dropped": "int64",
    "fish_respawned": "int64",
    "fish_recycled": "int64",
    "grid_dropped": "int64",
    "shark_active": "bool",
    "shark_timer": "int64",
    "interval_ms": "int64",
}


# ---------------------------------------------------------------------------
# MetricsCollector
# ---------------------------------------------------------------------------

class MetricsCollector:
    """
    Collects and computes KPIs per tick.

    Usage:
      1. After a tick, call `collect(world, stats, interval_ms)`
      2. Resulting dict is appended to `history`
      3. Call `get_history()` to retrieve all rows

    Attributes:
        config: Simulation configuration.
        history: List of KPI dicts, one per collected tick.
    """

    def __init__(self, config: SimConfig):
        self.config = config
        self.history: list[dict] = []

    def collect(
        self,
        world: World,
        stats: TickStats,
        interval_ms: Optional[int] = None,
    ) -> dict:
        """
        Compute all KPIs for the current tick and append to history.

        Args:
            world: Current world state.
            stats: Statistics of the tick that just ran (or a sum over several).
            interval_ms: Scheduler interval in effect, if any.

        Returns:
            Dict of KPI_name -> value.
        """
        kpis: dict = {}
        kpis["tick"] = world.tick_count

        # --- Populations ---
        active = [f for f in world.fish if f.active]
        kpis["fish_active"] = len(active)
        kpis["fish_large"] = sum(1 for f in active if f.is_large)
        kpis["fish_small"] = kpis["fish_active"] - kpis["fish_large"]
        kpis["bubbles_active"] = world.active_bubble_count
        kpis["plankton_active"] = world.active_plankton_count
        kpis["clams_open"] = sum(1 for c in world.clams if c.is_open)

        # --- Motion ---
        if active:
            kpis["avg_fish_speed"] = float(np.mean([f.speed for f in active]))
            kpis["fish_heading_right_pct"] = float(
                np.mean([f.direction > 0 for f in active]) * 100
            )
        else:
            kpis["avg_fish_speed"] = 0.0
            kpis["fish_heading_right_pct"] = 0.0

        # --- Events ---
        kpis["predations"] = stats.predations
        kpis["shark_kills"] = stats.shark_kills
        kpis["bursts_spawned"] = stats.bursts_spawned
        kpis["bursts_dropped"] = stats.bursts_dropped
        kpis["fish_respawned"] = stats.fish_respawned
        kpis["fish_recycled"] = stats.fish_recycled
        kpis["grid_dropped"] = stats.grid_dropped

        # --- Shark ---
        kpis["shark_active"] = world.shark.active
        kpis["shark_timer"] = 0 if world.shark.active else world.shark.timer

        # --- Cadence ---
        kpis["interval_ms"] = (
            interval_ms if interval_ms is not None
            else self.config.scheduler.default_interval_ms
        )

        self.history.append(kpis)
        return kpis

    def get_history(self) -> list[dict]:
        """Return all collected KPI rows."""
        return self.history

    def clear(self) -> None:
        self.history = []

    @staticmethod
    def kpi_dtypes() -> dict[str, str]:
        """Ordered KPI columns with the pandas dtype each one loads back as."""
        return dict(KPI_DTYPES)

    @staticmethod
    def kpi_names() -> list[str]:
        """Ordered KPI column names (CSV header)."""
        return list(KPI_DTYPES)
