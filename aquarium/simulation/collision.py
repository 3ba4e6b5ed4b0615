"""
Collision Resolver for the Aquarium Simulator.

Two predation rules run once per tick, after the grid rebuild:

  1. Fish predation: every active large fish is compared (circle overlap)
     against the active small fish in its grid cell and the adjacent cells.
  2. Shark predation: while active, the shark checks every active fish with a
     bounding-box proximity test, eating at most a few per tick.

Prey are deactivated the moment they are matched, so a fish is eaten at most
once per tick even when several predators are in range. Iteration follows
array index order; the first predator to match wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from aquarium.core.config import SimConfig
from aquarium.core.world import World
from aquarium.simulation.grid import SpatialGrid
from aquarium.simulation.lifecycle import spawn_burst
from aquarium.utils.spatial import circles_collide, boxes_near


@dataclass
class CollisionReport:
    """Outcome of one resolution pass."""
    predations: int = 0
    shark_kills: int = 0
    bursts_spawned: int = 0
    bursts_dropped: int = 0
    eaten: list[int] = field(default_factory=list)   # fish indices, in order


class CollisionResolver:
    """
    Applies fish and shark predation against the current grid.

    Attributes:
        config: Simulation configuration.
    """

    def __init__(self, config: SimConfig):
        self.config = config

    def resolve(self, world: World, grid: SpatialGrid) -> CollisionReport:
        """
        Run fish predation, then shark predation.

        Args:
            world: The simulation world (fish are deactivated in place).
            grid: Grid rebuilt from this tick's positions.

        Returns:
            CollisionReport for this pass.
        """
        report = CollisionReport()
        self.resolve_fish(world, grid, report)
        self.resolve_shark(world, report)
        return report

    def resolve_fish(self, world: World, grid: SpatialGrid, report: CollisionReport) -> None:
        cfg = self.config.collision
        fish = world.fish

        for predator in fish:
            if not predator.active or not predator.is_large or predator.cell < 0:
                continue
            for index in grid.candidates(predator.cell):
                prey = fish[index]
                if prey is predator or not prey.active or prey.is_large:
                    continue
                if circles_collide(
                    predator.x, predator.y, cfg.large_fish_radius,
                    prey.x, prey.y, cfg.small_fish_radius,
                ):
                    self._eat(world, index, report)
                    report.predations += 1

    def resolve_shark(self, world: World, report: CollisionReport) -> None:
        cfg = self.config.collision
        shark = world.shark
        if not shark.active:
            return

        eaten = 0
        for index, prey in enumerate(world.fish):
            if eaten >= cfg.shark_max_eats_per_tick:
                break
            if not prey.active:
                continue
            if boxes_near(shark.x, shark.y, prey.x, prey.y,
                          cfg.shark_half_width, cfg.shark_half_height):
                self._eat(world, index, report)
                report.shark_kills += 1
                eaten += 1

    def _eat(self, world: World, index: int, report: CollisionReport) -> None:
        """Deactivate a fish and burst bubbles where it was."""
        prey = world.fish[index]
        prey.active = False
        report.eaten.append(index)
        spawned, dropped = spawn_burst(world, prey.x, prey.y, self.config.spawn.burst_max)
        report.bursts_spawned += spawned
        report.bursts_dropped += dropped
