"""
Lifecycle Manager for the Aquarium Simulator.

Keeps populations at steady state and runs the shark's appearance cycle:
  - Probabilistic respawn of inactive fish at an off-screen entry edge
  - Probabilistic activation of idle bubble and plankton slots
  - Edge recycling of fish and turtles that swim off the canvas
  - Bubbles pop when they reach the surface
  - Shark state machine: INACTIVE(timer) counts down, then ACTIVE until it
    leaves the canvas, then INACTIVE again with a longer, fresh timer

Nothing is ever allocated or destroyed here: slots are reinitialized in
place through the world's `reset_*` methods.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aquarium.core.config import SimConfig
from aquarium.core.world import World
from aquarium.utils.rand import chance

if TYPE_CHECKING:
    from aquarium.simulation.engine import TickStats

logger = logging.getLogger(__name__)


def spawn_burst(world: World, x: int, y: int, count: int) -> tuple[int, int]:
    """
    Spawn up to `count` burst bubbles at a point into free bubble slots.

    The first bubble sits exactly on the point; later ones are jittered.
    When the pool runs out the remainder is dropped.

    Args:
        world: The simulation world.
        x, y: Burst point.
        count: Bubbles wanted.

    Returns:
        (spawned, dropped) counts.
    """
    spawned = 0
    for i in range(count):
        bubble = world.free_bubble()
        if bubble is None:
            return spawned, count - spawned
        world.place_burst_bubble(bubble, x, y, jitter=i > 0)
        spawned += 1
    return spawned, 0


def has_exited(x: int, direction: int, width: int, margin: int = 0) -> bool:
    """True if a drifter is past the canvas edge it is heading toward."""
    if direction > 0:
        return x > width + margin
    return x < -margin


class LifecycleManager:
    """
    Spawn, respawn, recycle and shark-timer policy.

    Attributes:
        config: Simulation configuration.
        shark_appearances: Number of inactive->active shark transitions so far.
    """

    def __init__(self, config: SimConfig):
        self.config = config
        self.shark_appearances: int = 0

    # ------------------------------------------------------------------
    # Before motion
    # ------------------------------------------------------------------

    def pre_update(self, world: World, stats: TickStats) -> None:
        """
        Respawn/spawn rolls and the shark countdown.

        Args:
            world: The simulation world.
            stats: Tick statistics to update.
        """
        rng = world.rng
        spawn = self.config.spawn

        for fish in world.fish:
            if not fish.active and chance(rng, spawn.fish_respawn_pct):
                world.reset_fish(fish)
                stats.fish_respawned += 1

        for bubble in world.bubbles:
            if not bubble.active and chance(rng, spawn.bubble_spawn_pct):
                world.reset_bubble(bubble)
                stats.bubbles_spawned += 1

        for plankton in world.plankton:
            if not plankton.active and chance(rng, spawn.plankton_spawn_pct):
                world.reset_plankton(plankton)
                stats.plankton_spawned += 1

        self.update_shark_timer(world, stats)

    def update_shark_timer(self, world: World, stats: TickStats) -> None:
        """INACTIVE state: count down and activate at timer <= 0."""
        shark = world.shark
        if shark.active:
            return
        shark.timer -= 1
        if shark.timer <= 0:
            world.reset_shark()
            self.shark_appearances += 1
            stats.shark_appeared = True
            logger.debug(
                "Shark appears at tick %d heading %+d (y=%d)",
                world.tick_count, shark.direction, shark.y,
            )

    # ------------------------------------------------------------------
    # After motion
    # ------------------------------------------------------------------

    def post_motion(self, world: World, stats: TickStats) -> None:
        """
        Recycle screen-exiting drifters, pop surfaced bubbles, retire the shark.

        Args:
            world: The simulation world.
            stats: Tick statistics to update.
        """
        width = world.width

        for fish in world.fish:
            if fish.active and has_exited(fish.x, fish.direction, width):
                world.reset_fish(fish)
                stats.fish_recycled += 1

        for turtle in world.turtles:
            if has_exited(turtle.x, turtle.direction, width):
                world.reset_turtle(turtle)

        for bubble in world.bubbles:
            if bubble.active and bubble.y <= 0:
                bubble.active = False
                stats.bubbles_popped += 1

        shark = world.shark
        if shark.active and has_exited(shark.x, shark.direction, width, self.config.shark.margin):
            timer = world.arm_shark_timer(initial=False)
            stats.shark_departed = True
            logger.debug("Shark departs at tick %d, next appearance in %d ticks",
                         world.tick_count, timer)

    def max_shark_active_ticks(self, width: int) -> int:
        """Upper bound on how long one shark pass can last."""
        cfg = self.config.shark
        return -(-(width + 2 * cfg.margin) // cfg.speed) + 1

    def __repr__(self) -> str:
        return f"LifecycleManager(shark_appearances={self.shark_appearances})"
