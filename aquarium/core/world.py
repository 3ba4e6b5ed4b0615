"""
World (simulation context) for the Aquarium Simulator.

Owns every entity pool by value, the canvas bounds, the tick counter and the
single seeded random generator. Pools are plain lists built once in
`initialize_population()`; their length never changes afterwards. Slots are
toggled active/inactive and reinitialized in place through the `reset_*`
methods, which are the only places fresh random parameters are rolled.

Policy (when to respawn, recycle or deactivate) lives in
`aquarium.simulation.lifecycle`; this module only knows how.
"""

from __future__ import annotations

from typing import Iterator, Optional

import numpy as np

from aquarium.core.config import SimConfig
from aquarium.core.entities import (
    Species, SMALL, LARGE,
    Fish, Shark, Seaweed, Bubble, Plankton, Octopus,
    Turtle, Jellyfish, Seahorse, Crab, Clam,
)
from aquarium.utils.rand import rand_range, chance, rand_direction
from aquarium.utils.spatial import clamp
from aquarium.utils.trig import TRIG_MAX_ANGLE


# Layout constants (pixels)
SEABED_HEIGHT = 10
FISH_MARGIN = 10
FISH_TOP = 12
FISH_BOTTOM_INSET = 40
TURTLE_MARGIN = 20
SHARK_TOP = 15
SHARK_BOTTOM_INSET = 60
PLANKTON_INSET = 2
OCTOPUS_SIDE_INSET = 15
OCTOPUS_BAND = (45, 20)         # (top, bottom) inset from the canvas bottom
JELLYFISH_SIDE_INSET = 12
JELLYFISH_TOP = 14
JELLYFISH_BOTTOM_INSET = 60
CRAB_SIDE_INSET = 10
BURST_JITTER = 2


def entry_x(direction: int, margin: int, width: int) -> int:
    """Off-screen x a drifter heading in `direction` enters from."""
    return -margin if direction > 0 else width + margin


def random_phase(rng: np.random.Generator) -> int:
    return rand_range(rng, 0, TRIG_MAX_ANGLE - 1)


class World:
    """
    The simulation context: fixed-capacity species pools on a bounded canvas.

    Attributes:
        config: Simulation configuration.
        width: Canvas width.
        height: Canvas height.
        rng: Seeded random generator shared by every rule.
        tick_count: Completed ticks.
        fish, seaweed, bubbles, plankton, octopuses, turtles, jellyfish,
        seahorses, crabs, clams: Fixed-size pools.
        shark: The single shark instance.
    """

    def __init__(self, config: SimConfig):
        """
        Create an empty world. Call `initialize_population()` to seed pools.

        Args:
            config: Simulation configuration.
        """
        self.config = config
        self.width = config.canvas.width
        self.height = config.canvas.height
        self.rng = np.random.default_rng(config.canvas.seed)

        self.tick_count: int = 0

        self.fish: list[Fish] = []
        self.seaweed: list[Seaweed] = []
        self.bubbles: list[Bubble] = []
        self.plankton: list[Plankton] = []
        self.octopuses: list[Octopus] = []
        self.turtles: list[Turtle] = []
        self.jellyfish: list[Jellyfish] = []
        self.seahorses: list[Seahorse] = []
        self.crabs: list[Crab] = []
        self.clams: list[Clam] = []
        self.shark = Shark(speed=config.shark.speed)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def initialize_population(self) -> None:
        """
        Build every pool once with randomized parameters.

        Fish start active and scattered across the canvas. Bubbles and
        plankton start inactive and fill in through the lifecycle spawn
        rolls. The shark starts inactive with its first countdown.
        """
        pop = self.config.population

        self.fish = [Fish() for _ in range(pop.fish)]
        for fish in self.fish:
            self.reset_fish(fish, x=rand_range(self.rng, 0, self.width))

        self.seaweed = [Seaweed() for _ in range(pop.seaweed)]
        for i, weed in enumerate(self.seaweed):
            self.reset_seaweed(weed, i)

        self.bubbles = [Bubble(active=False) for _ in range(pop.bubbles)]
        self.plankton = [Plankton(active=False) for _ in range(pop.plankton)]

        self.octopuses = [Octopus() for _ in range(pop.octopus)]
        for octopus in self.octopuses:
            self.reset_octopus(octopus)

        self.turtles = [Turtle() for _ in range(pop.turtle)]
        for turtle in self.turtles:
            self.reset_turtle(turtle, x=rand_range(self.rng, 0, self.width))

        self.jellyfish = [Jellyfish() for _ in range(pop.jellyfish)]
        for jelly in self.jellyfish:
            self.reset_jellyfish(jelly)

        self.seahorses = [Seahorse() for _ in range(pop.seahorse)]
        for seahorse in self.seahorses:
            self.reset_seahorse(seahorse)

        self.crabs = [Crab() for _ in range(pop.crab)]
        for crab in self.crabs:
            self.reset_crab(crab)

        self.clams = [Clam() for _ in range(pop.clam)]
        for clam in self.clams:
            self.reset_clam(clam)

        self.shark = Shark(speed=self.config.shark.speed)
        self.arm_shark_timer(initial=True)

    # ------------------------------------------------------------------
    # In-place reinitializers
    # ------------------------------------------------------------------

    def reset_fish(self, fish: Fish, x: Optional[int] = None) -> None:
        """
        Reincarnate a fish with fresh random parameters and activate it.

        Args:
            fish: Slot to reinitialize.
            x: Explicit x. None = the off-screen entry edge for the newly
               rolled direction.
        """
        rng = self.rng
        fish.direction = rand_direction(rng)
        fish.size = LARGE if chance(rng, self.config.population.large_fish_pct) else SMALL
        fish.speed = rand_range(rng, 1, 2) if fish.size == LARGE else rand_range(rng, 2, 4)
        fish.x = entry_x(fish.direction, FISH_MARGIN, self.width) if x is None else x
        fish.y = rand_range(rng, FISH_TOP, self.height - FISH_BOTTOM_INSET)
        fish.tail_phase = random_phase(rng)
        fish.active = True
        fish.cell = -1

    def reset_turtle(self, turtle: Turtle, x: Optional[int] = None) -> None:
        rng = self.rng
        turtle.direction = rand_direction(rng)
        turtle.speed = 1
        turtle.x = entry_x(turtle.direction, TURTLE_MARGIN, self.width) if x is None else x
        turtle.y = rand_range(rng, 20, self.height - SHARK_BOTTOM_INSET)
        turtle.flipper_phase = random_phase(rng)

    def reset_seaweed(self, weed: Seaweed, index: int) -> None:
        rng = self.rng
        spacing = self.width // (len(self.seaweed) + 1)
        weed.x = clamp(spacing * (index + 1) + rand_range(rng, -4, 4), 0, self.width)
        weed.y = self.height - SEABED_HEIGHT
        weed.height = rand_range(rng, 20, 45)
        weed.phase = random_phase(rng)
        weed.speed = rand_range(rng, 1, 3)

    def reset_bubble(self, bubble: Bubble) -> None:
        """Activate a bubble rising from just above the seabed."""
        rng = self.rng
        bubble.x = rand_range(rng, 5, self.width - 5)
        bubble.y = self.height - SEABED_HEIGHT - 2
        bubble.speed = rand_range(rng, 1, 2)
        bubble.radius = rand_range(rng, 1, 3)
        bubble.wobble_phase = random_phase(rng)
        bubble.active = True

    def place_burst_bubble(self, bubble: Bubble, x: int, y: int, jitter: bool) -> None:
        """Activate a bubble at a predation point, clamped to the canvas."""
        rng = self.rng
        if jitter:
            x += rand_range(rng, -BURST_JITTER, BURST_JITTER)
            y += rand_range(rng, -BURST_JITTER, BURST_JITTER)
        bubble.x = clamp(x, 0, self.width)
        bubble.y = clamp(y, 1, self.height)
        bubble.speed = rand_range(rng, 1, 3)
        bubble.radius = rand_range(rng, 1, 2)
        bubble.wobble_phase = random_phase(rng)
        bubble.active = True

    def reset_plankton(self, plankton: Plankton) -> None:
        rng = self.rng
        plankton.x = rand_range(rng, PLANKTON_INSET, self.width - PLANKTON_INSET)
        plankton.y = rand_range(rng, PLANKTON_INSET, self.height - SEABED_HEIGHT - PLANKTON_INSET)
        plankton.active = True

    def reset_octopus(self, octopus: Octopus) -> None:
        rng = self.rng
        top, bottom = self.octopus_band
        octopus.x = rand_range(rng, OCTOPUS_SIDE_INSET, self.width - OCTOPUS_SIDE_INSET)
        octopus.y = rand_range(rng, top, bottom)
        octopus.tentacle_phase = random_phase(rng)
        octopus.speed = rand_range(rng, 1, 2)

    def reset_jellyfish(self, jelly: Jellyfish) -> None:
        rng = self.rng
        jelly.x = rand_range(rng, JELLYFISH_SIDE_INSET, self.width - JELLYFISH_SIDE_INSET)
        jelly.y = rand_range(rng, JELLYFISH_TOP, self.height - JELLYFISH_BOTTOM_INSET)
        jelly.direction = rand_direction(rng)
        jelly.pulse_phase = random_phase(rng)
        jelly.tentacle_phase = random_phase(rng)
        jelly.speed = rand_range(rng, 1, 2)
        jelly.base_size = rand_range(rng, 6, 8)

    def reset_seahorse(self, seahorse: Seahorse) -> None:
        rng = self.rng
        mid = self.height // 2
        seahorse.x = rand_range(rng, self.width - 30, self.width - 15)
        seahorse.y = rand_range(rng, mid - 10, mid + 10)
        seahorse.bob_phase = random_phase(rng)
        seahorse.speed = rand_range(rng, 1, 2)

    def reset_crab(self, crab: Crab) -> None:
        rng = self.rng
        crab.min_x = CRAB_SIDE_INSET
        crab.max_x = self.width - CRAB_SIDE_INSET
        crab.x = rand_range(rng, crab.min_x, crab.max_x)
        crab.y = self.height - SEABED_HEIGHT // 2 - 2
        crab.direction = rand_direction(rng)
        crab.speed = 1
        crab.leg_phase = random_phase(rng)

    def reset_clam(self, clam: Clam) -> None:
        clam.x = rand_range(self.rng, 20, self.width - 20)
        clam.y = self.height - SEABED_HEIGHT // 2
        clam.open_countdown = 0

    def reset_shark(self) -> None:
        """Place the shark at a random entry edge and activate it."""
        shark = self.shark
        rng = self.rng
        shark.direction = rand_direction(rng)
        shark.speed = self.config.shark.speed
        shark.x = entry_x(shark.direction, self.config.shark.margin, self.width)
        shark.y = rand_range(rng, SHARK_TOP, self.height - SHARK_BOTTOM_INSET)
        shark.jaw_phase = 0
        shark.tail_phase = random_phase(rng)
        shark.timer = 0
        shark.active = True

    def arm_shark_timer(self, initial: bool = False) -> int:
        """
        Deactivate the shark and draw its next countdown.

        Args:
            initial: Use the first-appearance range instead of the longer
                     re-arm range.

        Returns:
            The new timer value.
        """
        cfg = self.config.shark
        if initial:
            timer = rand_range(self.rng, cfg.initial_delay_min, cfg.initial_delay_max)
        else:
            timer = rand_range(self.rng, cfg.rearm_delay_min, cfg.rearm_delay_max)
        self.shark.active = False
        self.shark.timer = timer
        return timer

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def octopus_band(self) -> tuple[int, int]:
        """(min_y, max_y) of the seabed band octopuses roam in."""
        top, bottom = OCTOPUS_BAND
        return self.height - top, self.height - bottom

    def pools(self) -> Iterator[tuple[Species, list]]:
        """Yield (species, pool) pairs in update order. The shark is a one-slot pool."""
        yield Species.SEAWEED, self.seaweed
        yield Species.PLANKTON, self.plankton
        yield Species.BUBBLE, self.bubbles
        yield Species.CLAM, self.clams
        yield Species.CRAB, self.crabs
        yield Species.OCTOPUS, self.octopuses
        yield Species.SEAHORSE, self.seahorses
        yield Species.JELLYFISH, self.jellyfish
        yield Species.TURTLE, self.turtles
        yield Species.FISH, self.fish
        yield Species.SHARK, [self.shark]

    def free_bubble(self) -> Optional[Bubble]:
        """First inactive bubble slot, or None when the pool is exhausted."""
        for bubble in self.bubbles:
            if not bubble.active:
                return bubble
        return None

    @property
    def active_fish_count(self) -> int:
        return sum(1 for f in self.fish if f.active)

    @property
    def active_bubble_count(self) -> int:
        return sum(1 for b in self.bubbles if b.active)

    @property
    def active_plankton_count(self) -> int:
        return sum(1 for p in self.plankton if p.active)

    def entity_count(self) -> int:
        """Total slots across every pool (fixed after seeding)."""
        return sum(len(pool) for _, pool in self.pools())

    def __repr__(self) -> str:
        return (
            f"World(size={self.width}x{self.height}, tick={self.tick_count}, "
            f"fish={self.active_fish_count}/{len(self.fish)}, "
            f"bubbles={self.active_bubble_count}/{len(self.bubbles)}, "
            f"shark={'active' if self.shark.active else f'in {self.shark.timer}'})"
        )
