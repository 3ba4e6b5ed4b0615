"""
Entity records for the Aquarium Simulator.

One slotted dataclass per species. Records hold only plain integers and
flags; they live by value in the world's fixed-size pools and are
reinitialized in place rather than created and destroyed. Each class carries
its `Species` tag, which is the key behavior and drawing tables dispatch on.

Phase accumulators are angles in TRIG_MAX_ANGLE units and are always kept in
[0, TRIG_MAX_ANGLE).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from aquarium.utils.trig import wave_offset


class Species(IntEnum):
    """Closed set of species. Order is the per-tick update order."""
    SEAWEED = 0
    PLANKTON = 1
    BUBBLE = 2
    CLAM = 3
    CRAB = 4
    OCTOPUS = 5
    SEAHORSE = 6
    JELLYFISH = 7
    TURTLE = 8
    FISH = 9
    SHARK = 10


SMALL = 1
LARGE = 2


@dataclass(slots=True)
class Fish:
    """
    Prey fish. Large fish also prey on small ones.

    Attributes:
        x, y: Body center.
        direction: Horizontal heading, -1 or +1.
        speed: Pixels per tick.
        size: SMALL (1) or LARGE (2).
        active: Inactive fish keep their slot and wait for respawn.
        tail_phase: Tail wag accumulator.
        cell: Spatial grid cell from the last rebuild (-1 = not bucketed).
    """
    species: ClassVar[Species] = Species.FISH

    x: int = 0
    y: int = 0
    direction: int = 1
    speed: int = 1
    size: int = SMALL
    active: bool = True
    tail_phase: int = 0
    cell: int = -1

    @property
    def is_large(self) -> bool:
        return self.size == LARGE


@dataclass(slots=True)
class Shark:
    """
    The rare apex predator.

    `active` and `timer` form a two-state machine: while inactive the timer
    counts down to the next appearance.
    """
    species: ClassVar[Species] = Species.SHARK

    x: int = 0
    y: int = 0
    direction: int = 1
    speed: int = 4
    active: bool = False
    timer: int = 0
    jaw_phase: int = 0
    tail_phase: int = 0


@dataclass(slots=True)
class Seaweed:
    """A frond anchored on the seabed at (x, y), swaying with `phase`."""
    species: ClassVar[Species] = Species.SEAWEED

    x: int = 0
    y: int = 0
    height: int = 30
    phase: int = 0
    speed: int = 1

    def sway(self, amplitude: int) -> int:
        return wave_offset(self.phase, amplitude)


@dataclass(slots=True)
class Bubble:
    """Rising bubble; also the pool used for predation bursts."""
    species: ClassVar[Species] = Species.BUBBLE

    x: int = 0
    y: int = 0
    speed: int = 1
    radius: int = 2
    active: bool = False
    wobble_phase: int = 0


@dataclass(slots=True)
class Plankton:
    species: ClassVar[Species] = Species.PLANKTON

    x: int = 0
    y: int = 0
    active: bool = False


@dataclass(slots=True)
class Octopus:
    species: ClassVar[Species] = Species.OCTOPUS

    x: int = 0
    y: int = 0
    tentacle_phase: int = 0
    speed: int = 1


@dataclass(slots=True)
class Turtle:
    species: ClassVar[Species] = Species.TURTLE

    x: int = 0
    y: int = 0
    direction: int = 1
    speed: int = 1
    flipper_phase: int = 0


@dataclass(slots=True)
class Jellyfish:
    """
    Jellyfish with a pulsing bell.

    `direction` is the vertical heading (-1 rising, +1 sinking) used by the
    pulse-step at the end of each full pulse.
    """
    species: ClassVar[Species] = Species.JELLYFISH

    x: int = 0
    y: int = 0
    direction: int = -1
    pulse_phase: int = 0
    speed: int = 1
    tentacle_phase: int = 0
    base_size: int = 7

    @property
    def bell_size(self) -> int:
        """Bell radius: base size plus a pulse of up to 2 px."""
        return self.base_size + wave_offset(self.pulse_phase, 2)


@dataclass(slots=True)
class Seahorse:
    species: ClassVar[Species] = Species.SEAHORSE

    x: int = 0
    y: int = 0
    bob_phase: int = 0
    speed: int = 1

    @property
    def bob_offset(self) -> int:
        return wave_offset(self.bob_phase, 3)


@dataclass(slots=True)
class Crab:
    """Seabed crab pacing between min_x and max_x."""
    species: ClassVar[Species] = Species.CRAB

    x: int = 0
    y: int = 0
    direction: int = 1
    speed: int = 1
    leg_phase: int = 0
    min_x: int = 0
    max_x: int = 0


@dataclass(slots=True)
class Clam:
    species: ClassVar[Species] = Species.CLAM

    x: int = 0
    y: int = 0
    open_countdown: int = 0

    @property
    def is_open(self) -> bool:
        return self.open_countdown > 0
