"""
Per-species motion and phase rules.

Each rule advances exactly one record by one tick and touches nothing else
except the world's random generator and canvas bounds. Rules are registered
in `BEHAVIORS`, keyed by species, and `advance_all()` dispatches through it
in the world's pool order.

Rule families:
  - Linear drifters (fish, turtle, shark, crab): x += direction * speed
  - Bounded random walkers (plankton, octopus, jellyfish jitter): occasional
    +-1 steps, clamped to a safe sub-rectangle
  - Oscillators (seaweed, seahorse, jellyfish pulse, tentacles, flippers):
    phase accumulators wrapped to one turn
"""

from __future__ import annotations

from typing import Any, Callable

from aquarium.core.entities import (
    Species,
    Fish, Shark, Seaweed, Bubble, Plankton, Octopus,
    Turtle, Jellyfish, Seahorse, Crab, Clam,
)
from aquarium.core.world import (
    World,
    SEABED_HEIGHT,
    PLANKTON_INSET,
    OCTOPUS_SIDE_INSET,
    JELLYFISH_SIDE_INSET,
    JELLYFISH_TOP,
    JELLYFISH_BOTTOM_INSET,
)
from aquarium.utils.rand import chance, rand_direction
from aquarium.utils.spatial import clamp
from aquarium.utils.trig import TRIG_MAX_ANGLE, advance_phase


# Phase steps per tick (TRIG_MAX_ANGLE units), scaled by entity speed where noted
FISH_TAIL_STEP = 0x0C00          # * speed
TURTLE_FLIPPER_STEP = 0x0400     # * speed
SHARK_TAIL_STEP = 0x0600         # * speed
SHARK_JAW_STEP = 0x0800
CRAB_LEG_STEP = 0x1000           # * speed
SEAWEED_SWAY_STEP = 0x0300       # * speed
BUBBLE_WOBBLE_STEP = 0x1000
OCTOPUS_TENTACLE_STEP = 0x0800   # * speed
JELLYFISH_PULSE_STEP = 0x0800    # * speed
JELLYFISH_TENTACLE_STEP = 0x0600
SEAHORSE_BOB_STEP = 0x0400       # * speed

# Random walk and pulse tuning
PLANKTON_WALK_PCT = 30
OCTOPUS_WALK_PCT = 10
JELLYFISH_JITTER_PCT = 20
JELLYFISH_RISE = 3
CLAM_OPEN_PCT = 1
CLAM_OPEN_TICKS = 30


# ---------------------------------------------------------------------------
# Linear drifters
# ---------------------------------------------------------------------------

def advance_fish(fish: Fish, world: World) -> None:
    fish.x += fish.direction * fish.speed
    fish.tail_phase = advance_phase(fish.tail_phase, FISH_TAIL_STEP * fish.speed)


def advance_turtle(turtle: Turtle, world: World) -> None:
    turtle.x += turtle.direction * turtle.speed
    turtle.flipper_phase = advance_phase(
        turtle.flipper_phase, TURTLE_FLIPPER_STEP * turtle.speed,
    )


def advance_shark(shark: Shark, world: World) -> None:
    shark.x += shark.direction * shark.speed
    shark.tail_phase = advance_phase(shark.tail_phase, SHARK_TAIL_STEP * shark.speed)
    shark.jaw_phase = advance_phase(shark.jaw_phase, SHARK_JAW_STEP)


def advance_crab(crab: Crab, world: World) -> None:
    """Pace along the seabed, reversing at min_x / max_x."""
    crab.x += crab.direction * crab.speed
    if crab.x <= crab.min_x:
        crab.x = crab.min_x
        crab.direction = 1
    elif crab.x >= crab.max_x:
        crab.x = crab.max_x
        crab.direction = -1
    crab.leg_phase = advance_phase(crab.leg_phase, CRAB_LEG_STEP * crab.speed)


def advance_bubble(bubble: Bubble, world: World) -> None:
    bubble.y -= bubble.speed
    bubble.wobble_phase = advance_phase(bubble.wobble_phase, BUBBLE_WOBBLE_STEP)


# ---------------------------------------------------------------------------
# Bounded random walkers
# ---------------------------------------------------------------------------

def advance_plankton(plankton: Plankton, world: World) -> None:
    rng = world.rng
    if chance(rng, PLANKTON_WALK_PCT):
        plankton.x += rand_direction(rng)
        plankton.y += rand_direction(rng)
    plankton.x = clamp(plankton.x, PLANKTON_INSET, world.width - PLANKTON_INSET)
    plankton.y = clamp(
        plankton.y, PLANKTON_INSET, world.height - SEABED_HEIGHT - PLANKTON_INSET,
    )


def advance_octopus(octopus: Octopus, world: World) -> None:
    rng = world.rng
    if chance(rng, OCTOPUS_WALK_PCT):
        octopus.x += rand_direction(rng)
        octopus.y += rand_direction(rng)
    top, bottom = world.octopus_band
    octopus.x = clamp(octopus.x, OCTOPUS_SIDE_INSET, world.width - OCTOPUS_SIDE_INSET)
    octopus.y = clamp(octopus.y, top, bottom)
    octopus.tentacle_phase = advance_phase(
        octopus.tentacle_phase, OCTOPUS_TENTACLE_STEP * octopus.speed,
    )


def advance_jellyfish(jelly: Jellyfish, world: World) -> None:
    """
    Horizontal jitter plus a bell pulse.

    Each time the pulse phase completes a turn the bell steps vertically in
    its heading; the heading flips at the top and bottom bounds.
    """
    rng = world.rng
    if chance(rng, JELLYFISH_JITTER_PCT):
        jelly.x += rand_direction(rng)
    jelly.x = clamp(jelly.x, JELLYFISH_SIDE_INSET, world.width - JELLYFISH_SIDE_INSET)

    raw = jelly.pulse_phase + JELLYFISH_PULSE_STEP * jelly.speed
    jelly.pulse_phase = raw % TRIG_MAX_ANGLE
    if raw >= TRIG_MAX_ANGLE:
        top = JELLYFISH_TOP
        bottom = world.height - JELLYFISH_BOTTOM_INSET
        jelly.y += jelly.direction * JELLYFISH_RISE
        if jelly.y <= top:
            jelly.y = top
            jelly.direction = 1
        elif jelly.y >= bottom:
            jelly.y = bottom
            jelly.direction = -1

    jelly.tentacle_phase = advance_phase(jelly.tentacle_phase, JELLYFISH_TENTACLE_STEP)


# ---------------------------------------------------------------------------
# Oscillators
# ---------------------------------------------------------------------------

def advance_seaweed(weed: Seaweed, world: World) -> None:
    weed.phase = advance_phase(weed.phase, SEAWEED_SWAY_STEP * weed.speed)


def advance_seahorse(seahorse: Seahorse, world: World) -> None:
    seahorse.bob_phase = advance_phase(seahorse.bob_phase, SEAHORSE_BOB_STEP * seahorse.speed)


def advance_clam(clam: Clam, world: World) -> None:
    """Count down while open; while closed, occasionally open."""
    if clam.open_countdown > 0:
        clam.open_countdown -= 1
    elif chance(world.rng, CLAM_OPEN_PCT):
        clam.open_countdown = CLAM_OPEN_TICKS


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

BEHAVIORS: dict[Species, Callable[[Any, World], None]] = {
    Species.FISH: advance_fish,
    Species.SHARK: advance_shark,
    Species.SEAWEED: advance_seaweed,
    Species.BUBBLE: advance_bubble,
    Species.PLANKTON: advance_plankton,
    Species.OCTOPUS: advance_octopus,
    Species.TURTLE: advance_turtle,
    Species.JELLYFISH: advance_jellyfish,
    Species.SEAHORSE: advance_seahorse,
    Species.CRAB: advance_crab,
    Species.CLAM: advance_clam,
}


def advance_all(world: World) -> int:
    """
    Advance every active entity by one tick.

    Returns:
        Number of entities advanced.
    """
    advanced = 0
    for species, pool in world.pools():
        rule = BEHAVIORS[species]
        for entity in pool:
            if not getattr(entity, "active", True):
                continue
            rule(entity, world)
            advanced += 1
    return advanced
