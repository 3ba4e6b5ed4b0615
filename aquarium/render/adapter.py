"""
Render Adapter for the Aquarium Simulator.

Translates the current world state into primitive draw calls against a
GraphicsContext. One drawer per species, registered in `DRAWERS` and keyed
by species like the behavior table. Drawing only reads entity state; it
never mutates the world, so the host may redraw at any time between ticks.
"""

from __future__ import annotations

from typing import Any, Callable

from aquarium.core.entities import (
    Species,
    Fish, Shark, Seaweed, Bubble, Plankton, Octopus,
    Turtle, Jellyfish, Seahorse, Crab, Clam,
)
from aquarium.core.world import World, SEABED_HEIGHT
from aquarium.render.context import GraphicsContext
from aquarium.utils.trig import TRIG_MAX_ANGLE, TRIG_MAX_RATIO, cos_lookup, wave_offset


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

WATER = "#0055aa"
SAND = "#ffaa55"
SEAWEED = "#00aa55"
PLANKTON = "#aaff55"
BUBBLE = "#aaffff"
SMALL_FISH = "#ffaa00"
LARGE_FISH = "#ff5500"
FISH_EYE = "#000000"
SHARK = "#aaaaaa"
SHARK_MOUTH = "#550000"
OCTOPUS = "#aa00aa"
TURTLE_SHELL = "#005500"
TURTLE_SKIN = "#55aa00"
JELLYFISH = "#ffaaff"
SEAHORSE = "#ffff00"
CRAB = "#ff0000"
CLAM = "#ffffaa"
PEARL = "#ffffff"
TEXT = "#ffffff"

SEAWEED_SEGMENTS = 6
SEAWEED_SWAY = 4


# ---------------------------------------------------------------------------
# Species drawers
# ---------------------------------------------------------------------------

def draw_seaweed(ctx: GraphicsContext, weed: Seaweed) -> None:
    ctx.set_stroke_color(SEAWEED)
    seg_len = max(1, weed.height // SEAWEED_SEGMENTS)
    prev = (weed.x, weed.y)
    for k in range(1, SEAWEED_SEGMENTS + 1):
        # Sway grows toward the tip and lags along the frond.
        amplitude = SEAWEED_SWAY * k // SEAWEED_SEGMENTS
        offset = wave_offset(weed.phase + k * (TRIG_MAX_ANGLE // 12), amplitude)
        point = (weed.x + offset, weed.y - k * seg_len)
        ctx.draw_line(prev, point)
        prev = point


def draw_plankton(ctx: GraphicsContext, plankton: Plankton) -> None:
    ctx.set_fill_color(PLANKTON)
    ctx.fill_rect((plankton.x, plankton.y, 1, 1), 0)


def draw_bubble(ctx: GraphicsContext, bubble: Bubble) -> None:
    ctx.set_stroke_color(BUBBLE)
    ctx.draw_circle((bubble.x + wave_offset(bubble.wobble_phase, 1), bubble.y), bubble.radius)


def draw_clam(ctx: GraphicsContext, clam: Clam) -> None:
    x, y = clam.x, clam.y
    ctx.set_fill_color(CLAM)
    ctx.fill_path([(x - 6, y), (x + 6, y), (x + 4, y + 3), (x - 4, y + 3)])
    if clam.is_open:
        ctx.fill_path([(x - 6, y), (x + 6, y), (x + 4, y - 5), (x - 4, y - 5)])
        ctx.set_fill_color(PEARL)
        ctx.fill_circle((x, y - 1), 2)
    else:
        ctx.fill_path([(x - 6, y), (x + 6, y), (x + 4, y - 2), (x - 4, y - 2)])


def draw_crab(ctx: GraphicsContext, crab: Crab) -> None:
    x, y = crab.x, crab.y
    ctx.set_stroke_color(CRAB)
    for side in (-1, 1):
        for leg in range(3):
            swing = wave_offset(crab.leg_phase + leg * (TRIG_MAX_ANGLE // 3), 2)
            ctx.draw_line((x + side * 3, y + leg - 1), (x + side * 7, y + 2 + swing))
    ctx.set_fill_color(CRAB)
    ctx.fill_circle((x, y), 4)
    ctx.fill_circle((x - 6, y - 4), 2)
    ctx.fill_circle((x + 6, y - 4), 2)


def draw_octopus(ctx: GraphicsContext, octopus: Octopus) -> None:
    x, y = octopus.x, octopus.y
    ctx.set_stroke_color(OCTOPUS)
    for t in range(4):
        base_x = x - 6 + t * 4
        ripple = wave_offset(octopus.tentacle_phase + t * (TRIG_MAX_ANGLE // 4), 3)
        ctx.draw_line((base_x, y + 4), (base_x + ripple, y + 12))
    ctx.set_fill_color(OCTOPUS)
    ctx.fill_circle((x, y), 6)
    ctx.set_fill_color(FISH_EYE)
    ctx.fill_circle((x - 2, y - 1), 1)
    ctx.fill_circle((x + 2, y - 1), 1)


def draw_seahorse(ctx: GraphicsContext, seahorse: Seahorse) -> None:
    x, y = seahorse.x, seahorse.y + seahorse.bob_offset
    ctx.set_fill_color(SEAHORSE)
    ctx.fill_circle((x, y - 6), 3)
    ctx.fill_circle((x + 1, y), 3)
    ctx.set_stroke_color(SEAHORSE)
    ctx.draw_line((x - 2, y - 6), (x - 6, y - 5))
    ctx.draw_line((x + 1, y + 3), (x - 1, y + 8))
    ctx.draw_line((x - 1, y + 8), (x + 2, y + 9))


def draw_jellyfish(ctx: GraphicsContext, jelly: Jellyfish) -> None:
    x, y = jelly.x, jelly.y
    size = jelly.bell_size
    ctx.set_stroke_color(JELLYFISH)
    for t in range(-1, 2):
        ripple = wave_offset(jelly.tentacle_phase + t * (TRIG_MAX_ANGLE // 3), 2)
        ctx.draw_line((x + t * 3, y), (x + t * 3 + ripple, y + size + 6))
    ctx.set_fill_color(JELLYFISH)
    ctx.fill_path([(x - size, y), (x - size // 2, y - size), (x + size // 2, y - size), (x + size, y)])


def draw_turtle(ctx: GraphicsContext, turtle: Turtle) -> None:
    x, y, d = turtle.x, turtle.y, turtle.direction
    swing = wave_offset(turtle.flipper_phase, 3)
    # rear flippers lag the front pair by a quarter stroke
    rear = int(cos_lookup(turtle.flipper_phase) * 3 / TRIG_MAX_RATIO)
    ctx.set_stroke_color(TURTLE_SKIN)
    ctx.draw_line((x + 3 * d, y + 3), (x + 8 * d, y + 6 + swing))
    ctx.draw_line((x - 3 * d, y + 3), (x - 7 * d, y + 6 + rear))
    ctx.set_fill_color(TURTLE_SKIN)
    ctx.fill_circle((x + 9 * d, y), 3)
    ctx.set_fill_color(TURTLE_SHELL)
    ctx.fill_circle((x, y), 7)


def _fish_shape(x: int, y: int, d: int, half_len: int, half_h: int, wag: int) -> tuple[list, list]:
    body = [
        (x + half_len * d, y),
        (x, y - half_h),
        (x - half_len * d, y),
        (x, y + half_h),
    ]
    tail_root = x - half_len * d
    tail = [
        (tail_root, y),
        (tail_root - 4 * d, y - half_h + wag),
        (tail_root - 4 * d, y + half_h + wag),
    ]
    return body, tail


def draw_fish(ctx: GraphicsContext, fish: Fish) -> None:
    large = fish.is_large
    half_len, half_h = (9, 5) if large else (5, 3)
    wag = wave_offset(fish.tail_phase, 2)
    body, tail = _fish_shape(fish.x, fish.y, fish.direction, half_len, half_h, wag)
    ctx.set_fill_color(LARGE_FISH if large else SMALL_FISH)
    ctx.fill_path(tail)
    ctx.fill_path(body)
    ctx.set_fill_color(FISH_EYE)
    ctx.fill_circle((fish.x + (half_len - 3) * fish.direction, fish.y - 1), 1)


def draw_shark(ctx: GraphicsContext, shark: Shark) -> None:
    x, y, d = shark.x, shark.y, shark.direction
    wag = wave_offset(shark.tail_phase, 3)
    ctx.set_fill_color(SHARK)
    ctx.fill_path([(x + 22 * d, y), (x + 8 * d, y - 7), (x - 16 * d, y - 4),
                   (x - 22 * d, y), (x - 16 * d, y + 4), (x + 8 * d, y + 6)])
    ctx.fill_path([(x, y - 6), (x - 6 * d, y - 14), (x - 8 * d, y - 5)])
    ctx.fill_path([(x - 22 * d, y), (x - 30 * d, y - 8 + wag), (x - 28 * d, y + 6 + wag)])
    gape = abs(wave_offset(shark.jaw_phase, 3))
    ctx.set_stroke_color(SHARK_MOUTH)
    ctx.draw_line((x + 18 * d, y + 2), (x + 10 * d, y + 2 + gape))
    ctx.set_fill_color(FISH_EYE)
    ctx.fill_circle((x + 14 * d, y - 3), 1)


DRAWERS: dict[Species, Callable[[GraphicsContext, Any], None]] = {
    Species.SEAWEED: draw_seaweed,
    Species.PLANKTON: draw_plankton,
    Species.BUBBLE: draw_bubble,
    Species.CLAM: draw_clam,
    Species.CRAB: draw_crab,
    Species.OCTOPUS: draw_octopus,
    Species.SEAHORSE: draw_seahorse,
    Species.JELLYFISH: draw_jellyfish,
    Species.TURTLE: draw_turtle,
    Species.FISH: draw_fish,
    Species.SHARK: draw_shark,
}


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------

class RenderAdapter:
    """
    Draws a World onto a GraphicsContext.

    Attributes:
        draw_background: Paint water and seabed before the entities.
    """

    def __init__(self, draw_background: bool = True):
        self.draw_background = draw_background

    def draw(self, world: World, ctx: GraphicsContext) -> int:
        """
        Draw every active entity in pool order (later pools on top).

        Returns:
            Number of entities drawn.
        """
        if self.draw_background:
            self._draw_background(world, ctx)

        drawn = 0
        for species, pool in world.pools():
            drawer = DRAWERS[species]
            for entity in pool:
                if not getattr(entity, "active", True):
                    continue
                drawer(ctx, entity)
                drawn += 1
        return drawn

    def draw_status(self, ctx: GraphicsContext, width: int, charge_percent: int) -> None:
        """Battery percentage in the top-right corner."""
        ctx.set_stroke_color(TEXT)
        ctx.draw_text(f"{charge_percent}%", (width - 45, 0, 40, 14), "GOTHIC_14", "right")

    @staticmethod
    def _draw_background(world: World, ctx: GraphicsContext) -> None:
        ctx.set_fill_color(WATER)
        ctx.fill_rect((0, 0, world.width, world.height), 0)
        ctx.set_fill_color(SAND)
        ctx.fill_rect((0, world.height - SEABED_HEIGHT, world.width, SEABED_HEIGHT), 0)
