"""
Unit tests for per-species behavior rules.

Tests cover:
- Linear drift for fish, turtle and shark
- Crab reversal at its bounds
- Bubble rise
- Bounded random walkers never leave their sub-rectangles
- Jellyfish pulse-step and vertical reversal
- Clam open/close cycle
- Phase accumulators stay in one turn
- advance_all dispatch skips inactive slots
"""

import pytest

from aquarium.core.config import SimConfig
from aquarium.core.entities import Species, Fish, Crab, Bubble, Jellyfish, Clam, Shark
from aquarium.core.world import (
    World,
    SEABED_HEIGHT,
    PLANKTON_INSET,
    OCTOPUS_SIDE_INSET,
    JELLYFISH_SIDE_INSET,
    JELLYFISH_TOP,
    JELLYFISH_BOTTOM_INSET,
)
from aquarium.simulation.behavior import (
    BEHAVIORS,
    FISH_TAIL_STEP,
    JELLYFISH_PULSE_STEP,
    JELLYFISH_RISE,
    CLAM_OPEN_TICKS,
    advance_all,
    advance_fish,
    advance_shark,
    advance_crab,
    advance_bubble,
    advance_plankton,
    advance_octopus,
    advance_jellyfish,
    advance_clam,
)
from aquarium.utils.trig import TRIG_MAX_ANGLE


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def world() -> World:
    w = World(SimConfig())
    w.initialize_population()
    return w


# ---------------------------------------------------------------------------
# Linear drifters
# ---------------------------------------------------------------------------

class TestDrift:
    def test_fish_moves_by_speed(self, world):
        fish = Fish(x=50, direction=-1, speed=3, tail_phase=0)
        advance_fish(fish, world)
        assert fish.x == 47
        assert fish.tail_phase == FISH_TAIL_STEP * 3

    def test_shark_moves(self, world):
        shark = Shark(x=0, direction=1, speed=4)
        advance_shark(shark, world)
        assert shark.x == 4

    def test_bubble_rises(self, world):
        bubble = Bubble(x=20, y=100, speed=2, active=True)
        advance_bubble(bubble, world)
        assert bubble.y == 98


class TestCrab:
    def test_reverses_at_max(self):
        world = World(SimConfig())
        crab = Crab(x=133, direction=1, speed=1, min_x=10, max_x=134)
        advance_crab(crab, world)
        assert crab.x == 134
        assert crab.direction == -1

    def test_reverses_at_min(self):
        world = World(SimConfig())
        crab = Crab(x=11, direction=-1, speed=1, min_x=10, max_x=134)
        advance_crab(crab, world)
        assert crab.x == 10
        assert crab.direction == 1

    def test_stays_in_bounds(self, world):
        crab = world.crabs[0]
        for _ in range(500):
            advance_crab(crab, world)
            assert crab.min_x <= crab.x <= crab.max_x


# ---------------------------------------------------------------------------
# Random walkers
# ---------------------------------------------------------------------------

class TestWalkers:
    def test_plankton_confined(self, world):
        p = world.plankton[0]
        world.reset_plankton(p)
        p.x, p.y = PLANKTON_INSET, PLANKTON_INSET
        for _ in range(2000):
            advance_plankton(p, world)
            assert PLANKTON_INSET <= p.x <= world.width - PLANKTON_INSET
            assert PLANKTON_INSET <= p.y <= world.height - SEABED_HEIGHT - PLANKTON_INSET

    def test_plankton_moves_in_unit_steps(self, world):
        p = world.plankton[0]
        world.reset_plankton(p)
        p.x, p.y = world.width // 2, world.height // 3
        moved = set()
        for _ in range(100):
            before = (p.x, p.y)
            advance_plankton(p, world)
            dx, dy = p.x - before[0], p.y - before[1]
            assert dx in (-1, 0, 1) and dy in (-1, 0, 1)
            if (dx, dy) != (0, 0):
                moved.add((dx, dy))
        assert all(dx != 0 and dy != 0 for dx, dy in moved)
        assert moved

    def test_octopus_confined(self, world):
        octopus = world.octopuses[0]
        top, bottom = world.octopus_band
        for _ in range(2000):
            advance_octopus(octopus, world)
            assert OCTOPUS_SIDE_INSET <= octopus.x <= world.width - OCTOPUS_SIDE_INSET
            assert top <= octopus.y <= bottom
            assert 0 <= octopus.tentacle_phase < TRIG_MAX_ANGLE

    def test_jellyfish_confined(self, world):
        jelly = world.jellyfish[0]
        for _ in range(3000):
            advance_jellyfish(jelly, world)
            assert JELLYFISH_SIDE_INSET <= jelly.x <= world.width - JELLYFISH_SIDE_INSET
            assert JELLYFISH_TOP <= jelly.y <= world.height - JELLYFISH_BOTTOM_INSET


# ---------------------------------------------------------------------------
# Jellyfish pulse
# ---------------------------------------------------------------------------

class TestJellyfishPulse:
    def test_steps_on_pulse_wrap(self, world):
        jelly = Jellyfish(x=70, y=60, direction=-1, speed=1,
                          pulse_phase=TRIG_MAX_ANGLE - JELLYFISH_PULSE_STEP)
        advance_jellyfish(jelly, world)
        assert jelly.y == 60 - JELLYFISH_RISE
        assert jelly.pulse_phase == 0

    def test_no_step_mid_pulse(self, world):
        jelly = Jellyfish(x=70, y=60, direction=-1, speed=1, pulse_phase=0)
        advance_jellyfish(jelly, world)
        assert jelly.y == 60

    def test_reverses_at_top(self, world):
        jelly = Jellyfish(x=70, y=JELLYFISH_TOP + 1, direction=-1, speed=1,
                          pulse_phase=TRIG_MAX_ANGLE - 1)
        advance_jellyfish(jelly, world)
        assert jelly.y == JELLYFISH_TOP
        assert jelly.direction == 1

    def test_reverses_at_bottom(self, world):
        bottom = world.height - JELLYFISH_BOTTOM_INSET
        jelly = Jellyfish(x=70, y=bottom - 1, direction=1, speed=1,
                          pulse_phase=TRIG_MAX_ANGLE - 1)
        advance_jellyfish(jelly, world)
        assert jelly.y == bottom
        assert jelly.direction == -1


# ---------------------------------------------------------------------------
# Oscillators
# ---------------------------------------------------------------------------

class TestOscillators:
    def test_clam_cycle(self, world):
        clam = Clam(open_countdown=2)
        advance_clam(clam, world)
        assert clam.open_countdown == 1
        advance_clam(clam, world)
        assert not clam.is_open

    def test_clam_eventually_opens(self, world):
        clam = Clam()
        opened = False
        for _ in range(3000):
            advance_clam(clam, world)
            if clam.open_countdown == CLAM_OPEN_TICKS:
                opened = True
                break
        assert opened

    def test_phases_wrap(self, world):
        for _ in range(500):
            advance_all(world)
        for weed in world.seaweed:
            assert 0 <= weed.phase < TRIG_MAX_ANGLE
        for seahorse in world.seahorses:
            assert 0 <= seahorse.bob_phase < TRIG_MAX_ANGLE
        for jelly in world.jellyfish:
            assert 0 <= jelly.pulse_phase < TRIG_MAX_ANGLE
            assert 0 <= jelly.tentacle_phase < TRIG_MAX_ANGLE


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatch:
    def test_every_species_has_a_rule(self):
        assert set(BEHAVIORS) == set(Species)

    def test_skips_inactive(self, world):
        # Bubbles, plankton and the shark start inactive.
        expected = world.entity_count() - len(world.bubbles) - len(world.plankton) - 1
        assert advance_all(world) == expected

    def test_inactive_fish_frozen(self, world):
        fish = world.fish[0]
        fish.active = False
        x = fish.x
        advance_all(world)
        assert fish.x == x
