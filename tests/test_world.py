"""
Unit tests for the World (simulation context).

Tests cover:
- Pool construction and fixed capacities
- Initial state per species (active flags, position ranges, shark timer)
- In-place reinitializers (fish entry edge, shark entry, burst placement)
- Queries (pools order, free bubble, counts, repr)
- Determinism for a given seed
"""

import pytest

from aquarium.core.config import SimConfig
from aquarium.core.entities import Species, LARGE, SMALL, Fish
from aquarium.core.world import (
    World,
    FISH_MARGIN,
    FISH_TOP,
    FISH_BOTTOM_INSET,
    SEABED_HEIGHT,
    entry_x,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> SimConfig:
    return SimConfig()


@pytest.fixture
def world(config) -> World:
    return World(config)


@pytest.fixture
def populated_world(config) -> World:
    w = World(config)
    w.initialize_population()
    return w


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

class TestWorldInit:
    def test_empty_world(self, world):
        assert world.fish == []
        assert world.bubbles == []
        assert world.tick_count == 0

    def test_dimensions(self, world, config):
        assert world.width == config.canvas.width
        assert world.height == config.canvas.height

    def test_pool_sizes(self, populated_world, config):
        pop = config.population
        assert len(populated_world.fish) == pop.fish
        assert len(populated_world.bubbles) == pop.bubbles
        assert len(populated_world.plankton) == pop.plankton
        assert len(populated_world.jellyfish) == pop.jellyfish
        assert len(populated_world.clams) == pop.clam

    def test_entity_count(self, populated_world):
        # 8 fish + 5 seaweed + 12 bubbles + 10 plankton + 7 singles/pairs + shark
        assert populated_world.entity_count() == 8 + 5 + 12 + 10 + 1 + 1 + 2 + 1 + 1 + 1 + 1

    def test_fish_active_and_on_canvas(self, populated_world):
        w = populated_world
        for fish in w.fish:
            assert fish.active
            assert 0 <= fish.x <= w.width
            assert FISH_TOP <= fish.y <= w.height - FISH_BOTTOM_INSET
            assert fish.direction in (-1, 1)

    def test_fish_speed_by_size(self, populated_world):
        for fish in populated_world.fish:
            if fish.size == LARGE:
                assert 1 <= fish.speed <= 2
            else:
                assert 2 <= fish.speed <= 4

    def test_particles_start_inactive(self, populated_world):
        assert populated_world.active_bubble_count == 0
        assert populated_world.active_plankton_count == 0

    def test_shark_armed(self, populated_world, config):
        shark = populated_world.shark
        assert not shark.active
        assert config.shark.initial_delay_min <= shark.timer <= config.shark.initial_delay_max

    def test_seabed_dwellers(self, populated_world):
        w = populated_world
        for weed in w.seaweed:
            assert weed.y == w.height - SEABED_HEIGHT
        for crab in w.crabs:
            assert crab.min_x <= crab.x <= crab.max_x
        top, bottom = w.octopus_band
        for octopus in w.octopuses:
            assert top <= octopus.y <= bottom

    def test_all_large_when_pct_100(self, config):
        config.population.large_fish_pct = 100
        w = World(config)
        w.initialize_population()
        assert all(f.size == LARGE for f in w.fish)

    def test_same_seed_same_world(self, config):
        a = World(config)
        a.initialize_population()
        b = World(config)
        b.initialize_population()
        assert [(f.x, f.y, f.size) for f in a.fish] == [(f.x, f.y, f.size) for f in b.fish]
        assert a.shark.timer == b.shark.timer


# ---------------------------------------------------------------------------
# Reinitializers
# ---------------------------------------------------------------------------

class TestReset:
    def test_entry_x(self):
        assert entry_x(1, 10, 144) == -10
        assert entry_x(-1, 10, 144) == 154

    def test_reset_fish_enters_from_edge(self, populated_world):
        w = populated_world
        for _ in range(20):
            fish = Fish(active=False, cell=3)
            w.reset_fish(fish)
            assert fish.active
            assert fish.cell == -1
            assert fish.x == entry_x(fish.direction, FISH_MARGIN, w.width)
            assert fish.size in (SMALL, LARGE)

    def test_reset_fish_explicit_x(self, populated_world):
        fish = Fish()
        populated_world.reset_fish(fish, x=70)
        assert fish.x == 70

    def test_reset_shark(self, populated_world, config):
        w = populated_world
        w.reset_shark()
        shark = w.shark
        assert shark.active
        assert shark.timer == 0
        assert shark.speed == config.shark.speed
        assert shark.x == entry_x(shark.direction, config.shark.margin, w.width)

    def test_arm_shark_timer_rearm_range(self, populated_world, config):
        w = populated_world
        w.reset_shark()
        timer = w.arm_shark_timer(initial=False)
        assert not w.shark.active
        assert w.shark.timer == timer
        assert config.shark.rearm_delay_min <= timer <= config.shark.rearm_delay_max

    def test_reset_bubble_near_seabed(self, populated_world):
        w = populated_world
        bubble = w.bubbles[0]
        w.reset_bubble(bubble)
        assert bubble.active
        assert bubble.y == w.height - SEABED_HEIGHT - 2

    def test_burst_bubble_exact_point(self, populated_world):
        bubble = populated_world.bubbles[0]
        populated_world.place_burst_bubble(bubble, 52, 51, jitter=False)
        assert (bubble.x, bubble.y) == (52, 51)
        assert bubble.active

    def test_burst_bubble_clamped(self, populated_world):
        w = populated_world
        bubble = w.bubbles[0]
        w.place_burst_bubble(bubble, -8, 0, jitter=False)
        assert bubble.x == 0
        assert bubble.y == 1
        w.place_burst_bubble(bubble, w.width + 8, w.height + 8, jitter=True)
        assert bubble.x == w.width
        assert bubble.y == w.height


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueries:
    def test_pools_follow_species_order(self, populated_world):
        order = [species for species, _ in populated_world.pools()]
        assert order == sorted(Species)

    def test_shark_is_single_slot_pool(self, populated_world):
        pools = dict(populated_world.pools())
        assert pools[Species.SHARK] == [populated_world.shark]

    def test_free_bubble(self, populated_world):
        w = populated_world
        assert w.free_bubble() is w.bubbles[0]
        for bubble in w.bubbles:
            bubble.active = True
        assert w.free_bubble() is None

    def test_active_fish_count(self, populated_world):
        populated_world.fish[0].active = False
        assert populated_world.active_fish_count == len(populated_world.fish) - 1

    def test_repr(self, populated_world):
        text = repr(populated_world)
        assert "World(" in text
        assert "144x168" in text
