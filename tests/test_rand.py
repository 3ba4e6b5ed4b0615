"""
Unit tests for random-range helpers and integer trig lookups.

Tests cover:
- rand_range: inclusive bounds, degenerate and swapped ranges, determinism
- chance: 0% and 100% edges
- rand_direction: only ±1
- sin/cos lookup at cardinal angles
- wave_offset: bounded by amplitude
- advance_phase: wraps into one turn
"""

import numpy as np
import pytest

from aquarium.utils.rand import rand_range, chance, rand_direction
from aquarium.utils.trig import (
    TRIG_MAX_ANGLE,
    TRIG_MAX_RATIO,
    normalize_angle,
    sin_lookup,
    cos_lookup,
    wave_offset,
    advance_phase,
)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(123)


# ---------------------------------------------------------------------------
# Random ranges
# ---------------------------------------------------------------------------

class TestRandRange:
    def test_inclusive_bounds(self, rng):
        values = {rand_range(rng, 1, 3) for _ in range(500)}
        assert values == {1, 2, 3}

    def test_degenerate_range(self, rng):
        assert rand_range(rng, 5, 5) == 5

    def test_swapped_bounds(self, rng):
        for _ in range(100):
            assert 2 <= rand_range(rng, 9, 2) <= 9

    def test_returns_python_int(self, rng):
        assert type(rand_range(rng, 0, 10)) is int

    def test_deterministic_for_seed(self):
        a = [rand_range(np.random.default_rng(7), 0, 1000) for _ in range(5)]
        b = [rand_range(np.random.default_rng(7), 0, 1000) for _ in range(5)]
        assert a == b


class TestChance:
    def test_zero_never(self, rng):
        assert not any(chance(rng, 0) for _ in range(200))

    def test_hundred_always(self, rng):
        assert all(chance(rng, 100) for _ in range(200))

    def test_rough_rate(self, rng):
        hits = sum(chance(rng, 25) for _ in range(4000))
        assert 800 < hits < 1200


class TestDirections:
    def test_direction_values(self, rng):
        assert {rand_direction(rng) for _ in range(200)} == {-1, 1}


# ---------------------------------------------------------------------------
# Trig
# ---------------------------------------------------------------------------

class TestTrig:
    def test_cardinal_sines(self):
        quarter = TRIG_MAX_ANGLE // 4
        assert sin_lookup(0) == 0
        assert sin_lookup(quarter) == TRIG_MAX_RATIO
        assert sin_lookup(2 * quarter) == 0
        assert sin_lookup(3 * quarter) == -TRIG_MAX_RATIO

    def test_cos_is_shifted_sin(self):
        assert cos_lookup(0) == TRIG_MAX_RATIO
        assert cos_lookup(TRIG_MAX_ANGLE // 2) == -TRIG_MAX_RATIO

    def test_negative_angle_wraps(self):
        assert normalize_angle(-1) == TRIG_MAX_ANGLE - 1
        assert sin_lookup(-TRIG_MAX_ANGLE // 4) == -TRIG_MAX_RATIO

    def test_wave_offset_peaks(self):
        assert wave_offset(TRIG_MAX_ANGLE // 4, 5) == 5
        assert wave_offset(3 * TRIG_MAX_ANGLE // 4, 5) == -5
        assert wave_offset(0, 5) == 0

    def test_wave_offset_bounded(self):
        for phase in range(0, TRIG_MAX_ANGLE, 997):
            assert -3 <= wave_offset(phase, 3) <= 3

    def test_advance_phase_wraps(self):
        assert advance_phase(TRIG_MAX_ANGLE - 0x100, 0x200) == 0x100
        assert 0 <= advance_phase(0, 10 * TRIG_MAX_ANGLE + 5) < TRIG_MAX_ANGLE
