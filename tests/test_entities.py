"""
Unit tests for entity records.

Tests cover:
- Species tags and update order
- Defaults (bubbles/plankton/shark start inactive)
- Derived properties (is_large, is_open, bell_size, bob_offset, sway)
- Slotted records reject unknown attributes
"""

import pytest

from aquarium.core.entities import (
    Species, SMALL, LARGE,
    Fish, Shark, Seaweed, Bubble, Plankton, Octopus,
    Turtle, Jellyfish, Seahorse, Crab, Clam,
)
from aquarium.utils.trig import TRIG_MAX_ANGLE


QUARTER = TRIG_MAX_ANGLE // 4


class TestSpecies:
    def test_each_record_carries_its_tag(self):
        records = {
            Fish: Species.FISH, Shark: Species.SHARK, Seaweed: Species.SEAWEED,
            Bubble: Species.BUBBLE, Plankton: Species.PLANKTON, Octopus: Species.OCTOPUS,
            Turtle: Species.TURTLE, Jellyfish: Species.JELLYFISH, Seahorse: Species.SEAHORSE,
            Crab: Species.CRAB, Clam: Species.CLAM,
        }
        for cls, tag in records.items():
            assert cls.species is tag
            assert cls().species is tag

    def test_closed_set(self):
        assert len(Species) == 11

    def test_shark_updates_last(self):
        assert max(Species) is Species.SHARK
        assert Species.FISH < Species.SHARK


class TestDefaults:
    def test_fish_defaults(self):
        fish = Fish()
        assert fish.active
        assert fish.size == SMALL
        assert fish.cell == -1

    def test_pooled_particles_start_inactive(self):
        assert not Bubble().active
        assert not Plankton().active

    def test_shark_starts_inactive(self):
        assert not Shark().active

    def test_records_are_slotted(self):
        with pytest.raises(AttributeError):
            Fish().colour = "red"


class TestDerived:
    def test_is_large(self):
        assert Fish(size=LARGE).is_large
        assert not Fish(size=SMALL).is_large

    def test_clam_open(self):
        assert not Clam().is_open
        assert Clam(open_countdown=5).is_open

    def test_bell_size_pulses(self):
        jelly = Jellyfish(base_size=7)
        assert jelly.bell_size == 7
        jelly.pulse_phase = QUARTER
        assert jelly.bell_size == 9
        jelly.pulse_phase = 3 * QUARTER
        assert jelly.bell_size == 5

    def test_seahorse_bob(self):
        assert Seahorse(bob_phase=QUARTER).bob_offset == 3
        assert Seahorse(bob_phase=0).bob_offset == 0

    def test_seaweed_sway(self):
        weed = Seaweed(phase=QUARTER)
        assert weed.sway(4) == 4
