"""
Unit tests for the SpatialGrid.

Tests cover:
- Cell geometry and clamping of off-canvas positions
- Rebuild: partition correctness (every active fish in exactly one bucket)
- Inactive fish are never bucketed
- Worst-case capacity (all fish in one cell, nothing dropped)
- Neighbor enumeration at corners, edges and center
"""

import numpy as np
import pytest

from aquarium.core.entities import Fish
from aquarium.simulation.grid import SpatialGrid


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def grid() -> SpatialGrid:
    return SpatialGrid(144, 168, 3, 3, capacity=8)


def random_fish(rng: np.random.Generator, n: int, inactive_pct: float = 0.2) -> list[Fish]:
    fish = []
    for _ in range(n):
        fish.append(Fish(
            x=int(rng.integers(-20, 165)),
            y=int(rng.integers(-5, 175)),
            active=bool(rng.random() >= inactive_pct),
        ))
    return fish


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class TestGeometry:
    def test_cell_size(self, grid):
        assert grid.cell_width == 48
        assert grid.cell_height == 56
        assert grid.cell_count == 9

    def test_ceil_division(self):
        g = SpatialGrid(100, 100, 3, 3, capacity=1)
        assert g.cell_width == 34

    def test_cell_of_corners(self, grid):
        assert grid.cell_of(0, 0) == 0
        assert grid.cell_of(143, 0) == 2
        assert grid.cell_of(0, 167) == 6
        assert grid.cell_of(143, 167) == 8

    def test_cell_of_clamps_off_canvas(self, grid):
        assert grid.cell_of(-10, -10) == 0
        assert grid.cell_of(154, 60) == 5
        assert grid.cell_of(144, 168) == 8

    def test_cell_contains_matches_cell_of(self, grid):
        for x in range(-12, 160, 7):
            for y in range(-12, 180, 9):
                cell = grid.cell_of(x, y)
                assert grid.cell_contains(cell, x, y)
                others = [c for c in range(grid.cell_count) if grid.cell_contains(c, x, y)]
                assert others == [cell]


# ---------------------------------------------------------------------------
# Rebuild
# ---------------------------------------------------------------------------

class TestRebuild:
    def test_partition_correctness(self):
        rng = np.random.default_rng(5)
        for _ in range(20):
            fish = random_fish(rng, 30)
            grid = SpatialGrid(144, 168, 3, 3, capacity=len(fish))
            grid.rebuild(fish)

            seen = []
            for cell in range(grid.cell_count):
                for index in grid.members(cell):
                    assert grid.cell_contains(cell, fish[index].x, fish[index].y)
                    assert fish[index].cell == cell
                    seen.append(index)

            active = [i for i, f in enumerate(fish) if f.active]
            assert sorted(seen) == active
            assert len(seen) == len(set(seen))
            assert grid.dropped == 0

    def test_inactive_fish_not_bucketed(self, grid):
        fish = [Fish(x=10, y=10, active=False, cell=4)]
        grid.rebuild(fish)
        assert grid.total_bucketed() == 0
        assert fish[0].cell == -1

    def test_worst_case_single_cell(self):
        fish = [Fish(x=5, y=5) for _ in range(8)]
        grid = SpatialGrid(144, 168, 3, 3, capacity=8)
        grid.rebuild(fish)
        assert grid.members(0) == list(range(8))
        assert grid.dropped == 0

    def test_undersized_bucket_counts_drops(self):
        fish = [Fish(x=5, y=5) for _ in range(4)]
        grid = SpatialGrid(144, 168, 3, 3, capacity=2)
        grid.rebuild(fish)
        assert grid.members(0) == [0, 1]
        assert grid.dropped == 2
        assert fish[3].cell == -1

    def test_rebuild_clears_previous(self, grid):
        fish = [Fish(x=5, y=5)]
        grid.rebuild(fish)
        fish[0].x, fish[0].y = 140, 160
        grid.rebuild(fish)
        assert grid.members(0) == []
        assert grid.members(8) == [0]

    def test_empty_pool(self):
        grid = SpatialGrid(144, 168, 3, 3, capacity=0)
        grid.rebuild([])
        assert grid.total_bucketed() == 0


# ---------------------------------------------------------------------------
# Neighbors
# ---------------------------------------------------------------------------

class TestNeighbors:
    def test_center(self, grid):
        assert grid.neighbors(4) == list(range(9))

    def test_corner(self, grid):
        assert grid.neighbors(0) == [0, 1, 3, 4]
        assert grid.neighbors(8) == [4, 5, 7, 8]

    def test_edge(self, grid):
        assert grid.neighbors(1) == [0, 1, 2, 3, 4, 5]

    def test_candidates_span_neighbors(self, grid):
        fish = [Fish(x=5, y=5), Fish(x=60, y=60), Fish(x=140, y=160)]
        grid.rebuild(fish)
        assert grid.candidates(0) == [0, 1]
        assert grid.candidates(4) == [0, 1, 2]
