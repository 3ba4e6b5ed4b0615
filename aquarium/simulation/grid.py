"""
Spatial grid for predator/prey candidate lookup.

Divides the canvas into a coarse fixed grid (3x3 by default). Each tick the
grid is rebuilt from scratch from current fish positions; the collision
resolver then only compares a predator against fish in its own cell and the
adjacent ones.

Buckets are preallocated numpy arrays with one row per cell and one column
per fish slot, so even the worst case (every fish in one cell) fits and no
fish is ever dropped.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from aquarium.core.entities import Fish
from aquarium.utils.spatial import clamp


class SpatialGrid:
    """
    Fixed-resolution partition of the canvas.

    Attributes:
        width, height: Canvas size in pixels.
        cols, rows: Grid resolution.
        cell_width, cell_height: Size of one cell (ceil division).
        capacity: Slots per bucket.
        counts: Number of fish in each bucket.
        buckets: (cells, capacity) array of fish indices.
        dropped: Fish that did not fit in the last rebuild (0 with worst-case sizing).
    """

    def __init__(self, width: int, height: int, cols: int, rows: int, capacity: int):
        """
        Args:
            width, height: Canvas size.
            cols, rows: Grid resolution.
            capacity: Bucket size; pass the fish pool size for worst-case sizing.
        """
        self.width = width
        self.height = height
        self.cols = cols
        self.rows = rows
        self.cell_width = math.ceil(width / cols)
        self.cell_height = math.ceil(height / rows)
        self.capacity = capacity

        self.counts: NDArray[np.int32] = np.zeros(cols * rows, dtype=np.int32)
        self.buckets: NDArray[np.int32] = np.full(
            (cols * rows, max(capacity, 1)), -1, dtype=np.int32,
        )
        self.dropped: int = 0

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows

    def cell_of(self, x: int, y: int) -> int:
        """Cell index for a point; positions outside the canvas clamp to edge cells."""
        col = clamp(x // self.cell_width, 0, self.cols - 1)
        row = clamp(y // self.cell_height, 0, self.rows - 1)
        return row * self.cols + col

    def rebuild(self, fish: list[Fish]) -> None:
        """
        Clear all buckets and re-bucket every active fish.

        Records the chosen cell on each fish (-1 for inactive ones).
        """
        self.counts[:] = 0
        self.dropped = 0

        for index, f in enumerate(fish):
            if not f.active:
                f.cell = -1
                continue
            cell = self.cell_of(f.x, f.y)
            count = self.counts[cell]
            if count >= self.capacity:
                self.dropped += 1
                f.cell = -1
                continue
            self.buckets[cell, count] = index
            self.counts[cell] = count + 1
            f.cell = cell

    def members(self, cell: int) -> list[int]:
        """Fish indices bucketed in a cell, in insertion order."""
        return [int(i) for i in self.buckets[cell, : self.counts[cell]]]

    def neighbors(self, cell: int) -> list[int]:
        """The cell itself plus its adjacent cells, clipped at the grid edges."""
        row, col = divmod(cell, self.cols)
        cells = []
        for r in range(max(0, row - 1), min(self.rows, row + 2)):
            for c in range(max(0, col - 1), min(self.cols, col + 2)):
                cells.append(r * self.cols + c)
        return cells

    def candidates(self, cell: int) -> list[int]:
        """All fish indices in a cell and its neighbors, ascending cell order."""
        result = []
        for neighbor in self.neighbors(cell):
            result.extend(self.members(neighbor))
        return result

    def cell_contains(self, cell: int, x: int, y: int) -> bool:
        """
        Whether a cell's extent contains (x, y).

        Edge cells extend outward without bound, matching the clamping in
        `cell_of()`.
        """
        row, col = divmod(cell, self.cols)
        x0 = col * self.cell_width if col > 0 else -math.inf
        x1 = (col + 1) * self.cell_width if col < self.cols - 1 else math.inf
        y0 = row * self.cell_height if row > 0 else -math.inf
        y1 = (row + 1) * self.cell_height if row < self.rows - 1 else math.inf
        return x0 <= x < x1 and y0 <= y < y1

    def total_bucketed(self) -> int:
        return int(self.counts.sum())

    def __repr__(self) -> str:
        return (
            f"SpatialGrid({self.cols}x{self.rows}, cell={self.cell_width}x{self.cell_height}, "
            f"bucketed={self.total_bucketed()}, dropped={self.dropped})"
        )
