"""Heightfield metrics shared by the board and the AI planner.

The functions accept any row-major grid-like (a NumPy array or a list of
lists) where ``grid[y][x]`` is non-zero for a filled cell and row ``0`` is the
top of the board.  Column height is measured from the floor to the highest
filled cell, so an empty column has height ``0``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

GridLike = Sequence[Sequence[int]]


@dataclass(frozen=True)
class BoardMetrics:
    """Summary statistics used to rank candidate placements."""

    aggregate_height: int
    holes: int
    bumpiness: int


def _dimensions(grid: GridLike) -> tuple[int, int]:
    height = len(grid)
    width = len(grid[0]) if height else 0
    return height, width


def _cell_filled(grid: GridLike, row: int, col: int) -> bool:
    return bool(grid[row][col])


def column_heights(grid: GridLike) -> list[int]:
    height, width = _dimensions(grid)
    heights = [0] * width
    for col in range(width):
        row = 0
        while row < height and not _cell_filled(grid, row, col):
            row += 1
        heights[col] = height - row
    return heights


def aggregate_height(grid: GridLike) -> int:
    return sum(column_heights(grid))


def count_holes(grid: GridLike) -> int:
    """Count empty cells with a filled cell somewhere above in the column."""

    height, width = _dimensions(grid)
    holes = 0
    for col in range(width):
        seen_block = False
        for row in range(height):
            if _cell_filled(grid, row, col):
                seen_block = True
            elif seen_block:
                holes += 1
    return holes


def bumpiness(heights: Sequence[int]) -> int:
    total = 0
    for col in range(len(heights) - 1):
        total += abs(heights[col] - heights[col + 1])
    return total


def metrics_from_grid(grid: GridLike) -> BoardMetrics:
    heights = column_heights(grid)
    return BoardMetrics(
        aggregate_height=sum(heights),
        holes=count_holes(grid),
        bumpiness=bumpiness(heights),
    )


__all__ = [
    "BoardMetrics",
    "column_heights",
    "aggregate_height",
    "count_holes",
    "bumpiness",
    "metrics_from_grid",
]
