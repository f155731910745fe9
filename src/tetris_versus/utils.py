"""Utility helpers for the Tetris engine."""

from __future__ import annotations

from typing import List, Optional

from .board import Board
from .scoring import MAX_LEVEL
from .tetromino import Tetromino


# Frames (at 60 fps) between gravity steps for levels 1..15.
GRAVITY_FRAMES = (48, 43, 38, 33, 28, 23, 18, 13, 8, 6, 5, 4, 3, 2, 1)
FRAME = 1.0 / 60.0


def fall_interval(level: int) -> float:
    """Return the seconds between automatic downward moves on ``level``.

    The interval shrinks from 0.8 s on level 1 to a single frame on level 15.
    Levels outside the table are clamped to its ends.
    """

    level = max(1, min(MAX_LEVEL, level))
    return GRAVITY_FRAMES[level - 1] * FRAME


def render_grid(board: Board, active: Optional[Tetromino] = None) -> List[List[int]]:
    """Return a copy of the board grid with the active piece overlaid.

    This is a convenience for renderers that want a single 2D array to draw
    without mutating the underlying board state (i.e. without locking the
    piece). Cells occupied by the active piece receive the piece's color.
    """

    grid = [[int(v) for v in row] for row in board.grid]
    if active is not None:
        for x, y in active.blocks():
            if board.is_within_bounds(x, y):
                grid[y][x] = active.color
    return grid
