"""Board representation for a versus Tetris playfield.

The grid is ``TOTAL_HEIGHT`` rows by ``WIDTH`` columns.  The top
``BUFFER_HEIGHT`` rows form a hidden buffer above the visible playfield; row
``0`` is the topmost buffer row.  Coordinates passed to the public methods are
``(x, y)`` pairs (column first) while the underlying NumPy array is indexed
``[y, x]``.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, List, Optional

import numpy as np
from numpy.typing import NDArray

from . import features

if TYPE_CHECKING:  # pragma: no cover
    from .tetromino import Tetromino


# Dimensions of the playfield.
WIDTH = 10
VISIBLE_HEIGHT = 20
BUFFER_HEIGHT = 20
TOTAL_HEIGHT = VISIBLE_HEIGHT + BUFFER_HEIGHT

EMPTY = 0
GARBAGE_TILE = 8
MAX_TILE = GARBAGE_TILE

Grid = NDArray[np.uint8]


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((TOTAL_HEIGHT, WIDTH), dtype=np.uint8)


class Board:
    """Tetris board holding the locked cells of one player."""

    width: int = WIDTH
    height: int = TOTAL_HEIGHT

    def __init__(self, grid: Optional[Grid] = None) -> None:
        if grid is None:
            self.grid: Grid = create_empty_grid()
        else:
            values = np.asarray(grid)
            if values.shape != (TOTAL_HEIGHT, WIDTH):
                raise ValueError("Grid shape mismatch")
            if values.min() < EMPTY or values.max() > MAX_TILE:
                raise ValueError(f"Invalid tile id in grid: {values.min()}..{values.max()}")
            self.grid = np.array(values, dtype=np.uint8, copy=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    def __repr__(self) -> str:
        return f"Board(filled={self.filled_count()})"

    def copy(self) -> "Board":
        """Return a deep copy sharing no storage with this board."""

        return Board(self.grid)

    def clear(self) -> None:
        self.grid.fill(EMPTY)

    # ------------------------------------------------------------------
    # Cell queries
    # ------------------------------------------------------------------
    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        """Return ``True`` if ``(x, y)`` is filled.

        Any coordinates outside the board are treated as occupied.  This makes
        collision detection simpler as off-board positions are automatically
        rejected.
        """

        if self.is_within_bounds(x, y):
            return bool(self.grid[y, x] != EMPTY)
        return True

    def get_cell(self, x: int, y: int) -> int:
        """Safely return the tile id at ``(x, y)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.is_within_bounds(x, y):
            return int(self.grid[y, x])
        raise IndexError("Cell out of bounds")

    def place_cell(self, x: int, y: int, tile: int) -> None:
        """Write ``tile`` at ``(x, y)`` regardless of the current content.

        Raises:
            IndexError: If the coordinates are outside the board.
            ValueError: If ``tile`` is not a valid tile id.
        """
        if not 0 <= tile <= MAX_TILE:
            raise ValueError(f"Invalid tile id: {tile}")
        if not self.is_within_bounds(x, y):
            raise IndexError("Cell out of bounds")
        self.grid[y, x] = np.uint8(tile)

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    # ------------------------------------------------------------------
    # Locking and clearing
    # ------------------------------------------------------------------
    def lock_piece(self, piece: "Tetromino") -> None:
        """Write the piece's blocks into the grid using its color."""

        for x, y in piece.blocks():
            self.place_cell(x, y, piece.color)

    def full_rows(self) -> List[int]:
        """Return the indices of every complete row, top to bottom."""

        full = np.all(self.grid != EMPTY, axis=1)
        return [int(y) for y in np.flatnonzero(full)]

    def clear_completed_rows(self) -> int:
        """Clear completed rows and return how many were removed.

        Rows above a cleared row move down; every complete row is removed in
        a single pass so a row shifted into a cleared index is never skipped.
        """

        full_rows = np.all(self.grid != EMPTY, axis=1)
        cleared = int(np.count_nonzero(full_rows))
        if cleared:
            remaining = self.grid[~full_rows]
            new_rows = np.zeros((cleared, self.width), dtype=self.grid.dtype)
            self.grid = np.vstack((new_rows, remaining))
        return cleared

    def count_potential_line_clears(self, piece: "Tetromino") -> int:
        """Return how many rows locking ``piece`` would clear.

        The count is exact: the piece is locked into a scratch copy and the
        complete rows of that copy are counted, so rows finished together with
        previously placed tiles are included.  This board is left untouched.
        """

        scratch = self.copy()
        scratch.lock_piece(piece)
        return scratch.clear_completed_rows()

    def add_garbage_lines(self, count: int, rng: Optional[random.Random] = None) -> bool:
        """Push ``count`` garbage rows in from the bottom.

        Existing rows shift up by ``count``; the rows pushed past the top are
        discarded.  Each new row is filled with :data:`GARBAGE_TILE` except for
        one empty column chosen by ``rng``.  Returns ``True`` when the shift
        topped the board out, i.e. occupied rows were discarded or any occupied
        cell now sits inside the hidden buffer.
        """

        if count <= 0:
            return False
        rng = rng or random
        count = min(count, self.height)

        discarded = bool(np.any(self.grid[:count] != EMPTY))
        garbage = np.full((count, self.width), GARBAGE_TILE, dtype=self.grid.dtype)
        for row in garbage:
            row[rng.randrange(self.width)] = EMPTY
        self.grid = np.vstack((self.grid[count:], garbage))

        return discarded or bool(np.any(self.grid[:BUFFER_HEIGHT] != EMPTY))

    # ------------------------------------------------------------------
    # Heightfield metrics
    # ------------------------------------------------------------------
    def column_heights(self) -> List[int]:
        return features.column_heights(self.grid)

    def aggregate_height(self) -> int:
        return features.aggregate_height(self.grid)

    def hole_count(self) -> int:
        return features.count_holes(self.grid)

    def bumpiness(self) -> int:
        return features.bumpiness(self.column_heights())
