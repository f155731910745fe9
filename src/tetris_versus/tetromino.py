"""Tetromino definitions, rotation tables and collision-aware movement.

Each shape is described by four ``(dx, dy)`` offsets relative to the piece's
anchor.  The second block of every table is the rotation pivot: rotating
clockwise maps a block's pivot-relative offset ``(dx, dy)`` to ``(-dy, dx)``.
Because the pivot itself never moves, the four rotation states of a shape are
fixed and are generated once at import time.  The square ``O`` piece never
rotates.  There are no wall kicks: a rotation that would collide fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .board import BUFFER_HEIGHT, WIDTH

if TYPE_CHECKING:  # pragma: no cover
    from .board import Board

RotationState = List[Tuple[int, int]]

NUM_ROTATIONS = 4


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"

    @property
    def color(self) -> int:
        """Tile id written to the board when this shape locks (``1..7``)."""

        return _SHAPE_IDS[self] + 1


_SHAPE_IDS: Dict[TetrominoType, int] = {t: i for i, t in enumerate(TetrominoType)}

PIVOT_INDEX = 1


def _rotate(state: RotationState, clockwise: bool = True) -> RotationState:
    """Return ``state`` rotated 90 degrees about its pivot block."""

    px, py = state[PIVOT_INDEX]
    rotated = []
    for x, y in state:
        dx, dy = x - px, y - py
        if clockwise:
            dx, dy = -dy, dx
        else:
            dx, dy = dy, -dx
        rotated.append((px + dx, py + dy))
    return rotated


def _generate_rotations(shape: "TetrominoType", state: RotationState) -> List[RotationState]:
    """Generate the four rotation states for a piece starting from ``state``."""

    rotations = [state]
    for _ in range(NUM_ROTATIONS - 1):
        if shape is not TetrominoType.O:
            state = _rotate(state)
        rotations.append(state)
    return rotations


# Spawn orientation for each tetromino as (dx, dy) offsets.
_BASE_SHAPES: Dict[TetrominoType, RotationState] = {
    TetrominoType.I: [(-1, 0), (0, 0), (1, 0), (2, 0)],
    TetrominoType.J: [(-1, 1), (0, 1), (1, 1), (1, 0)],
    TetrominoType.L: [(-1, 1), (0, 1), (1, 1), (-1, 0)],
    TetrominoType.O: [(0, 0), (0, 1), (1, 0), (1, 1)],
    TetrominoType.S: [(-1, 1), (0, 1), (0, 0), (1, 0)],
    TetrominoType.T: [(-1, 1), (0, 1), (1, 1), (0, 0)],
    TetrominoType.Z: [(-1, 0), (0, 0), (0, 1), (1, 1)],
}


TETROMINO_SHAPES: Dict[TetrominoType, List[RotationState]] = {
    t_type: _generate_rotations(t_type, shape) for t_type, shape in _BASE_SHAPES.items()
}

SPAWN_X = WIDTH // 2 - 1
SPAWN_Y = BUFFER_HEIGHT


def rotation_cells(shape: TetrominoType, rotation: int) -> RotationState:
    """Return the block offsets for ``shape`` at ``rotation``.

    Values are wrapped so any integer rotation is accepted.
    """

    return TETROMINO_SHAPES[shape][rotation % NUM_ROTATIONS]


def spawn_position(shape: TetrominoType) -> Tuple[int, int]:
    """Return the ``(x, y)`` anchor a freshly spawned ``shape`` starts at."""

    # The long piece sits one row lower to line up with the others.
    if shape is TetrominoType.I:
        return SPAWN_X, SPAWN_Y + 1
    return SPAWN_X, SPAWN_Y


@dataclass
class Tetromino:
    """Active falling piece in the game."""

    shape: TetrominoType
    rotation: int = 0
    x: int = SPAWN_X
    y: int = SPAWN_Y

    @classmethod
    def spawn(cls, shape: TetrominoType) -> "Tetromino":
        x, y = spawn_position(shape)
        return cls(shape, rotation=0, x=x, y=y)

    @property
    def color(self) -> int:
        return self.shape.color

    @property
    def cells(self) -> RotationState:
        return rotation_cells(self.shape, self.rotation)

    def copy(self) -> "Tetromino":
        return Tetromino(self.shape, self.rotation, self.x, self.y)

    def blocks(self) -> List[Tuple[int, int]]:
        """Return the absolute ``(x, y)`` board coordinates of the blocks."""

        return [(self.x + dx, self.y + dy) for dx, dy in self.cells]

    # ------------------------------------------------------------------
    # Collision queries
    # ------------------------------------------------------------------
    def fits(
        self,
        board: "Board",
        x: Optional[int] = None,
        y: Optional[int] = None,
        rotation: Optional[int] = None,
    ) -> bool:
        """Return ``True`` if the piece would be fully inside and unobstructed.

        Omitted arguments default to the piece's current anchor and rotation.
        """

        x = self.x if x is None else x
        y = self.y if y is None else y
        rotation = self.rotation if rotation is None else rotation
        for dx, dy in rotation_cells(self.shape, rotation):
            if board.is_occupied(x + dx, y + dy):
                return False
        return True

    def collides(self, board: "Board") -> bool:
        return not self.fits(board)

    def is_landed(self, board: "Board") -> bool:
        """Return ``True`` if moving down one row would collide."""

        return not self.fits(board, y=self.y + 1)

    def ghost_y(self, board: "Board") -> int:
        """Return the anchor row the piece would come to rest at."""

        y = self.y
        while self.fits(board, y=y + 1):
            y += 1
        return y

    def ghost_blocks(self, board: "Board") -> List[Tuple[int, int]]:
        y = self.ghost_y(board)
        return [(self.x + dx, y + dy) for dx, dy in self.cells]

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def try_move(self, board: "Board", dx: int, dy: int) -> bool:
        """Translate the piece by ``(dx, dy)`` if the target is free."""

        if not self.fits(board, x=self.x + dx, y=self.y + dy):
            return False
        self.x += dx
        self.y += dy
        return True

    def move_left(self, board: "Board") -> bool:
        return self.try_move(board, -1, 0)

    def move_right(self, board: "Board") -> bool:
        return self.try_move(board, 1, 0)

    def move_down(self, board: "Board") -> bool:
        return self.try_move(board, 0, 1)

    def drop(self, board: "Board") -> int:
        """Move the piece straight down until it lands; return rows moved."""

        target = self.ghost_y(board)
        moved = target - self.y
        self.y = target
        return moved

    def rotate(self, board: "Board", clockwise: bool = True) -> bool:
        """Rotate the piece about its pivot.

        Parameters
        ----------
        board:
            Board used for the collision check.
        clockwise:
            Direction of the quarter turn.

        Returns ``False`` and leaves the piece untouched when the rotated
        position collides or the piece is the square ``O``.
        """

        if self.shape is TetrominoType.O:
            return False
        step = 1 if clockwise else -1
        target = (self.rotation + step) % NUM_ROTATIONS
        if not self.fits(board, rotation=target):
            return False
        self.rotation = target
        return True
