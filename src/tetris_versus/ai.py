"""Heuristic placement search for computer-controlled players.

The planner enumerates every final resting position the active piece can
reach by rotating at the top of the board, sliding to a column and dropping
straight down.  Each candidate is locked into a scratch copy of the board,
completed rows are cleared for real, and the resulting board is ranked with a
weighted sum of lines cleared, aggregate height, holes and bumpiness.  The
best candidate is turned into the same primitive actions a human would press.
The live board and piece are never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from .board import Board
from .controllers import Action
from .features import metrics_from_grid
from .tetromino import NUM_ROTATIONS, Tetromino, TetrominoType, rotation_cells, spawn_position

if TYPE_CHECKING:  # pragma: no cover
    from .match import Match


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeuristicWeights:
    """Linear evaluation weights; only lines cleared is rewarded."""

    lines: float = 0.760666
    height: float = -0.510066
    holes: float = -0.35663
    bumpiness: float = -0.184483


@dataclass(frozen=True)
class Placement:
    """A candidate final position for the active piece."""

    rotation: int
    column: int
    row: int
    lines: int
    score: float


def evaluate_board(board: Board, lines: int, weights: HeuristicWeights) -> float:
    """Return the heuristic score of ``board`` after clearing ``lines``."""

    metrics = metrics_from_grid(board.grid)
    return (
        weights.lines * lines
        + weights.height * metrics.aggregate_height
        + weights.holes * metrics.holes
        + weights.bumpiness * metrics.bumpiness
    )


def _rotation_targets(piece: Tetromino) -> List[int]:
    if piece.shape is TetrominoType.O:
        return [piece.rotation]
    return list(range(NUM_ROTATIONS))


def enumerate_placements(
    board: Board,
    piece: Tetromino,
    weights: Optional[HeuristicWeights] = None,
) -> List[Placement]:
    """Return every reachable placement of ``piece`` on ``board``, scored.

    Candidates are ordered by rotation index, then by column.  Columns whose
    starting position at spawn height is already blocked are skipped.
    """

    weights = weights or HeuristicWeights()
    _, start_y = spawn_position(piece.shape)
    placements: List[Placement] = []
    for rotation in _rotation_targets(piece):
        cells = rotation_cells(piece.shape, rotation)
        min_dx = min(dx for dx, _ in cells)
        max_dx = max(dx for dx, _ in cells)
        for column in range(-min_dx, board.width - max_dx):
            candidate = Tetromino(piece.shape, rotation=rotation, x=column, y=start_y)
            if candidate.collides(board):
                continue
            candidate.drop(board)

            scratch = board.copy()
            scratch.lock_piece(candidate)
            lines = scratch.clear_completed_rows()
            placements.append(
                Placement(
                    rotation=rotation,
                    column=column,
                    row=candidate.y,
                    lines=lines,
                    score=evaluate_board(scratch, lines, weights),
                )
            )
    return placements


def find_best_placement(
    board: Board,
    piece: Tetromino,
    weights: Optional[HeuristicWeights] = None,
) -> Optional[Placement]:
    """Return the highest scoring placement, or ``None`` if nothing fits.

    Ties keep the first candidate found (lowest rotation, then lowest column).
    """

    best: Optional[Placement] = None
    candidates = enumerate_placements(board, piece, weights)
    for placement in candidates:
        if best is None or placement.score > best.score:
            best = placement
    if best is not None:
        LOGGER.debug(
            "Chose rotation %d column %d (score %.3f, %d line(s)) from %d candidates",
            best.rotation,
            best.column,
            best.score,
            best.lines,
            len(candidates),
        )
    return best


def plan_actions(piece: Tetromino, placement: Placement) -> List[Action]:
    """Translate ``placement`` into clockwise rotations then sideways moves."""

    actions: List[Action] = []
    if piece.shape is not TetrominoType.O:
        turns = (placement.rotation - piece.rotation + NUM_ROTATIONS) % NUM_ROTATIONS
        actions.extend([Action.ROTATE_CW] * turns)
    shift = placement.column - piece.x
    step = Action.MOVE_RIGHT if shift > 0 else Action.MOVE_LEFT
    actions.extend([step] * abs(shift))
    return actions


class AIController:
    """Drive one match slot with the placement planner.

    Every ``think_delay`` seconds the controller plans a placement for the
    active piece and issues the planned rotations and moves through the
    match.  Once the piece sits at its planned rotation and column the
    controller waits for the next piece; a move that was blocked on the way
    is retried by planning again after the next delay.  Its slot falls at
    soft-drop speed, so it never hard drops except as a fallback when no
    placement exists.
    """

    def __init__(
        self,
        match: "Match",
        player_index: int,
        *,
        weights: Optional[HeuristicWeights] = None,
        think_delay: Optional[float] = None,
    ) -> None:
        self.match = match
        self.player_index = player_index
        self.weights = weights or HeuristicWeights()
        self.think_delay = match.config.ai_think_delay if think_delay is None else think_delay
        self.think_timer = 0.0
        self._planned: Optional[Tetromino] = None
        self._target: Optional[Placement] = None

    def reset(self) -> None:
        self.think_timer = 0.0
        self._planned = None
        self._target = None
        state = self.match.player(self.player_index)
        if state is not None:
            state.forced_soft_drop = True

    def _on_target(self, piece: Tetromino) -> bool:
        target = self._target
        return (
            piece is self._planned
            and target is not None
            and piece.rotation == target.rotation
            and piece.x == target.column
        )

    def update(self, dt: float) -> None:
        state = self.match.player(self.player_index)
        if state is None or not state.accepts_input or self.match.paused:
            return
        piece = state.active
        if self._on_target(piece):
            return
        self.think_timer += dt
        if self.think_timer < self.think_delay:
            return
        self.think_timer = 0.0
        self._planned = piece

        placement = find_best_placement(state.board, piece, self.weights)
        self._target = placement
        if placement is None:
            LOGGER.debug("Player %d found no placement; dropping in place", self.player_index)
            self.match.hard_drop(self.player_index)
            return
        for action in plan_actions(piece, placement):
            self.match.apply_action(self.player_index, action)


__all__ = [
    "AIController",
    "HeuristicWeights",
    "Placement",
    "evaluate_board",
    "enumerate_placements",
    "find_best_placement",
    "plan_actions",
]
