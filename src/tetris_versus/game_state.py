"""Per-player gameplay state machine.

A :class:`PlayerState` owns one player's board, piece sequence, score and
timers and is advanced by :meth:`PlayerState.update` once per simulation tick.
Cross-player concerns (garbage attacks, deciding when the match ends) belong to
:class:`tetris_versus.match.Match`, which hooks into every lock through
``lock_handler``.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .board import Board
from .config import GameConfig
from .events import (
    Blocked,
    BlockedKind,
    EventQueue,
    GameOver,
    GarbageReceived,
    LevelUp,
    LinesCleared,
    PieceLocked,
)
from .randomizer import BagRandomizer
from .scoring import ScoreTracker
from .tetromino import Tetromino, TetrominoType
from .utils import fall_interval, render_grid


LOGGER = logging.getLogger(__name__)


class PlayerPhase(str, Enum):
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    LANDED = "landed"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class LockResult:
    """What happened when a piece committed to the board."""

    lines: int
    rows: Tuple[int, ...]
    points: int
    level: int
    level_up: bool


@dataclass(frozen=True)
class PlayerView:
    """Read-only snapshot of a player for renderers."""

    index: int
    grid: List[List[int]]
    active_shape: Optional[TetrominoType]
    active_rotation: int
    active_blocks: List[Tuple[int, int]]
    ghost_blocks: List[Tuple[int, int]]
    held: Optional[TetrominoType]
    can_hold: bool
    preview: List[TetrominoType]
    score: int
    level: int
    lines: int
    game_over: bool
    paused: bool
    countdown_remaining: int


# Called after every lock; returning ``False`` suppresses the next spawn.
LockHandler = Callable[["PlayerState", LockResult], bool]


class PlayerState:
    """Mutable state and rules for a single player's game."""

    def __init__(
        self,
        index: int = 0,
        *,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        events: Optional[EventQueue] = None,
    ) -> None:
        self.index = index
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.events = events if events is not None else EventQueue()
        self.board = Board()
        self.randomizer = BagRandomizer(random.Random(self.rng.getrandbits(64)))
        self.score = ScoreTracker()
        self.active: Optional[Tetromino] = None
        self.held: Optional[TetrominoType] = None
        self.can_hold = True
        self.fall_timer = 0.0
        self.lock_timer = 0.0
        self.countdown_timer = 0.0
        self.game_over = False
        self.paused = False
        self.soft_dropping = False
        # Computer-controlled slots always fall at soft-drop speed.
        self.forced_soft_drop = False
        self.pieces = 0
        self.lock_handler: Optional[LockHandler] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Reset the player for a new game and spawn the first piece."""

        self.board.clear()
        self.randomizer.reset()
        self.score.reset()
        self.active = None
        self.held = None
        self.can_hold = True
        self.fall_timer = 0.0
        self.lock_timer = 0.0
        self.game_over = False
        self.paused = False
        self.soft_dropping = False
        self.pieces = 0
        self.begin_countdown()
        self.spawn()

    def begin_countdown(self) -> None:
        self.countdown_timer = self.config.countdown_duration

    @property
    def countdown_remaining(self) -> int:
        """Whole countdown steps left, ``0`` once play is live."""

        if self.countdown_timer <= 0:
            return 0
        return math.ceil(self.countdown_timer * self.config.countdown_speed)

    @property
    def phase(self) -> PlayerPhase:
        if self.game_over:
            return PlayerPhase.GAME_OVER
        if self.paused:
            return PlayerPhase.PAUSED
        if self.countdown_timer > 0:
            return PlayerPhase.COUNTDOWN
        if self.active is not None and self.active.is_landed(self.board):
            return PlayerPhase.LANDED
        return PlayerPhase.ACTIVE

    @property
    def accepts_input(self) -> bool:
        return (
            self.active is not None
            and not self.game_over
            and not self.paused
            and self.countdown_timer <= 0
        )

    @property
    def current_fall_interval(self) -> float:
        interval = fall_interval(self.score.level)
        if self.soft_dropping or self.forced_soft_drop:
            interval /= self.config.soft_drop_factor
        return interval

    def preview(self) -> List[TetrominoType]:
        return self.randomizer.peek_preview(self.config.preview_size)

    def ghost_blocks(self) -> List[Tuple[int, int]]:
        if self.active is None:
            return []
        return self.active.ghost_blocks(self.board)

    def view(self) -> PlayerView:
        active = self.active
        return PlayerView(
            index=self.index,
            grid=render_grid(self.board),
            active_shape=active.shape if active else None,
            active_rotation=active.rotation if active else 0,
            active_blocks=active.blocks() if active else [],
            ghost_blocks=self.ghost_blocks(),
            held=self.held,
            can_hold=self.can_hold,
            preview=self.preview(),
            score=self.score.score,
            level=self.score.level,
            lines=self.score.lines,
            game_over=self.game_over,
            paused=self.paused,
            countdown_remaining=self.countdown_remaining,
        )

    # ------------------------------------------------------------------
    # Spawning and game over
    # ------------------------------------------------------------------
    def spawn(self, shape: Optional[TetrominoType] = None) -> bool:
        """Spawn ``shape`` (or the next dealt shape) at the top of the board.

        Returns ``False`` and ends this player's game if the spawn position is
        already blocked.
        """

        if shape is None:
            shape = self.randomizer.next_piece()
        self.active = Tetromino.spawn(shape)
        self.fall_timer = 0.0
        self.lock_timer = 0.0
        self.can_hold = True
        if self.active.collides(self.board):
            self.set_game_over()
            return False
        return True

    def set_game_over(self) -> None:
        if self.game_over:
            return
        self.game_over = True
        self.soft_dropping = False
        self.events.emit(GameOver(self.index))
        LOGGER.info("Player %d topped out with %d points", self.index, self.score.score)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def update(self, dt: float) -> Optional[LockResult]:
        """Advance countdown, gravity and lock delay by ``dt`` seconds.

        Returns the lock outcome when the active piece committed this tick.
        """

        if self.game_over or self.paused or self.active is None:
            return None
        if self.countdown_timer > 0:
            self.countdown_timer = max(0.0, self.countdown_timer - dt)
            return None

        interval = self.current_fall_interval
        self.fall_timer += dt
        while self.fall_timer >= interval:
            self.fall_timer -= interval
            if self.active.is_landed(self.board):
                self.lock_timer += interval
                if self.lock_timer >= self.config.lock_delay:
                    return self.lock()
            else:
                self.active.move_down(self.board)
                self.lock_timer = 0.0
        return None

    def lock(self) -> Optional[LockResult]:
        """Commit the active piece, clear rows, score and spawn the next one."""

        piece = self.active
        if piece is None or self.game_over:
            return None

        self.board.lock_piece(piece)
        self.active = None
        rows = tuple(self.board.full_rows())
        cleared = self.board.clear_completed_rows()
        outcome = self.score.add_lines(cleared)
        self.pieces += 1

        self.events.emit(PieceLocked(self.index))
        if cleared:
            self.events.emit(LinesCleared(self.index, cleared, rows))
            LOGGER.debug("Player %d cleared %d line(s)", self.index, cleared)
        if outcome.level_up:
            self.events.emit(LevelUp(self.index, outcome.level))
            LOGGER.info("Player %d reached level %d", self.index, outcome.level)

        result = LockResult(
            lines=cleared,
            rows=rows,
            points=outcome.points,
            level=outcome.level,
            level_up=outcome.level_up,
        )
        spawn_next = True
        if self.lock_handler is not None:
            spawn_next = self.lock_handler(self, result)
        if spawn_next and not self.game_over:
            self.spawn()
        return result

    def receive_garbage(self, lines: int) -> bool:
        """Inject ``lines`` garbage rows; return ``True`` if this topped out.

        The active piece is lifted by up to ``lines`` rows when the rising
        stack pushes into it.
        """

        if self.game_over or lines <= 0:
            return False
        topped = self.board.add_garbage_lines(lines, self.rng)
        self.events.emit(GarbageReceived(self.index, lines))
        LOGGER.debug("Player %d received %d garbage line(s)", self.index, lines)

        piece = self.active
        if not topped and piece is not None and piece.collides(self.board):
            for _ in range(lines):
                piece.y -= 1
                if piece.fits(self.board):
                    break
            else:
                topped = True
        if topped:
            self.set_game_over()
        return topped

    # ------------------------------------------------------------------
    # Input mutators
    # ------------------------------------------------------------------
    def _after_shift(self, moved: bool, kind: BlockedKind) -> bool:
        assert self.active is not None
        if not moved:
            self.events.emit(Blocked(self.index, kind))
        elif self.active.is_landed(self.board):
            self.lock_timer = 0.0
        return moved

    def move_left(self) -> bool:
        if not self.accepts_input:
            return False
        return self._after_shift(self.active.move_left(self.board), BlockedKind.MOVE)

    def move_right(self) -> bool:
        if not self.accepts_input:
            return False
        return self._after_shift(self.active.move_right(self.board), BlockedKind.MOVE)

    def rotate(self, clockwise: bool = True) -> bool:
        if not self.accepts_input:
            return False
        if self.active.shape is TetrominoType.O:
            return False
        return self._after_shift(self.active.rotate(self.board, clockwise), BlockedKind.ROTATE)

    def soft_drop_step(self) -> bool:
        """Move one row down immediately and restart the gravity timer."""

        if not self.accepts_input or not self.active.move_down(self.board):
            return False
        self.fall_timer = 0.0
        return True

    def hard_drop(self) -> Optional[LockResult]:
        if not self.accepts_input:
            return None
        self.active.drop(self.board)
        return self.lock()

    def hold(self) -> bool:
        """Swap the active piece with the held slot, once per lock."""

        if not self.accepts_input or not self.can_hold:
            return False
        current = self.active.shape
        if self.held is None:
            self.held = current
            self.spawn()
        else:
            swapped, self.held = self.held, current
            self.spawn(swapped)
        self.can_hold = False
        self.fall_timer = 0.0
        self.lock_timer = 0.0
        return True


__all__ = ["LockResult", "PlayerPhase", "PlayerState", "PlayerView"]
