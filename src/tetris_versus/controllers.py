"""Input primitives and the human input controller.

Controllers sit between an input source and a :class:`~tetris_versus.match.Match`
slot.  They never touch a board directly; every effect goes through the
match's mutators, exactly like a key press would.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .game_state import PlayerState
    from .match import Match


class Action(str, Enum):
    """Discrete commands a player (human or computer) can issue."""

    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"
    HOLD = "hold"


class HumanController:
    """Held-key semantics for a human slot.

    Holding left or right shifts once on press, then waits ``das_delay``
    seconds before auto-repeating every ``arr_interval`` seconds.  Holding
    soft drop speeds up gravity and pulls the piece down one row per update.
    """

    def __init__(
        self,
        match: "Match",
        player_index: int,
        *,
        das_delay: Optional[float] = None,
        arr_interval: Optional[float] = None,
    ) -> None:
        self.match = match
        self.player_index = player_index
        self.das_delay = match.config.das_delay if das_delay is None else das_delay
        self.arr_interval = match.config.arr_interval if arr_interval is None else arr_interval
        self.left_held = False
        self.right_held = False
        self.left_time = 0.0
        self.right_time = 0.0
        self.soft_dropping = False

    def reset(self) -> None:
        self.left_held = False
        self.right_held = False
        self.left_time = 0.0
        self.right_time = 0.0
        self._set_soft_drop(False)

    def _state(self) -> Optional["PlayerState"]:
        state = self.match.player(self.player_index)
        if state is None or not state.accepts_input or self.match.paused:
            return None
        return state

    def _set_soft_drop(self, value: bool) -> None:
        self.soft_dropping = value
        state = self.match.player(self.player_index)
        if state is not None:
            state.soft_dropping = value

    def press(self, action: Action) -> bool:
        """Handle ``action`` being pressed; return whether it took effect."""

        if self._state() is None:
            return False
        index = self.player_index
        if action is Action.MOVE_LEFT:
            self.left_held = True
            self.left_time = 0.0
            return self.match.move_left(index)
        if action is Action.MOVE_RIGHT:
            self.right_held = True
            self.right_time = 0.0
            return self.match.move_right(index)
        if action is Action.SOFT_DROP:
            self._set_soft_drop(True)
            return self.match.soft_drop_step(index)
        return self.match.apply_action(index, action)

    def release(self, action: Action) -> None:
        if action is Action.MOVE_LEFT:
            self.left_held = False
            self.left_time = 0.0
        elif action is Action.MOVE_RIGHT:
            self.right_held = False
            self.right_time = 0.0
        elif action is Action.SOFT_DROP:
            self._set_soft_drop(False)

    def _repeat(self, held_time: float, move: Callable[[int], bool]) -> float:
        if held_time < self.das_delay:
            return held_time
        repeats = int((held_time - self.das_delay) // self.arr_interval)
        for _ in range(repeats):
            move(self.player_index)
        return self.das_delay + (held_time - self.das_delay) % self.arr_interval

    def update(self, dt: float) -> None:
        if self._state() is None:
            return
        if self.left_held:
            self.left_time = self._repeat(self.left_time + dt, self.match.move_left)
        if self.right_held:
            self.right_time = self._repeat(self.right_time + dt, self.match.move_right)
        if self.soft_dropping:
            self.match.soft_drop_step(self.player_index)


__all__ = ["Action", "HumanController"]
