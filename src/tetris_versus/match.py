"""Match orchestration: game modes, player slots and garbage attacks.

A :class:`Match` is the explicit simulation context for one game.  It owns a
:class:`~tetris_versus.game_state.PlayerState` and a controller per slot, a
shared event queue, and the rules that span players: garbage sent on
multi-line clears and deciding when the match is over.

Players are advanced in ascending index order every tick.  A player that is
already game over, including one topped out by garbage earlier in the same
tick, is skipped, and once the match is decided no further player is advanced
in that tick.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from .ai import AIController, HeuristicWeights
from .config import GameConfig
from .controllers import Action, HumanController
from .events import Event, EventQueue, GarbageSent, MatchOver
from .game_state import LockResult, PlayerState, PlayerView


LOGGER = logging.getLogger(__name__)

Controller = Union[HumanController, AIController]


class GameMode(str, Enum):
    ONE_PLAYER = "one_player"
    TWO_PLAYER = "two_player"
    PLAYER_VS_AI = "player_vs_ai"

    @property
    def player_count(self) -> int:
        return 1 if self is GameMode.ONE_PLAYER else 2

    def is_ai_slot(self, index: int) -> bool:
        return self is GameMode.PLAYER_VS_AI and index == 1


class MenuAction(str, Enum):
    START_ONE_PLAYER = "start_one_player"
    START_TWO_PLAYER = "start_two_player"
    START_VS_AI = "start_vs_ai"
    HELP = "help"
    QUIT = "quit"

    def mode(self) -> Optional[GameMode]:
        """Return the game mode this menu entry starts, if any."""

        return _MENU_MODES[self]


_MENU_MODES: Dict[MenuAction, Optional[GameMode]] = {
    MenuAction.START_ONE_PLAYER: GameMode.ONE_PLAYER,
    MenuAction.START_TWO_PLAYER: GameMode.TWO_PLAYER,
    MenuAction.START_VS_AI: GameMode.PLAYER_VS_AI,
    MenuAction.HELP: None,
    MenuAction.QUIT: None,
}

# Garbage rows sent for 0-4 simultaneous line clears.
GARBAGE_TABLE = (0, 0, 1, 2, 4)


def garbage_for_lines(lines: int) -> int:
    """Return how many garbage rows a clear of ``lines`` sends."""

    if lines <= 0:
        return 0
    if lines < len(GARBAGE_TABLE):
        return GARBAGE_TABLE[lines]
    return 4 + (lines - 4) * 2


class Match:
    """Simulation context for one game of one or more players."""

    def __init__(
        self,
        mode: GameMode = GameMode.ONE_PLAYER,
        *,
        config: Optional[GameConfig] = None,
        weights: Optional[HeuristicWeights] = None,
        ai_players: Optional[Iterable[int]] = None,
    ) -> None:
        self.mode = mode
        self.config = config or GameConfig()
        self.events = EventQueue()
        self._rng = random.Random(self.config.seed)
        ai_slots = (
            set(ai_players)
            if ai_players is not None
            else {i for i in range(mode.player_count) if mode.is_ai_slot(i)}
        )

        self.players: List[PlayerState] = []
        self.controllers: List[Controller] = []
        for index in range(mode.player_count):
            state = PlayerState(
                index,
                config=self.config,
                rng=random.Random(self._rng.getrandbits(64)),
                events=self.events,
            )
            state.lock_handler = self._on_lock
            self.players.append(state)
        for index in range(mode.player_count):
            if index in ai_slots:
                self.controllers.append(AIController(self, index, weights=weights))
            else:
                self.controllers.append(HumanController(self, index))

        self.paused = False
        self.match_over = False
        self.winner: Optional[int] = None
        self.start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Reset every slot and begin a fresh game in the current mode."""

        self.paused = False
        self.match_over = False
        self.winner = None
        self.events.clear()
        for controller, player in zip(self.controllers, self.players):
            controller.reset()
            player.start()
        LOGGER.info("Starting %s match with %d player(s)", self.mode.value, len(self.players))
        self._check_match_over()

    restart = start

    def pause(self) -> None:
        if self.paused or self.match_over:
            return
        self.paused = True
        for player in self.players:
            player.paused = True

    def resume(self) -> None:
        """Unpause; every player gets a fresh countdown before play resumes."""

        if not self.paused:
            return
        self.paused = False
        for player in self.players:
            player.paused = False
            if not player.game_over:
                player.begin_countdown()

    def toggle_pause(self) -> None:
        if self.paused:
            self.resume()
        else:
            self.pause()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def update(self, dt: float) -> None:
        """Advance every player by ``dt`` seconds, clamped to ``max_dt``."""

        if self.paused or self.match_over or dt <= 0:
            return
        dt = min(dt, self.config.max_dt)
        for index, player in enumerate(self.players):
            if player.game_over:
                continue
            self.controllers[index].update(dt)
            if self.match_over:
                break
            player.update(dt)
            self._check_match_over()
            if self.match_over:
                break

    def _on_lock(self, player: PlayerState, result: LockResult) -> bool:
        garbage = garbage_for_lines(result.lines)
        if garbage and len(self.players) > 1:
            self.events.emit(GarbageSent(player.index, garbage))
            LOGGER.debug("Player %d sends %d garbage line(s)", player.index, garbage)
            for opponent in self.players:
                if opponent is player or opponent.game_over:
                    continue
                opponent.receive_garbage(garbage)
        self._check_match_over()
        return not self.match_over

    def _check_match_over(self) -> None:
        if self.match_over:
            return
        alive = [p.index for p in self.players if not p.game_over]
        needed = 1 if len(self.players) == 1 else len(self.players) - 1
        if len(self.players) - len(alive) < needed:
            return
        self.match_over = True
        if len(self.players) > 1 and len(alive) == 1:
            self.winner = alive[0]
        self.events.emit(MatchOver(self.winner))
        LOGGER.info("Match over; winner: %s", self.winner)

    # ------------------------------------------------------------------
    # Read-only access
    # ------------------------------------------------------------------
    @property
    def player_count(self) -> int:
        return len(self.players)

    def player(self, index: int) -> Optional[PlayerState]:
        """Return the player in slot ``index`` or ``None`` if it does not exist."""

        if 0 <= index < len(self.players):
            return self.players[index]
        return None

    def controller(self, index: int) -> Optional[Controller]:
        if 0 <= index < len(self.controllers):
            return self.controllers[index]
        return None

    def snapshot(self, index: int) -> Optional[PlayerView]:
        player = self.player(index)
        return player.view() if player is not None else None

    def drain_events(self) -> List[Event]:
        return self.events.drain()

    # ------------------------------------------------------------------
    # Input entry points
    # ------------------------------------------------------------------
    def _input_target(self, index: int) -> Optional[PlayerState]:
        if self.paused or self.match_over:
            return None
        return self.player(index)

    def move_left(self, index: int) -> bool:
        player = self._input_target(index)
        return player.move_left() if player is not None else False

    def move_right(self, index: int) -> bool:
        player = self._input_target(index)
        return player.move_right() if player is not None else False

    def rotate(self, index: int, clockwise: bool = True) -> bool:
        player = self._input_target(index)
        return player.rotate(clockwise) if player is not None else False

    def soft_drop_step(self, index: int) -> bool:
        player = self._input_target(index)
        return player.soft_drop_step() if player is not None else False

    def hard_drop(self, index: int) -> bool:
        player = self._input_target(index)
        if player is None:
            return False
        result = player.hard_drop()
        self._check_match_over()
        return result is not None

    def hold(self, index: int) -> bool:
        player = self._input_target(index)
        if player is None:
            return False
        held = player.hold()
        self._check_match_over()
        return held

    def apply_action(self, index: int, action: Action) -> bool:
        """Apply a single discrete ``action`` to player ``index``."""

        if action is Action.MOVE_LEFT:
            return self.move_left(index)
        if action is Action.MOVE_RIGHT:
            return self.move_right(index)
        if action is Action.ROTATE_CW:
            return self.rotate(index, clockwise=True)
        if action is Action.ROTATE_CCW:
            return self.rotate(index, clockwise=False)
        if action is Action.SOFT_DROP:
            return self.soft_drop_step(index)
        if action is Action.HARD_DROP:
            return self.hard_drop(index)
        if action is Action.HOLD:
            return self.hold(index)
        raise ValueError(f"Unknown action: {action!r}")

    def press(self, index: int, action: Action) -> bool:
        """Press ``action`` on a human slot; computer slots ignore input."""

        controller = self.controller(index)
        if not isinstance(controller, HumanController):
            return False
        return controller.press(action)

    def release(self, index: int, action: Action) -> None:
        controller = self.controller(index)
        if isinstance(controller, HumanController):
            controller.release(action)


__all__ = ["GameMode", "Match", "MenuAction", "garbage_for_lines", "GARBAGE_TABLE"]
