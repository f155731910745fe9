from __future__ import annotations

import pytest

from tetris_versus.board import EMPTY, GARBAGE_TILE, WIDTH
from tetris_versus.config import GameConfig
from tetris_versus.controllers import Action, HumanController
from tetris_versus.ai import AIController
from tetris_versus.events import GarbageReceived, GarbageSent, LinesCleared, MatchOver
from tetris_versus.match import GameMode, Match, MenuAction, garbage_for_lines
from tetris_versus.tetromino import Tetromino, TetrominoType


def _ready(match: Match) -> None:
    for player in match.players:
        player.countdown_timer = 0.0


def _fill_rows_except(board, rows, hole: int) -> None:
    for y in rows:
        for x in range(WIDTH):
            if x != hole:
                board.place_cell(x, y, 1)


def _vertical_i(x: int = 9) -> Tetromino:
    return Tetromino(TetrominoType.I, rotation=1, x=x, y=22)


@pytest.mark.parametrize("lines,expected", [(0, 0), (1, 0), (2, 1), (3, 2), (4, 4), (5, 6), (6, 8)])
def test_garbage_for_lines(lines: int, expected: int) -> None:
    assert garbage_for_lines(lines) == expected


def test_menu_actions_map_to_modes() -> None:
    assert MenuAction.START_ONE_PLAYER.mode() is GameMode.ONE_PLAYER
    assert MenuAction.START_TWO_PLAYER.mode() is GameMode.TWO_PLAYER
    assert MenuAction.START_VS_AI.mode() is GameMode.PLAYER_VS_AI
    assert MenuAction.HELP.mode() is None
    assert MenuAction.QUIT.mode() is None


def test_modes_create_matching_slots() -> None:
    assert Match(GameMode.ONE_PLAYER).player_count == 1
    versus = Match(GameMode.PLAYER_VS_AI, config=GameConfig(seed=0))
    assert versus.player_count == 2
    assert isinstance(versus.controller(0), HumanController)
    assert isinstance(versus.controller(1), AIController)
    assert versus.player(1).forced_soft_drop is True
    assert versus.player(0).forced_soft_drop is False


def test_tetris_sends_four_garbage_rows() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=1))
    _ready(match)
    attacker, defender = match.players
    _fill_rows_except(attacker.board, range(36, 40), hole=9)
    attacker.active = _vertical_i()

    assert match.hard_drop(0)

    assert attacker.score.score == 800
    for y in range(36, 40):
        row = list(defender.board.grid[y])
        assert row.count(EMPTY) == 1
        assert row.count(GARBAGE_TILE) == WIDTH - 1
    assert not defender.game_over
    assert not match.match_over

    events = match.drain_events()
    assert LinesCleared(0, 4, (36, 37, 38, 39)) in events
    assert GarbageSent(0, 4) in events
    assert GarbageReceived(1, 4) in events
    assert match.drain_events() == []


def test_single_line_sends_nothing() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=1))
    _ready(match)
    _fill_rows_except(match.players[0].board, [39], hole=9)
    match.players[0].active = _vertical_i()

    assert match.hard_drop(0)
    assert match.players[1].board.filled_count() == 0
    assert not any(isinstance(event, GarbageSent) for event in match.drain_events())


def test_top_out_mid_tick_ends_match_before_next_player_moves() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=2))
    _ready(match)
    attacker, defender = match.players
    _fill_rows_except(attacker.board, range(36, 40), hole=9)
    attacker.active = _vertical_i()
    attacker.active.drop(attacker.board)
    attacker.fall_timer = 0.79
    attacker.lock_timer = 0.49
    for y in range(20, 40):
        defender.board.place_cell(0, y, 1)
    defender_y = defender.active.y

    match.update(0.05)

    assert defender.game_over
    assert match.match_over
    assert match.winner == 0
    assert defender.fall_timer == 0.0
    assert defender.active.y == defender_y
    assert MatchOver(0) in match.drain_events()

    match.update(0.05)
    assert defender.fall_timer == 0.0


def test_surviving_opponent_still_advances_in_same_tick() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=3))
    _ready(match)
    attacker, defender = match.players
    _fill_rows_except(attacker.board, [38, 39], hole=9)
    attacker.active = _vertical_i()
    attacker.active.drop(attacker.board)
    attacker.fall_timer = 0.79
    attacker.lock_timer = 0.49

    match.update(0.05)

    assert attacker.score.lines == 2
    assert defender.board.filled_count() == WIDTH - 1
    assert defender.fall_timer == pytest.approx(0.05)
    assert not match.match_over


def test_single_player_match_ends_on_top_out() -> None:
    match = Match(GameMode.ONE_PLAYER, config=GameConfig(seed=4))
    _ready(match)
    for y in range(22, 40):
        match.players[0].board.place_cell(4, y, 1)

    match.hard_drop(0)

    assert match.players[0].game_over
    assert match.match_over
    assert match.winner is None
    assert MatchOver(None) in match.drain_events()
    assert match.move_left(0) is False


def test_pause_freezes_and_resume_restarts_countdown() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=5))
    _ready(match)
    player = match.player(0)

    match.pause()
    assert player.paused
    match.update(0.05)
    assert player.fall_timer == 0.0
    assert match.move_left(0) is False
    assert match.press(0, Action.HARD_DROP) is False

    match.toggle_pause()
    assert not match.paused
    assert player.countdown_remaining == 3
    assert match.move_left(0) is False


def test_update_clamps_large_steps() -> None:
    match = Match(GameMode.ONE_PLAYER, config=GameConfig(seed=6))
    _ready(match)
    match.update(5.0)
    assert match.player(0).fall_timer == pytest.approx(match.config.max_dt)
    match.update(0.0)
    match.update(-1.0)
    assert match.player(0).fall_timer == pytest.approx(match.config.max_dt)


def test_invalid_player_index_is_ignored() -> None:
    match = Match(GameMode.ONE_PLAYER, config=GameConfig(seed=7))
    _ready(match)
    assert match.player(-1) is None
    assert match.snapshot(5) is None
    assert match.move_left(5) is False
    assert match.rotate(3) is False
    assert match.hard_drop(3) is False
    assert match.hold(2) is False
    assert match.press(9, Action.HOLD) is False
    match.release(9, Action.MOVE_LEFT)


def test_restart_resets_every_player() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=8))
    _ready(match)
    match.players[0].board.place_cell(0, 39, 1)
    match.hard_drop(1)

    match.restart()

    assert not match.match_over
    for player in match.players:
        assert player.board.filled_count() == 0
        assert player.countdown_remaining == 3
        assert player.pieces == 0
    assert match.drain_events() == []


def test_snapshot_exposes_view() -> None:
    match = Match(GameMode.TWO_PLAYER, config=GameConfig(seed=9))
    view = match.snapshot(1)
    assert view.index == 1
    assert view.countdown_remaining == 3
    assert len(view.preview) == match.config.preview_size
