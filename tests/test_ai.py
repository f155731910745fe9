from __future__ import annotations

import logging

import pytest

from tetris_versus.ai import (
    HeuristicWeights,
    Placement,
    enumerate_placements,
    evaluate_board,
    find_best_placement,
    plan_actions,
)
from tetris_versus.board import WIDTH, Board
from tetris_versus.config import GameConfig
from tetris_versus.controllers import Action
from tetris_versus.events import GarbageSent
from tetris_versus.match import GameMode, Match
from tetris_versus.tetromino import Tetromino, TetrominoType


def _well_board() -> Board:
    board = Board()
    for y in range(36, 40):
        for x in range(WIDTH - 1):
            board.place_cell(x, y, 1)
    return board


def test_planner_takes_the_four_line_clear(caplog: pytest.LogCaptureFixture) -> None:
    board = _well_board()
    before = board.copy()
    piece = Tetromino.spawn(TetrominoType.I)

    with caplog.at_level(logging.DEBUG, logger="tetris_versus.ai"):
        best = find_best_placement(board, piece, HeuristicWeights())

    assert best is not None
    assert (best.rotation, best.column, best.lines) == (1, 9, 4)
    assert best.score == pytest.approx(4 * HeuristicWeights().lines)
    assert board == before
    assert piece == Tetromino.spawn(TetrominoType.I)
    assert "Chose rotation 1 column 9" in caplog.text


def test_o_piece_is_only_tried_in_its_current_rotation() -> None:
    placements = enumerate_placements(Board(), Tetromino.spawn(TetrominoType.O))
    assert {p.rotation for p in placements} == {0}
    assert [p.column for p in placements] == list(range(0, WIDTH - 1))


def test_every_rotation_and_column_is_enumerated() -> None:
    placements = enumerate_placements(Board(), Tetromino.spawn(TetrominoType.T))
    assert len(placements) == 8 + 9 + 8 + 9
    assert [p.rotation for p in placements] == sorted(p.rotation for p in placements)


def test_ties_keep_the_first_candidate() -> None:
    flat = HeuristicWeights(lines=0.0, height=0.0, holes=0.0, bumpiness=0.0)
    best = find_best_placement(Board(), Tetromino.spawn(TetrominoType.T), flat)
    assert (best.rotation, best.column) == (0, 1)


def test_blocked_start_positions_are_skipped() -> None:
    board = Board()
    for x in range(WIDTH):
        for y in range(20, 40):
            board.place_cell(x, y, 1)
    assert find_best_placement(board, Tetromino.spawn(TetrominoType.L)) is None


def test_evaluate_board_penalises_holes() -> None:
    weights = HeuristicWeights()
    assert evaluate_board(Board(), 0, weights) == 0.0

    board = Board()
    board.place_cell(0, 38, 1)
    expected = weights.height * 2 + weights.holes * 1 + weights.bumpiness * 2
    assert evaluate_board(board, 0, weights) == pytest.approx(expected)


def test_plan_actions_rotates_then_shifts() -> None:
    piece = Tetromino.spawn(TetrominoType.I)
    plan = plan_actions(piece, Placement(rotation=1, column=9, row=37, lines=4, score=0.0))
    assert plan == [Action.ROTATE_CW] + [Action.MOVE_RIGHT] * 5

    turned = Tetromino(TetrominoType.J, rotation=1, x=4, y=20)
    plan = plan_actions(turned, Placement(rotation=0, column=2, row=38, lines=0, score=0.0))
    assert plan == [Action.ROTATE_CW] * 3 + [Action.MOVE_LEFT] * 2

    square = Tetromino.spawn(TetrominoType.O)
    assert plan_actions(square, Placement(0, 4, 38, 0, 0.0)) == []


def test_ai_controller_steers_piece_into_the_well(caplog: pytest.LogCaptureFixture) -> None:
    match = Match(GameMode.PLAYER_VS_AI, config=GameConfig(seed=0, ai_think_delay=0.0))
    for player in match.players:
        player.countdown_timer = 0.0
    ai_player = match.player(1)
    ai_player.board = _well_board()
    ai_player.active = Tetromino.spawn(TetrominoType.I)
    controller = match.controller(1)

    with caplog.at_level(logging.DEBUG, logger="tetris_versus.ai"):
        controller.update(0.01)
        assert (ai_player.active.rotation, ai_player.active.x) == (1, 9)
        controller.update(0.01)
        controller.update(0.01)
    assert caplog.text.count("Chose rotation") == 1

    assert match.hard_drop(1)
    assert ai_player.score.lines == 4
    assert GarbageSent(1, 4) in match.drain_events()
    assert match.press(1, Action.HARD_DROP) is False


def test_ai_controller_replans_when_off_target() -> None:
    match = Match(GameMode.PLAYER_VS_AI, config=GameConfig(seed=0, ai_think_delay=0.25))
    for player in match.players:
        player.countdown_timer = 0.0
    ai_player = match.player(1)
    ai_player.active = Tetromino.spawn(TetrominoType.I)
    controller = match.controller(1)

    controller.update(0.125)
    assert ai_player.active.x == 4
    controller.update(0.125)
    assert (ai_player.active.rotation, ai_player.active.x) == (0, 1)

    # Knocked off course: the next plan only comes after another delay.
    ai_player.active.x = 3
    controller.update(0.125)
    assert ai_player.active.x == 3
    controller.update(0.125)
    assert ai_player.active.x == 1


def test_default_think_delay_is_one_second() -> None:
    assert GameConfig().ai_think_delay == 1.0
