"""Headless ASCII demo for the simulation core.

Run with: `python -m tetris_versus --mode two --ticks 1800`

Every slot is driven by the AI planner at a fixed 60 Hz step; the visible
part of each board is printed when the run ends.  Useful as a smoke test that
the engine, planner and garbage exchange all work together.
"""

from __future__ import annotations

import argparse
import logging

from . import GameConfig, GameMode, Match, render_grid
from .board import BUFFER_HEIGHT, GARBAGE_TILE

STEP = 1.0 / 60.0

MODES = {
    "one": GameMode.ONE_PLAYER,
    "two": GameMode.TWO_PLAYER,
    "ai": GameMode.PLAYER_VS_AI,
}


def _print_grid(grid: list[list[int]]) -> None:
    for row in grid[BUFFER_HEIGHT:]:
        print("".join("." if not cell else ("x" if cell == GARBAGE_TILE else "#") for cell in row))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--mode", choices=sorted(MODES), default="two")
    parser.add_argument("--ticks", type=int, default=1800)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    mode = MODES[args.mode]
    match = Match(
        mode,
        config=GameConfig(seed=args.seed),
        ai_players=range(mode.player_count),
    )
    for _ in range(args.ticks):
        match.update(STEP)
        match.drain_events()
        if match.match_over:
            break

    for player in match.players:
        print(f"Player {player.index}: score={player.score.score} "
              f"level={player.score.level} lines={player.score.lines} "
              f"game_over={player.game_over}")
        _print_grid(render_grid(player.board, player.active))
        print()


if __name__ == "__main__":
    main()
