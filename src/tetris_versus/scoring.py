"""Line-clear scoring and level progression."""

from __future__ import annotations

from dataclasses import dataclass

# Points for 0-4 simultaneous line clears, multiplied by the level.
LINE_CLEAR_POINTS = (0, 100, 300, 500, 800)
EXTRA_LINE_POINTS = 400
MAX_LEVEL = 15
LINES_PER_LEVEL = 10


def level_for_lines(lines: int) -> int:
    """Return the level reached after clearing ``lines`` in total."""

    return min(MAX_LEVEL, lines // LINES_PER_LEVEL + 1)


def points_for_lines(lines: int, level: int) -> int:
    """Return the points awarded for clearing ``lines`` at once on ``level``.

    Clears beyond four lines cannot happen with tetrominoes but are scored as a
    Tetris plus ``EXTRA_LINE_POINTS`` for every additional row.
    """

    if lines <= 0:
        return 0
    if lines < len(LINE_CLEAR_POINTS):
        base = LINE_CLEAR_POINTS[lines]
    else:
        base = LINE_CLEAR_POINTS[-1] + (lines - 4) * EXTRA_LINE_POINTS
    return base * level


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of recording one lock's line clears."""

    points: int
    level: int
    level_up: bool


@dataclass
class ScoreTracker:
    """Running score, level and cleared-line total for one player."""

    score: int = 0
    level: int = 1
    lines: int = 0

    def reset(self) -> None:
        self.score = 0
        self.level = 1
        self.lines = 0

    def add_lines(self, cleared: int) -> ScoreResult:
        """Award points for ``cleared`` lines and update the level.

        Points use the level in effect before the clear.
        """

        if cleared <= 0:
            return ScoreResult(points=0, level=self.level, level_up=False)
        points = points_for_lines(cleared, self.level)
        self.score += points
        self.lines += cleared
        previous = self.level
        self.level = level_for_lines(self.lines)
        return ScoreResult(points=points, level=self.level, level_up=self.level > previous)


__all__ = [
    "LINE_CLEAR_POINTS",
    "MAX_LEVEL",
    "LINES_PER_LEVEL",
    "ScoreResult",
    "ScoreTracker",
    "level_for_lines",
    "points_for_lines",
]
