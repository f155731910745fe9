"""Typed gameplay events for audio/visual collaborators.

The core appends events to an :class:`EventQueue` as they happen.  Observers
drain the queue once per tick; nothing in the simulation depends on the events
being consumed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union


class BlockedKind(str, Enum):
    MOVE = "move"
    ROTATE = "rotate"


@dataclass(frozen=True)
class PieceLocked:
    player: int


@dataclass(frozen=True)
class LinesCleared:
    player: int
    count: int
    rows: Tuple[int, ...] = ()


@dataclass(frozen=True)
class LevelUp:
    player: int
    level: int


@dataclass(frozen=True)
class GarbageSent:
    player: int
    lines: int


@dataclass(frozen=True)
class GarbageReceived:
    player: int
    lines: int


@dataclass(frozen=True)
class GameOver:
    player: int


@dataclass(frozen=True)
class MatchOver:
    winner: Optional[int]


@dataclass(frozen=True)
class Blocked:
    player: int
    kind: BlockedKind


Event = Union[
    PieceLocked,
    LinesCleared,
    LevelUp,
    GarbageSent,
    GarbageReceived,
    GameOver,
    MatchOver,
    Blocked,
]


class EventQueue:
    """First-in first-out buffer of :data:`Event` values."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def emit(self, event: Event) -> None:
        self._events.append(event)

    def drain(self) -> List[Event]:
        """Return every pending event and empty the queue."""

        events, self._events = self._events, []
        return events

    def clear(self) -> None:
        self._events.clear()


__all__ = [
    "BlockedKind",
    "Blocked",
    "Event",
    "EventQueue",
    "GameOver",
    "GarbageReceived",
    "GarbageSent",
    "LevelUp",
    "LinesCleared",
    "MatchOver",
    "PieceLocked",
]
