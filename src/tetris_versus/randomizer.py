"""Seven-bag piece randomizer with a look-ahead preview."""

from __future__ import annotations

import random
from typing import List, Optional

from .tetromino import TetrominoType

BAG_SIZE = len(TetrominoType)
PREVIEW_SIZE = 3


class BagRandomizer:
    """Deal tetrominoes from shuffled bags of all seven shapes.

    Two bags are kept: the one being dealt from and the one that follows it.
    Every shape appears exactly once per bag, so two occurrences of the same
    shape are never more than twelve draws apart.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._current: List[TetrominoType] = []
        self._next: List[TetrominoType] = []
        self.reset()

    def reset(self) -> None:
        self._current = self._new_bag()
        self._next = self._new_bag()

    def _new_bag(self) -> List[TetrominoType]:
        bag = list(TetrominoType)
        self._rng.shuffle(bag)
        return bag

    @property
    def current_bag(self) -> List[TetrominoType]:
        return list(self._current)

    @property
    def next_bag(self) -> List[TetrominoType]:
        return list(self._next)

    def next_piece(self) -> TetrominoType:
        """Remove and return the next shape."""

        if not self._current:
            self._current = self._next
            self._next = self._new_bag()
        return self._current.pop(0)

    def peek_preview(self, count: int = PREVIEW_SIZE) -> List[TetrominoType]:
        """Return the next ``count`` shapes without consuming them.

        The preview reads the rest of the current bag followed by the head of
        the next bag.  Requests longer than both bags together are clipped.

        Raises:
            ValueError: If ``count`` is negative.
        """

        if count < 0:
            raise ValueError("Preview length must be non-negative")
        preview = self._current[:count]
        if len(preview) < count:
            if not self._next:
                self._next = self._new_bag()
            preview.extend(self._next[: count - len(preview)])
        return preview


__all__ = ["BagRandomizer", "BAG_SIZE", "PREVIEW_SIZE"]
