"""Tunable timing and pacing parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GameConfig:
    """Timing constants for a match.  All durations are in seconds."""

    lock_delay: float = 0.5
    # Gravity runs this many times faster while soft dropping.
    soft_drop_factor: float = 20.0
    # Largest step accepted by ``Match.update``; longer frames are clamped.
    max_dt: float = 0.1
    countdown_seconds: int = 3
    # The countdown ticks this much faster than wall-clock time.
    countdown_speed: float = 1.5
    preview_size: int = 3
    ai_think_delay: float = 1.0
    das_delay: float = 0.15
    arr_interval: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("lock_delay", "soft_drop_factor", "max_dt", "countdown_speed", "arr_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        for name in ("countdown_seconds", "preview_size", "ai_think_delay", "das_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def countdown_duration(self) -> float:
        """Wall-clock length of the pre-play countdown."""

        return self.countdown_seconds / self.countdown_speed


__all__ = ["GameConfig"]
