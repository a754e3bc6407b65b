# src/taskpad/effects/falling_chars.py

from __future__ import annotations

"""
Falling-character input feedback.

Purely decorative: typed keys (and the letters of tasks being cleared) "fall"
across the screen. This module owns the rules (which keys spawn, how many may
be alive at once, how long they live); the presentation layer only draws the
FallingChar view-models returned by active().
"""

import itertools
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

from ..core.timers import TimerScheduler

logger = logging.getLogger(__name__)

PALETTE: tuple[str, ...] = (
    "rgba(255, 255, 255, 0.9)",
    "rgba(255, 200, 200, 0.8)",
    "rgba(200, 255, 200, 0.8)",
    "rgba(200, 200, 255, 0.8)",
    "rgba(255, 255, 150, 0.8)",
    "rgba(255, 150, 255, 0.8)",
    "rgba(150, 255, 255, 0.8)",
)


@dataclass(frozen=True, slots=True)
class FallingChar:
    key: int
    char: str
    x: float
    rotation: float
    color: str
    size: float


class FallingCharEffect:
    def __init__(
        self,
        scheduler: TimerScheduler,
        *,
        max_active: int = 50,
        lifetime_ms: int = 3000,
        stagger_ms: int = 50,
        viewport_width: int = 1280,
        rng: random.Random | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._max_active = max(0, int(max_active))
        self._lifetime_ms = max(0, int(lifetime_ms))
        self._stagger_ms = max(0, int(stagger_ms))
        self._viewport_width = max(1, int(viewport_width))
        self._rng = rng or random.Random()
        self._on_change = on_change
        self._active: dict[int, FallingChar] = {}
        self._keys = itertools.count(1)

    def active(self) -> list[FallingChar]:
        return list(self._active.values())

    def active_count(self) -> int:
        return len(self._active)

    def spawn(self, char: str, delay_ms: int = 0) -> bool:
        """
        Request one falling character. Returns False if the request was ignored.

        Typed input (delay 0) must be a single character; key names such as
        "Enter" or "Backspace" never fall. The concurrency cap is checked now,
        at request time, not when the delayed character appears.
        """
        if delay_ms == 0 and len(char) != 1:
            return False
        if len(self._active) >= self._max_active:
            return False

        self._scheduler.call_later(delay_ms, lambda: self._appear(char), label="falling-char")
        return True

    def spawn_from_text(self, text: str) -> int:
        """One falling character per visible letter, staggered. Returns how many were requested."""
        spawned = 0
        for index, char in enumerate(text):
            if not char.strip():
                continue
            if self.spawn(char, index * self._stagger_ms):
                spawned += 1
        return spawned

    def _appear(self, char: str) -> None:
        fc = FallingChar(
            key=next(self._keys),
            char=char,
            x=self._rng.random() * self._viewport_width,
            rotation=self._rng.random() * 360,
            color=self._rng.choice(PALETTE),
            size=20 + self._rng.random() * 15,
        )
        self._active[fc.key] = fc
        self._scheduler.call_later(self._lifetime_ms, lambda: self._vanish(fc.key), label="falling-char-end")
        self._changed()

    def _vanish(self, key: int) -> None:
        if self._active.pop(key, None) is not None:
            self._changed()

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change()
        except Exception:
            logger.exception("Falling-char change callback failed")
