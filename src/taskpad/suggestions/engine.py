# src/taskpad/suggestions/engine.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5

DEFAULT_CORPUS: tuple[str, ...] = (
    "Buy groceries",
    "Call mom",
    "Go to gym",
    "Study for exam",
    "Finish project",
    "Schedule meeting",
    "Pay bills",
    "Clean the house",
    "Cook dinner",
    "Read a book",
    "Do laundry",
    "Visit doctor",
    "Send email",
    "Plan vacation",
    "Exercise",
    "Write report",
    "Attend meeting",
    "Fix car",
    "Water plants",
    "Walk the dog",
)


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"


class SuggestionEngine:
    """
    Autocomplete panel state machine (closed <-> open).

    - show(text): substring match against the corpus, first `limit` hits in corpus order
    - navigate(up/down): moves the highlight, clamped to [-1, len-1]; -1 = nothing highlighted
    - confirm(): returns the highlighted phrase and closes (None if nothing is highlighted)
    - select(phrase): same as confirm() for an explicitly picked phrase
    - hide(): closes and forgets the matches
    """

    def __init__(self, corpus: Sequence[str] = DEFAULT_CORPUS, *, limit: int = DEFAULT_LIMIT) -> None:
        self._corpus: tuple[str, ...] = tuple(corpus)
        self._limit = max(1, int(limit))
        self._matches: list[str] = []
        self._index = -1
        self._open = False

    # ---- state ----

    @property
    def corpus(self) -> tuple[str, ...]:
        return self._corpus

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def matches(self) -> list[str]:
        return list(self._matches)

    @property
    def selected_index(self) -> int:
        return self._index

    @property
    def highlighted(self) -> str | None:
        if self._open and 0 <= self._index < len(self._matches):
            return self._matches[self._index]
        return None

    # ---- transitions ----

    def find(self, text: str) -> list[str]:
        """Matching phrases for `text` (pure; does not touch panel state)."""
        needle = (text or "").strip().lower()
        if not needle:
            return []
        hits = [phrase for phrase in self._corpus if needle in phrase.lower()]
        return hits[: self._limit]

    def show(self, text: str) -> list[str]:
        hits = self.find(text)
        if not hits:
            self.hide()
            return []

        self._matches = hits
        self._index = -1
        self._open = True
        return list(hits)

    def navigate(self, direction: Direction | str) -> int:
        step = Direction(direction.strip().lower() if isinstance(direction, str) else direction)
        if not self._open:
            return self._index

        if step == Direction.DOWN:
            self._index = min(self._index + 1, len(self._matches) - 1)
        else:
            self._index = max(self._index - 1, -1)
        return self._index

    def confirm(self) -> str | None:
        phrase = self.highlighted
        if phrase is None:
            return None
        return self.select(phrase)

    def select(self, phrase: str) -> str:
        logger.debug("Suggestion picked: %s", phrase)
        self.hide()
        return phrase

    def hide(self) -> None:
        self._matches = []
        self._index = -1
        self._open = False
