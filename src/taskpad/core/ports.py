# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage, prompts and time sources swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

ChangeListener = Callable[[], None]
WarningSink = Callable[[str], None]


class KeyValueStore(Protocol):
    """
    Durable single-slot-per-key string storage (the browser's localStorage, basically).

    set_item() is a full overwrite; the last writer wins.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class ConfirmGate(Protocol):
    """
    Blocking yes/no prompt shown before a destructive action.

    Returning False is a normal outcome (the user declined), not an error.
    """

    def confirm(self, message: str) -> bool: ...


class Clock(Protocol):
    """Monotonic time source in milliseconds (virtual in tests)."""

    def now_ms(self) -> float: ...
