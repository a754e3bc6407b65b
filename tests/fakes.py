# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


class VirtualClock:
    """
    Manually advanced clock for deterministic timer tests.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float) -> None:
        self._now += float(ms)


@dataclass(slots=True)
class FakeConfirmGate:
    """
    Scripted ConfirmGate: answers with `answer` and records every prompt.
    """

    answer: bool = True
    prompts: list[str] = field(default_factory=list)

    def confirm(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


class FailingKeyValueStore:
    """
    KeyValueStore whose writes always fail (quota exceeded, disk full, ...).
    """

    def __init__(self, initial: str | None = None) -> None:
        self._value = initial
        self.write_attempts = 0

    def get_item(self, key: str) -> str | None:
        return self._value

    def set_item(self, key: str, value: str) -> None:
        self.write_attempts += 1
        raise OSError("quota exceeded")

    def remove_item(self, key: str) -> None:
        self._value = None


class CountingKeyValueStore:
    """
    In-memory KeyValueStore that counts writes.
    """

    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.writes = 0

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
