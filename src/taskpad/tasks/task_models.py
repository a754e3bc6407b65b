# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class TaskFilter(StrEnum):
    """
    View selector for the task list.

    Notes:
    - never persisted; every session starts at ALL
    - unknown names resolve to ALL (the list falls back to "show everything")
    """

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except Exception:
            return cls.ALL


class ClearMode(StrEnum):
    """
    Which tasks the deferred clear-completed sweep removes.

    SNAPSHOT: the ids that were completed when the clear was requested.
    RECOMPUTE: whatever is completed at the moment the sweep fires.
    """

    SNAPSHOT = "snapshot"
    RECOMPUTE = "recompute"

    @classmethod
    def from_raw(cls, raw: str | None) -> ClearMode:
        if not raw:
            return cls.SNAPSHOT
        try:
            return cls(raw.strip().lower())
        except Exception:
            return cls.SNAPSHOT


def iso_timestamp(dt: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix (2024-05-01T10:00:00.000Z)."""
    if dt is None:
        dt = datetime.now(timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool = False
    created_at: str = ""

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, raw: Any) -> Task | None:
        """Build a Task from a stored record; None if the record is unusable."""
        if not isinstance(raw, dict):
            return None

        tid = raw.get("id")
        # bool is an int subclass; a stored `true` is not an id.
        if isinstance(tid, bool) or not isinstance(tid, (int, float)):
            return None
        if isinstance(tid, float) and not tid.is_integer():
            return None

        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            return None

        completed = raw.get("completed")
        created_at = raw.get("createdAt")
        return cls(
            id=int(tid),
            text=text,
            completed=completed if isinstance(completed, bool) else False,
            created_at=created_at if isinstance(created_at, str) else "",
        )
