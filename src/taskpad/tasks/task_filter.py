# src/taskpad/tasks/task_filter.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task, TaskFilter


def apply_filter(tasks: Iterable[Task], task_filter: TaskFilter | str) -> list[Task]:
    """
    Derive the visible subset of tasks.

    Pure: never mutates the source, keeps source order, always returns a new list.
    """
    mode = task_filter if isinstance(task_filter, TaskFilter) else TaskFilter.from_raw(task_filter)

    if mode == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if mode == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)
