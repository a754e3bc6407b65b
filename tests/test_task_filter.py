# tests/test_task_filter.py

from __future__ import annotations

import pytest

from taskpad.tasks.task_filter import apply_filter
from taskpad.tasks.task_models import Task, TaskFilter


@pytest.fixture()
def tasks() -> list[Task]:
    return [
        Task(id=1, text="a", completed=False),
        Task(id=2, text="b", completed=True),
        Task(id=3, text="c", completed=False),
        Task(id=4, text="d", completed=True),
    ]


def test_all_passes_everything_in_order(tasks) -> None:
    out = apply_filter(tasks, TaskFilter.ALL)

    assert out == tasks
    assert out is not tasks


def test_active_and_completed_partition_all(tasks) -> None:
    active = apply_filter(tasks, TaskFilter.ACTIVE)
    completed = apply_filter(tasks, TaskFilter.COMPLETED)

    assert [t.id for t in active] == [1, 3]
    assert [t.id for t in completed] == [2, 4]
    assert {t.id for t in active} | {t.id for t in completed} == {t.id for t in tasks}
    assert not {t.id for t in active} & {t.id for t in completed}


def test_filter_does_not_mutate_source(tasks) -> None:
    snapshot = [(t.id, t.completed) for t in tasks]

    apply_filter(tasks, "active")
    apply_filter(tasks, "completed")

    assert [(t.id, t.completed) for t in tasks] == snapshot


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("active", TaskFilter.ACTIVE), (" Completed ", TaskFilter.COMPLETED), ("bogus", TaskFilter.ALL), (None, TaskFilter.ALL)],
)
def test_filter_from_raw(raw, expected) -> None:
    assert TaskFilter.from_raw(raw) == expected
