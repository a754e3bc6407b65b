# tests/test_clear_completed.py

from __future__ import annotations

from taskpad.tasks.task_models import ClearMode
from taskpad.tasks.task_store import CLEAR_PROMPT


def _seed(store, texts: list[str], completed: list[int]) -> list[int]:
    ids = [store.create(t).id for t in texts]
    for i in completed:
        store.toggle(ids[i])
    return ids


def test_nothing_completed_is_a_noop_without_prompt(store, gate, kv, scheduler) -> None:
    _seed(store, ["a", "b"], completed=[])
    writes = kv.writes

    assert store.clear_completed() is None

    assert gate.prompts == []
    assert scheduler.pending_count() == 0
    assert kv.writes == writes


def test_small_batch_needs_no_confirmation(store, gate) -> None:
    _seed(store, ["a", "b", "c", "d"], completed=[0, 1, 2])

    assert store.clear_completed() is not None
    assert gate.prompts == []


def test_large_batch_asks_with_count(store, gate) -> None:
    _seed(store, ["a", "b", "c", "d", "e"], completed=[0, 1, 2, 3])

    assert store.clear_completed() is not None
    assert gate.prompts == [CLEAR_PROMPT.format(n=4)]


def test_declined_large_batch_changes_nothing(store, gate, scheduler) -> None:
    _seed(store, ["a", "b", "c", "d", "e"], completed=[0, 1, 2, 3])
    gate.answer = False

    assert store.clear_completed() is None
    assert scheduler.pending_count() == 0
    assert len(store.get_tasks()) == 5


def test_removal_is_deferred_then_atomic(store, clock, scheduler, kv) -> None:
    ids = _seed(store, ["a", "b", "c"], completed=[0, 2])
    writes = kv.writes

    request = store.clear_completed()

    # 2 tasks * 100ms stagger + 1200ms animation
    assert request.fires_at_ms == 1400
    assert request.task_ids == (ids[0], ids[2])

    clock.advance(1399)
    scheduler.run_due()
    assert len(store.get_tasks()) == 3
    assert kv.writes == writes

    clock.advance(1)
    scheduler.run_due()
    assert [t.id for t in store.get_tasks()] == [ids[1]]
    assert request.removed_ids == (ids[0], ids[2])
    # one save for the whole sweep
    assert kv.writes == writes + 1


def test_stagger_steps_fire_100ms_apart(store, clock, scheduler) -> None:
    ids = _seed(store, ["a", "b", "c"], completed=[0, 1, 2])
    started: list[tuple[int, float]] = []
    store.on_task_removing(lambda task, index: started.append((task.id, clock.now_ms())))

    store.clear_completed()
    for _ in range(3):
        scheduler.run_due()
        clock.advance(100)

    assert started == [(ids[0], 0), (ids[1], 100), (ids[2], 200)]


def test_snapshot_mode_removes_what_was_completed_at_request_time(make_store, clock, scheduler) -> None:
    store = make_store(clear_mode=ClearMode.SNAPSHOT)
    a, b, c = _seed(store, ["a", "b", "c"], completed=[0, 1])

    store.clear_completed()
    # Meanwhile: b is un-completed, c is completed.
    store.toggle(b)
    store.toggle(c)

    clock.advance(10_000)
    scheduler.run_due()

    assert [t.id for t in store.get_tasks()] == [c]


def test_recompute_mode_removes_what_is_completed_when_the_sweep_fires(make_store, clock, scheduler) -> None:
    store = make_store(clear_mode="recompute")
    a, b, c = _seed(store, ["a", "b", "c"], completed=[0, 1])

    store.clear_completed()
    store.toggle(b)
    store.toggle(c)

    clock.advance(10_000)
    scheduler.run_due()

    assert [t.id for t in store.get_tasks()] == [b]


def test_snapshot_sweep_tolerates_tasks_deleted_meanwhile(store, clock, scheduler) -> None:
    a, b, c = _seed(store, ["a", "b", "c"], completed=[0, 1])

    request = store.clear_completed()
    store.delete(a)

    clock.advance(10_000)
    scheduler.run_due()

    assert [t.id for t in store.get_tasks()] == [c]
    assert request.removed_ids == (b,)


def test_cancelled_clear_leaves_collection_untouched(store, clock, scheduler, kv) -> None:
    _seed(store, ["a", "b"], completed=[0, 1])
    writes = kv.writes

    request = store.clear_completed()
    assert request.cancel() is True
    assert request.cancelled is True

    clock.advance(10_000)
    assert scheduler.run_due() == 0
    assert len(store.get_tasks()) == 2
    assert kv.writes == writes
    assert request.done is False


def test_cancel_after_sweep_is_a_noop(store, clock, scheduler) -> None:
    _seed(store, ["a"], completed=[0])

    request = store.clear_completed()
    clock.advance(10_000)
    scheduler.run_due()

    assert request.done is True
    assert request.cancel() is False
    assert store.get_tasks() == []


def test_drain_lands_a_pending_clear(store, scheduler) -> None:
    _seed(store, ["a", "b"], completed=[1])

    store.clear_completed()
    scheduler.drain()

    assert [t.text for t in store.get_tasks()] == ["a"]
