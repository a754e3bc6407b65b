# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.cli.bootstrap import create_initial_state
from taskpad.core.state import AppState
from taskpad.core.timers import TimerScheduler
from taskpad.tasks.task_persistence import TaskPersistence
from taskpad.tasks.task_store import TaskStore

from .fakes import CountingKeyValueStore, FakeConfirmGate, VirtualClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.sqlite3",
        storage_key="tasks",
        suggestion_limit=5,
        clear_confirm_threshold=3,
        clear_stagger_ms=100,
        clear_animation_ms=1200,
        clear_mode="snapshot",
        effects_enabled=True,
        max_falling_chars=50,
        falling_char_lifetime_ms=3000,
        falling_char_stagger_ms=50,
        viewport_width=800,
        timer_interval_seconds=0.01,
    )


@pytest.fixture()
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture()
def scheduler(clock: VirtualClock) -> TimerScheduler:
    return TimerScheduler(clock)


@pytest.fixture()
def kv() -> CountingKeyValueStore:
    return CountingKeyValueStore()


@pytest.fixture()
def gate() -> FakeConfirmGate:
    return FakeConfirmGate(answer=True)


@pytest.fixture()
def make_store(
    kv: CountingKeyValueStore,
    scheduler: TimerScheduler,
    gate: FakeConfirmGate,
) -> Callable[..., TaskStore]:
    """
    TaskStore factory over the shared fakes; keyword args go to TaskStore.
    """

    def factory(**kwargs) -> TaskStore:
        return TaskStore(TaskPersistence(kv), scheduler, gate, **kwargs)

    return factory


@pytest.fixture()
def store(make_store: Callable[..., TaskStore]) -> TaskStore:
    return make_store()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    kv: CountingKeyValueStore,
    clock: VirtualClock,
    gate: FakeConfirmGate,
) -> AppState:
    """
    AppState wired through the real composition root with deterministic fakes.
    """
    return create_initial_state(settings=settings, confirm_gate=gate, kv=kv, clock=clock)
