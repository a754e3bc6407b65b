# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskpad.cli.bootstrap import create_initial_state, flush_pending
from taskpad.config import Settings
from taskpad.logging_setup import _ConsoleNoiseFilter, setup_logging
from taskpad.tasks.task_models import ClearMode

from .fakes import FakeConfirmGate


def test_defaults_with_empty_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATA_DIR", "STORAGE_PATH", "CLEAR_MODE", "SUGGESTION_LIMIT", "EFFECTS_ENABLED"):
        monkeypatch.delenv(f"TASKPAD_{name}", raising=False)

    s = Settings.from_env()

    assert s.app_name == "taskpad"
    assert s.storage_path == Path(".local/taskpad") / "storage.sqlite3"
    assert s.storage_key == "tasks"
    assert s.suggestion_limit == 5
    assert s.clear_confirm_threshold == 3
    assert (s.clear_stagger_ms, s.clear_animation_ms) == (100, 1200)
    assert s.clear_mode == "snapshot"
    assert s.effects_enabled is True
    assert s.max_falling_chars == 50


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKPAD_SUGGESTION_LIMIT", "3")
    monkeypatch.setenv("TASKPAD_CLEAR_MODE", "RECOMPUTE")
    monkeypatch.setenv("TASKPAD_EFFECTS_ENABLED", "off")
    monkeypatch.setenv("TASKPAD_CLEAR_STAGGER_MS", "not-a-number")
    monkeypatch.setenv("TASKPAD_MAX_FALLING_CHARS", "-4")

    s = Settings.from_env()

    assert s.storage_path == tmp_path / "storage.sqlite3"
    assert s.suggestion_limit == 3
    assert s.clear_mode == "recompute"
    assert s.effects_enabled is False
    assert s.clear_stagger_ms == 100
    assert s.max_falling_chars == 50


def test_unknown_clear_mode_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKPAD_CLEAR_MODE", "whatever")

    assert Settings.from_env().clear_mode == "snapshot"
    assert ClearMode.from_raw("whatever") == ClearMode.SNAPSHOT


def test_bootstrap_uses_sqlite_storage_and_reloads(settings) -> None:
    gate = FakeConfirmGate()
    first = create_initial_state(settings=settings, confirm_gate=gate)
    first.app.create("survives restart")

    second = create_initial_state(settings=settings, confirm_gate=gate)

    assert settings.storage_path.exists()
    assert [t.text for t in second.app.get_tasks()] == ["survives restart"]


def test_bootstrap_without_effects(settings, kv) -> None:
    settings.effects_enabled = False
    state = create_initial_state(settings=settings, confirm_gate=FakeConfirmGate(), kv=kv)

    assert state.app.effects is None
    assert state.app.type_key("a") is False


def test_flush_pending_lands_deferred_clear(state) -> None:
    task = state.app.create("done soon")
    state.app.toggle(task.id)
    state.app.clear_completed()

    assert flush_pending(state) >= 2
    assert state.app.get_tasks() == []


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("taskpad.tasks.task_store", logging.INFO, True),
        ("taskpad.core.timers", logging.INFO, False),
        ("taskpad.core.timers", logging.WARNING, True),
        ("taskpad.tasks.task_persistence", logging.DEBUG, False),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter_quiets_background_loggers(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert _ConsoleNoiseFilter().filter(record) is shown


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("taskpad.test").info("hello from test")
        for h in root.handlers:
            h.flush()

        assert log_file.exists()
        assert "hello from test" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        logging.captureWarnings(False)
