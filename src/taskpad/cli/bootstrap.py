# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (storage, timers, confirmation prompts) into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.app import TodoApp
from ..core.ports import Clock, ConfirmGate, KeyValueStore
from ..core.state import AppState
from ..core.timers import TimerScheduler
from ..effects.falling_chars import FallingCharEffect
from ..suggestions.engine import SuggestionEngine
from ..tasks.task_persistence import SqliteKeyValueStore, TaskPersistence
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    confirm_gate: ConfirmGate,
    settings=None,
    kv: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/storage/clock injectable makes the app easy to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    If kv is None, a SQLite store at settings.storage_path is used.
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SqliteKeyValueStore(settings.storage_path)

    warnings: list[str] = []
    scheduler = TimerScheduler(clock)
    persistence = TaskPersistence(kv, key=settings.storage_key, on_warning=warnings.append)

    store = TaskStore(
        persistence,
        scheduler,
        confirm_gate,
        clear_confirm_threshold=settings.clear_confirm_threshold,
        clear_stagger_ms=settings.clear_stagger_ms,
        clear_animation_ms=settings.clear_animation_ms,
        clear_mode=settings.clear_mode,
    )

    effects = None
    if settings.effects_enabled:
        effects = FallingCharEffect(
            scheduler,
            max_active=settings.max_falling_chars,
            lifetime_ms=settings.falling_char_lifetime_ms,
            stagger_ms=settings.falling_char_stagger_ms,
            viewport_width=settings.viewport_width,
        )

    app = TodoApp(store, SuggestionEngine(limit=settings.suggestion_limit), effects)

    return AppState(
        settings=settings,
        app=app,
        scheduler=scheduler,
        persistence=persistence,
        warnings=warnings,
    )


def flush_pending(state: AppState) -> int:
    """Fire every deferred callback still pending (a scheduled clear always lands)."""
    with state.lock:
        fired = state.scheduler.drain()
    if fired:
        logger.info("Flushed %d pending timers at shutdown.", fired)
    return fired
