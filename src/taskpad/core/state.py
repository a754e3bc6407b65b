# src/taskpad/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_persistence import TaskPersistence
from .app import TodoApp
from .timers import TimerScheduler


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    app: TodoApp
    scheduler: TimerScheduler
    persistence: TaskPersistence

    # Held by the console while handling a command and by the timer pump while
    # firing due callbacks.
    lock: threading.RLock = field(default_factory=threading.RLock)

    warnings: list[str] = field(default_factory=list)
