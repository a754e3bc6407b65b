# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every tunable has a sane default, so the app runs with an empty environment.
- Components receive settings explicitly (tests pass a SimpleNamespace).

Environment variables (all optional):
- TASKPAD_APP_NAME, TASKPAD_LOG_LEVEL
- TASKPAD_DATA_DIR, TASKPAD_STORAGE_PATH, TASKPAD_STORAGE_KEY
- TASKPAD_SUGGESTION_LIMIT
- TASKPAD_CLEAR_CONFIRM_THRESHOLD, TASKPAD_CLEAR_STAGGER_MS,
  TASKPAD_CLEAR_ANIMATION_MS, TASKPAD_CLEAR_MODE (snapshot | recompute)
- TASKPAD_EFFECTS_ENABLED, TASKPAD_MAX_FALLING_CHARS,
  TASKPAD_FALLING_CHAR_LIFETIME_MS, TASKPAD_FALLING_CHAR_STAGGER_MS,
  TASKPAD_VIEWPORT_WIDTH
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKPAD"

CLEAR_MODES = ("snapshot", "recompute")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path
    storage_key: str

    # ---- Suggestions ----
    suggestion_limit: int

    # ---- Clear completed ----
    clear_confirm_threshold: int
    clear_stagger_ms: int
    clear_animation_ms: int
    clear_mode: str

    # ---- Falling characters ----
    effects_enabled: bool
    max_falling_chars: int
    falling_char_lifetime_ms: int
    falling_char_stagger_ms: int
    viewport_width: int

    # ---- Timers ----
    timer_interval_seconds: float = 0.05

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            storage_key=storage_key,
            suggestion_limit=_env_int(_k("SUGGESTION_LIMIT"), 5, minimum=1),
            clear_confirm_threshold=_env_int(_k("CLEAR_CONFIRM_THRESHOLD"), 3, minimum=0),
            clear_stagger_ms=_env_int(_k("CLEAR_STAGGER_MS"), 100, minimum=0),
            clear_animation_ms=_env_int(_k("CLEAR_ANIMATION_MS"), 1200, minimum=0),
            clear_mode=_env_choice(_k("CLEAR_MODE"), CLEAR_MODES, "snapshot"),
            effects_enabled=_env_bool(_k("EFFECTS_ENABLED"), True),
            max_falling_chars=_env_int(_k("MAX_FALLING_CHARS"), 50, minimum=0),
            falling_char_lifetime_ms=_env_int(_k("FALLING_CHAR_LIFETIME_MS"), 3000, minimum=0),
            falling_char_stagger_ms=_env_int(_k("FALLING_CHAR_STAGGER_MS"), 50, minimum=0),
            viewport_width=_env_int(_k("VIEWPORT_WIDTH"), 1280, minimum=1),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
