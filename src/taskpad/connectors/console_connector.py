# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_view
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleConfirmGate:
    """y/N prompt on stdin. Anything but an explicit yes (or EOF) counts as "no"."""

    def __init__(self, input_fn: InputFn = input) -> None:
        self._input = input_fn

    def confirm(self, message: str) -> bool:
        try:
            answer = self._input(f"{message} [y/N] ")
        except (EOFError, KeyboardInterrupt):
            print()
            return False
        return answer.strip().lower() in ("y", "yes")


def handle_line(state: AppState, line: str) -> str | None:
    """
    One console line -> reply text.

    - "/command ..." goes to the command registry
    - anything else is typed into the task input and Enter is pressed
    """
    cmd_response = command_registry.handle(state, line, emit=_print_ts)
    if cmd_response is not None:
        return cmd_response

    app = state.app
    app.set_input(line)
    for ch in line:
        app.type_key(ch)
    task = app.press_enter()
    if task is None:
        return None
    return f"Added #{task.id} {app.get_task_icon(task.text)} {task.text}"


def run_console_loop(state: AppState, input_fn: InputFn = input) -> None:
    logger.info("Console connector started.")
    _print_ts("Type a task and press Enter to add it. Use /help for commands, /exit to quit.\n")
    print(render_view(state.app.build_view()))

    seen_warnings = len(state.warnings)

    while True:
        try:
            user_input = input_fn("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            with state.lock:
                reply = handle_line(state, user_input)
        except Exception:
            logger.exception("Console command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

        if len(state.warnings) > seen_warnings:
            for warning in state.warnings[seen_warnings:]:
                _print_ts(f"[WARN] {warning}")
            seen_warnings = len(state.warnings)

    logger.info("Console connector finished.")
