# src/taskpad/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.app import TodoView
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_view(view: TodoView) -> str:
    """Plain-text rendering of the task list view-model."""
    lines = [f"[{view.filter.value}] {view.summary}"]
    if view.empty_message:
        lines.append(f"  {view.empty_message}")
    for item in view.items:
        mark = "x" if item.completed else " "
        icon = f"{item.icon} " if item.icon else ""
        flags = ""
        if item.editing:
            flags += " (editing)"
        if item.removing:
            flags += " (removing)"
        lines.append(f"  #{item.id} [{mark}] {icon}{item.text}{flags}")
    return "\n".join(lines)


def render_suggestions(view: TodoView) -> str:
    if view.suggestions is None:
        return "No suggestions."
    lines = ["Suggestions:"]
    for i, phrase in enumerate(view.suggestions.phrases, start=1):
        pointer = ">" if i - 1 == view.suggestions.highlighted_index else " "
        lines.append(f" {pointer} {i}. {phrase}")
    return "\n".join(lines)


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_view(state.app.build_view())


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <text>  -> add a task
    /add         -> add the current input (e.g. after /pick)
    """
    text = " ".join(args) if args else None
    task = state.app.create(text)
    if task is None:
        return "Nothing to add (task text is empty)."
    icon = state.app.get_task_icon(task.text)
    return f"Added #{task.id} {icon} {task.text}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /done <id>"
    if not state.app.toggle(task_id):
        return f"No task #{task_id}."
    task = state.app.store.get(task_id)
    status = "completed" if task is not None and task.completed else "active"
    return f"Task #{task_id} is now {status}."


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /edit <id> <new text>"
    if not state.app.begin_edit(task_id):
        return f"No task #{task_id}."
    if state.app.commit_edit(task_id, " ".join(args[1:])):
        return f"Task #{task_id} updated."
    return f"Task #{task_id} unchanged."


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /rm <id>"
    if state.app.store.get(task_id) is None:
        return f"No task #{task_id}."
    if state.app.delete(task_id):
        return f"Task #{task_id} deleted."
    return "Kept."


def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None) -> str:
    request = state.app.clear_completed()
    if request is None:
        return "Nothing cleared."

    if emit is not None:
        def _announce() -> None:
            if request.done:
                k = len(request.removed_ids or ())
                emit(f"Cleared {k} completed task{'s' if k != 1 else ''}.")

        # same due time as the sweep, queued after it
        delay = max(0.0, request.fires_at_ms - state.scheduler.now_ms())
        state.scheduler.call_later(delay, _announce, label="clear-announce")

    n = len(request.task_ids)
    return f"Clearing {n} completed task{'s' if n != 1 else ''}..."


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Filter is {state.app.filter.value}. Use /filter all|active|completed."
    state.app.set_filter(args[0])
    return render_view(state.app.build_view())


def cmd_suggest(state: AppState, args: list[str]) -> str:
    state.app.set_input(" ".join(args))
    return render_suggestions(state.app.build_view())


def cmd_down(state: AppState, args: list[str]) -> str:
    state.app.navigate("down")
    return render_suggestions(state.app.build_view())


def cmd_up(state: AppState, args: list[str]) -> str:
    state.app.navigate("up")
    return render_suggestions(state.app.build_view())


def cmd_pick(state: AppState, args: list[str]) -> str:
    """
    /pick      -> take the highlighted suggestion
    /pick <n>  -> take suggestion number n
    """
    if args:
        matches = state.app.suggestions.matches
        n = _parse_id(args[0])
        if n is None or not 1 <= n <= len(matches):
            return "No such suggestion."
        phrase = state.app.select(matches[n - 1])
    else:
        picked = state.app.confirm()
        if picked is None:
            return "No suggestion highlighted."
        phrase = picked
    return f"Input: {phrase} (use /add to add it)"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the current filter.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text> (no text: current input).")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <new text>.")
registry.register("rm", cmd_rm, help_text="Delete a task (asks first): /rm <id>.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Clear completed tasks.")
registry.register("filter", cmd_filter, help_text="Set view: /filter all | active | completed.")
registry.register("suggest", cmd_suggest, help_text="Show suggestions: /suggest <text>.")
registry.register("down", cmd_down, help_text="Highlight next suggestion.")
registry.register("up", cmd_up, help_text="Highlight previous suggestion.")
registry.register("pick", cmd_pick, help_text="Use a suggestion: /pick [n].")
