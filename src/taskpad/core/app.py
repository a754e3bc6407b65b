# src/taskpad/core/app.py

from __future__ import annotations

"""
Application facade.

TodoApp is the one state object the presentation layer talks to. It is built
once by the composition root (cli/bootstrap.py) and handed to the connector;
nothing here is a module-level singleton.

The presentation layer:
- calls intent methods (create, toggle, press_enter, navigate, ...)
- re-renders from build_view() whenever a subscribed listener fires
- must draw TaskView.html_text (escaped), never TaskView.text, into markup
"""

import html
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..effects.falling_chars import FallingChar, FallingCharEffect
from ..suggestions.engine import Direction, SuggestionEngine
from ..tasks.task_filter import apply_filter
from ..tasks.task_icons import classify
from ..tasks.task_models import Task, TaskFilter
from ..tasks.task_store import ClearRequest, TaskStore
from .ports import ChangeListener

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskView:
    id: int
    text: str
    html_text: str
    completed: bool
    icon: str | None
    editing: bool
    removing: bool


@dataclass(frozen=True, slots=True)
class SuggestionView:
    phrases: tuple[str, ...]
    highlighted_index: int


@dataclass(frozen=True, slots=True)
class TodoView:
    items: tuple[TaskView, ...]
    filter: TaskFilter
    summary: str
    empty_message: str | None
    input_text: str
    suggestions: SuggestionView | None
    falling_chars: tuple[FallingChar, ...]


def escape_html(text: str) -> str:
    return html.escape(text, quote=True)


class TodoApp:
    def __init__(
        self,
        store: TaskStore,
        suggestions: SuggestionEngine,
        effects: FallingCharEffect | None = None,
        *,
        icon_for: Callable[[str], str] = classify,
    ) -> None:
        self.store = store
        self.suggestions = suggestions
        self.effects = effects
        self._icon_for = icon_for

        self._filter = TaskFilter.ALL
        self._input_text = ""
        self._editing_id: int | None = None
        self._removing_ids: set[int] = set()
        self._listeners: list[ChangeListener] = []

        store.subscribe(self._on_store_changed)
        store.on_task_removing(self._on_task_removing)

    # ---- listeners ----

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("View listener failed")

    def _on_store_changed(self) -> None:
        present = {t.id for t in self.store.get_tasks()}
        self._removing_ids &= present
        if self._editing_id is not None and self._editing_id not in present:
            self._editing_id = None
        self.notify()

    def _on_task_removing(self, task: Task, index: int) -> None:
        self._removing_ids.add(task.id)
        if self.effects is not None:
            self.effects.spawn_from_text(task.text)
        self.notify()

    # ---- queries ----

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def input_text(self) -> str:
        return self._input_text

    @property
    def editing_id(self) -> int | None:
        return self._editing_id

    def get_tasks(self) -> list[Task]:
        return self.store.get_tasks()

    def get_filtered_tasks(self) -> list[Task]:
        return apply_filter(self.store.get_tasks(), self._filter)

    def get_task_icon(self, text: str) -> str:
        return self._icon_for(text)

    def summary(self) -> str:
        active, total = self.store.counts()
        return f"{active} of {total} tasks remaining"

    # ---- task intents ----

    def create(self, text: str | None = None) -> Task | None:
        """Add a task from `text` (or the current input). Clears the input on success."""
        task = self.store.create(self._input_text if text is None else text)
        if task is None:
            return None
        self._input_text = ""
        self.suggestions.hide()
        self.notify()
        return task

    def toggle(self, task_id: int) -> bool:
        return self.store.toggle(task_id)

    def begin_edit(self, task_id: int) -> bool:
        if self.store.get(task_id) is None:
            return False
        self._editing_id = task_id
        self.notify()
        return True

    def commit_edit(self, task_id: int, new_text: str | None) -> bool:
        """Apply the edit (if valid) and always leave edit mode."""
        changed = self.store.edit(task_id, new_text)
        self._end_edit()
        return changed

    def cancel_edit(self) -> None:
        self._end_edit()

    def _end_edit(self) -> None:
        self._editing_id = None
        self.notify()

    def delete(self, task_id: int) -> bool:
        return self.store.delete(task_id)

    def clear_completed(self) -> ClearRequest | None:
        return self.store.clear_completed()

    def set_filter(self, name: TaskFilter | str) -> TaskFilter:
        self._filter = name if isinstance(name, TaskFilter) else TaskFilter.from_raw(name)
        self.notify()
        return self._filter

    # ---- input / suggestion intents ----

    def set_input(self, text: str) -> list[str]:
        """Raw input change: remember the text and refresh the suggestion panel."""
        self._input_text = text
        hits = self.suggestions.show(text)
        self.notify()
        return hits

    def focus_input(self) -> None:
        if self._input_text:
            self.suggestions.show(self._input_text)
            self.notify()

    def show_suggestions(self, text: str) -> list[str]:
        hits = self.suggestions.show(text)
        self.notify()
        return hits

    def navigate(self, direction: Direction | str) -> int:
        index = self.suggestions.navigate(direction)
        self.notify()
        return index

    def confirm(self) -> str | None:
        phrase = self.suggestions.confirm()
        if phrase is not None:
            self._input_text = phrase
            self.notify()
        return phrase

    def select(self, phrase: str) -> str:
        self._input_text = self.suggestions.select(phrase)
        self.notify()
        return phrase

    def hide(self) -> None:
        self.suggestions.hide()
        self.notify()

    def press_enter(self) -> Task | None:
        """
        Enter in the input box:
        - a highlighted suggestion becomes the input (no task is added)
        - otherwise the panel closes and the typed text is added as a task
        """
        if self.confirm() is not None:
            return None
        self.suggestions.hide()
        task = self.create()
        if task is None:
            self.notify()
        return task

    def type_key(self, key: str) -> bool:
        if self.effects is None:
            return False
        return self.effects.spawn(key)

    # ---- view ----

    def build_view(self) -> TodoView:
        items = tuple(
            TaskView(
                id=t.id,
                text=t.text,
                html_text=escape_html(t.text),
                completed=t.completed,
                icon=None if t.completed else self._icon_for(t.text),
                editing=t.id == self._editing_id,
                removing=t.id in self._removing_ids,
            )
            for t in self.get_filtered_tasks()
        )

        empty_message = None
        if not items:
            suffix = "" if self._filter == TaskFilter.ALL else f" ({self._filter.value})"
            empty_message = f"No tasks{suffix}"

        suggestions = None
        if self.suggestions.is_open:
            suggestions = SuggestionView(
                phrases=tuple(self.suggestions.matches),
                highlighted_index=self.suggestions.selected_index,
            )

        return TodoView(
            items=items,
            filter=self._filter,
            summary=self.summary(),
            empty_message=empty_message,
            input_text=self._input_text,
            suggestions=suggestions,
            falling_chars=tuple(self.effects.active()) if self.effects is not None else (),
        )
