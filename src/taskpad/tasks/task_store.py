# src/taskpad/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..core.ports import ChangeListener, ConfirmGate
from ..core.timers import ScheduledCall, TimerScheduler
from .task_models import ClearMode, Task, iso_timestamp
from .task_persistence import TaskPersistence

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this task?"
CLEAR_PROMPT = "Are you sure you want to clear {n} completed tasks?"

RemovingHook = Callable[[Task, int], None]


@dataclass(slots=True)
class ClearRequest:
    """
    Handle for a scheduled clear-completed sweep.

    - task_ids: the completed ids captured when the clear was requested
    - fires_at_ms: scheduler time at which the sweep runs
    - removed_ids: filled in once the sweep has fired
    """

    task_ids: tuple[int, ...]
    mode: ClearMode
    fires_at_ms: float
    calls: list[ScheduledCall] = field(default_factory=list, repr=False)
    removed_ids: tuple[int, ...] | None = None

    @property
    def done(self) -> bool:
        return self.removed_ids is not None

    @property
    def cancelled(self) -> bool:
        return bool(self.calls) and self.calls[-1].cancelled

    def cancel(self) -> bool:
        """Cancel the sweep (and pending stagger steps). No-op once the sweep fired."""
        if self.done or not self.calls:
            return False
        sweep_cancelled = self.calls[-1].cancel()
        for call in self.calls[:-1]:
            call.cancel()
        if sweep_cancelled:
            logger.info("Clear of %d completed tasks cancelled", len(self.task_ids))
        return sweep_cancelled


class TaskStore:
    """
    In-memory task collection, the only mutator of task state.

    Every applied mutation is followed by:
    - a full save through TaskPersistence (synchronous, before returning)
    - a change notification to subscribers

    The one exception is clear_completed(): its removal (and its save) are
    deferred by the stagger/animation delays and fire from the TimerScheduler.
    """

    def __init__(
        self,
        persistence: TaskPersistence,
        scheduler: TimerScheduler,
        confirm_gate: ConfirmGate,
        *,
        clear_confirm_threshold: int = 3,
        clear_stagger_ms: int = 100,
        clear_animation_ms: int = 1200,
        clear_mode: ClearMode | str = ClearMode.SNAPSHOT,
        now_ms: Callable[[], int] | None = None,
    ) -> None:
        self._persistence = persistence
        self._scheduler = scheduler
        self._confirm = confirm_gate
        self._clear_confirm_threshold = max(0, int(clear_confirm_threshold))
        self._clear_stagger_ms = max(0, int(clear_stagger_ms))
        self._clear_animation_ms = max(0, int(clear_animation_ms))
        self._clear_mode = clear_mode if isinstance(clear_mode, ClearMode) else ClearMode.from_raw(clear_mode)
        self._now_ms = now_ms or (lambda: int(time.time() * 1000))

        self._tasks: list[Task] = persistence.load()
        self._last_id = max((t.id for t in self._tasks), default=0)
        self._listeners: list[ChangeListener] = []
        self._removing_hooks: list[RemovingHook] = []

        logger.info("TaskStore ready total=%d clear_mode=%s", len(self._tasks), self._clear_mode.value)

    # ---- queries ----

    @property
    def clear_mode(self) -> ClearMode:
        return self._clear_mode

    def get_tasks(self) -> list[Task]:
        """Snapshot copy of the ordered collection."""
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def counts(self) -> tuple[int, int]:
        """(active, total)"""
        active = sum(1 for t in self._tasks if not t.completed)
        return active, len(self._tasks)

    # ---- listeners ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_task_removing(self, hook: RemovingHook) -> None:
        """Register a hook fired for each task as its staggered removal starts."""
        self._removing_hooks.append(hook)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("TaskStore change listener failed")

    def _commit(self) -> None:
        self._persistence.save(self._tasks)
        self._notify()

    # ---- mutations ----

    def _allocate_id(self) -> int:
        tid = int(self._now_ms())
        if tid <= self._last_id:
            tid = self._last_id + 1
        self._last_id = tid
        return tid

    def create(self, text: str | None) -> Task | None:
        clean = (text or "").strip()
        if not clean:
            logger.debug("create ignored: empty text")
            return None

        task = Task(id=self._allocate_id(), text=clean, completed=False, created_at=iso_timestamp())
        self._tasks.append(task)
        logger.debug("Task created id=%s", task.id)
        self._commit()
        return task

    def toggle(self, task_id: int) -> bool:
        task = self.get(task_id)
        if task is None:
            logger.debug("toggle ignored: unknown id=%s", task_id)
            return False

        task.completed = not task.completed
        logger.debug("Task id=%s completed=%s", task_id, task.completed)
        self._commit()
        return True

    def edit(self, task_id: int, new_text: str | None) -> bool:
        """Replace the text if it is non-empty and actually different. Returns True if changed."""
        task = self.get(task_id)
        if task is None:
            logger.debug("edit ignored: unknown id=%s", task_id)
            return False

        clean = (new_text or "").strip()
        if not clean or clean == task.text:
            logger.debug("edit discarded id=%s", task_id)
            return False

        task.text = clean
        logger.debug("Task id=%s text edited", task_id)
        self._commit()
        return True

    def delete(self, task_id: int) -> bool:
        if self.get(task_id) is None:
            logger.debug("delete ignored: unknown id=%s", task_id)
            return False

        if not self._confirm.confirm(DELETE_PROMPT):
            logger.info("Delete of task id=%s declined", task_id)
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.debug("Task id=%s deleted", task_id)
        self._commit()
        return True

    def clear_completed(self) -> ClearRequest | None:
        """
        Schedule removal of all completed tasks.

        - nothing completed -> None, no prompt
        - more than clear_confirm_threshold completed -> confirmation gate; declined -> None
        - otherwise: one stagger step per task (i * clear_stagger_ms), then a single
          atomic sweep at n * clear_stagger_ms + clear_animation_ms
        """
        completed = [t for t in self._tasks if t.completed]
        n = len(completed)
        if n == 0:
            return None

        if n > self._clear_confirm_threshold and not self._confirm.confirm(CLEAR_PROMPT.format(n=n)):
            logger.info("Clear of %d completed tasks declined", n)
            return None

        sweep_delay = n * self._clear_stagger_ms + self._clear_animation_ms
        request = ClearRequest(
            task_ids=tuple(t.id for t in completed),
            mode=self._clear_mode,
            fires_at_ms=self._scheduler.now_ms() + sweep_delay,
        )

        for index, task in enumerate(completed):
            request.calls.append(
                self._scheduler.call_later(
                    index * self._clear_stagger_ms,
                    lambda task=task, index=index: self._start_removing(task, index),
                    label=f"clear-stagger:{task.id}",
                )
            )

        request.calls.append(
            self._scheduler.call_later(sweep_delay, lambda: self._sweep(request), label="clear-sweep")
        )

        logger.info(
            "Clear of %d completed tasks scheduled in %dms (mode=%s)",
            n,
            sweep_delay,
            request.mode.value,
        )
        return request

    def _start_removing(self, task: Task, index: int) -> None:
        for hook in list(self._removing_hooks):
            try:
                hook(task, index)
            except Exception:
                logger.exception("Removing hook failed task_id=%s", task.id)

    def _sweep(self, request: ClearRequest) -> None:
        if request.mode == ClearMode.RECOMPUTE:
            doomed = {t.id for t in self._tasks if t.completed}
        else:
            doomed = set(request.task_ids)

        kept: list[Task] = []
        removed: list[int] = []
        for task in self._tasks:
            if task.id in doomed:
                removed.append(task.id)
            else:
                kept.append(task)

        self._tasks = kept
        request.removed_ids = tuple(removed)
        logger.info("Cleared %d completed tasks (mode=%s)", len(removed), request.mode.value)
        self._commit()
