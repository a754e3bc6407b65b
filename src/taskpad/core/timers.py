# src/taskpad/core/timers.py

from __future__ import annotations

"""
Deferred callbacks.

A TimerScheduler holds "call this after N ms" entries against an injected Clock:
- call_later() returns a ScheduledCall handle that can be cancelled
- run_due() fires everything whose due time has passed (in due order)
- drain() fires everything still pending, regardless of time (shutdown)

Nothing here sleeps or owns a thread: whoever drives the app decides when
run_due() is called (TimerPump in the console app, the test itself with a
virtual clock in unit tests).
"""

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass

from .ports import Clock

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class MonotonicClock:
    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


@dataclass(slots=True)
class ScheduledCall:
    due_ms: float
    seq: int
    callback: TimerCallback
    label: str = ""
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Cancel if still pending. Returns True if this call prevented a firing."""
        if not self.pending:
            return False
        self.cancelled = True
        return True


class TimerScheduler:
    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or MonotonicClock()
        self._heap: list[tuple[float, int, ScheduledCall]] = []
        self._seq = itertools.count()

    @property
    def clock(self) -> Clock:
        return self._clock

    def now_ms(self) -> float:
        return self._clock.now_ms()

    def call_later(self, delay_ms: float, callback: TimerCallback, *, label: str = "") -> ScheduledCall:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        due = self._clock.now_ms() + float(delay_ms)
        call = ScheduledCall(due_ms=due, seq=next(self._seq), callback=callback, label=label)
        heapq.heappush(self._heap, (call.due_ms, call.seq, call))
        logger.debug("Scheduled %s in %.0fms (seq=%s)", label or "callback", delay_ms, call.seq)
        return call

    def pending_count(self) -> int:
        return sum(1 for _, _, c in self._heap if c.pending)

    def next_due_ms(self) -> float | None:
        self._drop_cancelled_head()
        return self._heap[0][0] if self._heap else None

    def run_due(self) -> int:
        """Fire every pending call that is due now. Returns how many fired."""
        fired = 0
        while True:
            self._drop_cancelled_head()
            if not self._heap or self._heap[0][0] > self._clock.now_ms():
                return fired
            _, _, call = heapq.heappop(self._heap)
            self._fire(call)
            fired += 1

    def drain(self) -> int:
        """Fire everything still pending in due order, ignoring the clock."""
        fired = 0
        while True:
            self._drop_cancelled_head()
            if not self._heap:
                return fired
            _, _, call = heapq.heappop(self._heap)
            self._fire(call)
            fired += 1

    def _drop_cancelled_head(self) -> None:
        while self._heap and not self._heap[0][2].pending:
            heapq.heappop(self._heap)

    @staticmethod
    def _fire(call: ScheduledCall) -> None:
        call.fired = True
        try:
            call.callback()
        except Exception:
            logger.exception("Timer callback failed (%s seq=%s)", call.label or "callback", call.seq)


class TimerPump:
    """
    Background thread that keeps firing due timers.

    Why a thread:
    - the console REPL is blocking (input())
    - deferred clears/effects must land while the user is not typing

    Every tick runs under `lock` (the same lock the console holds while
    handling a command), so timer callbacks never interleave with commands.
    """

    def __init__(
        self,
        scheduler: TimerScheduler,
        *,
        interval_seconds: float = 0.05,
        lock: AbstractContextManager | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._interval = max(0.005, float(interval_seconds))
        self._lock = lock
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="taskpad-timers", daemon=True)

    def start(self) -> TimerPump:
        self._thread.start()
        logger.info("Timer pump started (interval=%.3fs).", self._interval)
        return self

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout=timeout)

    def tick(self) -> int:
        with self._lock if self._lock is not None else nullcontext():
            return self._scheduler.run_due()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.tick()
            except Exception:
                logger.exception("Timer pump tick failed")
