# src/taskpad/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the timer pump in a background
thread, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state, flush_pending
from ..config import get_settings
from ..connectors.console_connector import ConsoleConfirmGate, run_console_loop
from ..core.state import AppState
from ..core.timers import TimerPump
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState, pump: TimerPump | None) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if pump is not None:
        try:
            pump.stop()
            pump.join(timeout=2.0)
        except Exception:
            logger.debug("Timer pump stop failed.", exc_info=True)

    # Deferred clears must still land (and be saved) even if we quit mid-animation.
    try:
        flush_pending(state)
    except Exception:
        logger.exception("Failed to flush pending timers.")


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings, confirm_gate=ConsoleConfirmGate())

    pump: TimerPump | None = None
    try:
        pump = TimerPump(
            state.scheduler,
            interval_seconds=settings.timer_interval_seconds,
            lock=state.lock,
        ).start()
    except Exception:
        logger.exception("Failed to start timer pump; deferred actions run at exit.")
        pump = None

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM.
        pass

    try:
        run_console_loop(state)
    finally:
        _shutdown(state, pump)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
