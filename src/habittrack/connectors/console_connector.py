# src/habittrack/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cli.commands import cmd_onboarding
from ..cli.commands import registry as command_registry
from ..core.state import AppState, local_now
from ..notifications.delivery import run_reminder_loop

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleMessenger:
    """OutboundMessenger that prints fired reminders to the terminal."""

    async def send_text(self, *, text: str, title: str | None = None) -> None:
        header = f"[{title}] " if title else ""
        _print_ts(f"\n{header}{text}")


class ReminderLoopRunner:
    """
    Runs run_reminder_loop() on its own event loop in a daemon thread,
    so the blocking console input() does not stall reminders.
    """

    def __init__(self, state: AppState) -> None:
        self._state = state
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._thread = threading.Thread(target=self._run, name="reminder-loop", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        self._loop = loop
        asyncio.set_event_loop(loop)
        interval = float(getattr(self._state.settings, "reminder_poll_seconds", 30.0))
        self._task = loop.create_task(
            run_reminder_loop(
                self._state.notification_center,
                ConsoleMessenger(),
                local_now,
                interval_seconds=interval,
            )
        )
        try:
            loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            logger.debug("Reminder loop cancelled")
        finally:
            loop.close()

    def stop(self) -> None:
        loop, task = self._loop, self._task
        if loop is not None and task is not None and not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout=timeout)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", state.task_store.count())
    app_name = str(getattr(state.settings, "app_name", "HabitTrack"))

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    if not state.app_settings.onboarding_seen:
        with state.lock:
            emit(cmd_onboarding(state, [], emit))

    _print_ts(f"[{app_name}] Use /help for commands, /list to see your tasks, /exit to quit.\n")

    while True:
        try:
            line = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            # Bare text is a shortcut for /add.
            line = "/add " + line

        try:
            with state.lock:
                response = command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(response + "\n", flush=True)

    logger.info("Console connector finished.")
