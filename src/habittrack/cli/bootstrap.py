# src/habittrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/notifications/tasks),
- restores the persisted snapshot and app settings.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..config import get_settings
from ..core.state import AppState, local_now
from ..notifications.center import LocalNotificationCenter
from ..notifications.reminders import ReminderScheduler
from ..storage.app_settings import load_app_settings
from ..storage.gateway import PersistenceGateway
from ..storage.kv_store import KeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.local_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.shared_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    clock: Callable[[], datetime] = local_now,
    notification_center: LocalNotificationCenter | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    gateway = PersistenceGateway(
        local=KeyValueStore(settings.local_db_path, name="local"),
        shared=KeyValueStore(settings.shared_db_path, name="shared"),
    )

    center = notification_center
    if center is None:
        center = LocalNotificationCenter(enabled=bool(getattr(settings, "notifications_enabled", True)))
    reminders = ReminderScheduler(center, clock)

    state = AppState(
        settings=settings,
        gateway=gateway,
        notification_center=center,
        reminders=reminders,
        task_store=TaskStore(gateway, reminders, clock=clock),
        clock=clock,
    )
    return state


def start_app(state: AppState) -> AppState:
    """Startup sequence: settings, notification permission, snapshot + reminder resync."""
    state.app_settings = load_app_settings(state.gateway)
    state.reminders.request_authorization()
    total = state.task_store.load()
    logger.info(
        "App started tasks=%d theme=%s onboarding_seen=%s",
        total,
        state.app_settings.theme.value,
        state.app_settings.onboarding_seen,
    )
    return state
