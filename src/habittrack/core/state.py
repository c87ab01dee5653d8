# src/habittrack/core/state.py

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..notifications.center import LocalNotificationCenter
from ..notifications.reminders import ReminderScheduler
from ..storage.app_settings import AppSettings
from ..storage.gateway import PersistenceGateway
from ..tasks.task_models import Category, Priority
from ..tasks.task_store import TaskStore


def local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class ListFilters:
    """Current search/filter selection of the list screen (UI state, not persisted)."""

    search_text: str = ""
    priority: Priority | None = None
    category: Category | None = None


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    gateway: PersistenceGateway
    notification_center: LocalNotificationCenter
    reminders: ReminderScheduler
    task_store: TaskStore

    app_settings: AppSettings = field(default_factory=AppSettings)
    filters: ListFilters = field(default_factory=ListFilters)

    # Serializes console commands against the reminder loop thread.
    lock: threading.RLock = field(default_factory=threading.RLock)
    clock: Callable[[], datetime] = local_now
