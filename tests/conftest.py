# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from habittrack.cli.bootstrap import create_initial_state
from habittrack.core.state import AppState
from habittrack.notifications.center import LocalNotificationCenter
from habittrack.notifications.reminders import ReminderScheduler
from habittrack.storage.gateway import PersistenceGateway
from habittrack.tasks.task_store import TaskStore

from .fakes import FixedClock, MemoryKV


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="HabitTrack",
        log_level="INFO",
        console_enabled=False,
        notifications_enabled=True,
        reminder_poll_seconds=0.01,
        data_dir=tmp_path,
        local_db_path=tmp_path / "app.sqlite3",
        shared_db_path=tmp_path / "shared" / "group.sqlite3",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 9, 30, tzinfo=UTC))


@pytest.fixture()
def center() -> LocalNotificationCenter:
    return LocalNotificationCenter()


@pytest.fixture()
def local_kv() -> MemoryKV:
    return MemoryKV()


@pytest.fixture()
def shared_kv() -> MemoryKV:
    return MemoryKV()


@pytest.fixture()
def gateway(local_kv: MemoryKV, shared_kv: MemoryKV) -> PersistenceGateway:
    return PersistenceGateway(local=local_kv, shared=shared_kv)


@pytest.fixture()
def store(gateway: PersistenceGateway, center: LocalNotificationCenter, clock: FixedClock) -> TaskStore:
    """TaskStore over in-memory partitions; the SQLite partitions are covered separately."""
    return TaskStore(gateway, ReminderScheduler(center, clock), clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FixedClock) -> AppState:
    """
    AppState wired by the real composition root.

    NOTE: We keep real SQLite partitions here because their correctness is
    part of what we want to test.
    """
    return create_initial_state(settings=settings, clock=clock)
