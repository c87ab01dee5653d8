# tests/test_gateway.py

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from habittrack.storage.app_settings import (
    AppSettings,
    load_app_settings,
    mark_onboarding_seen,
    save_theme,
)
from habittrack.storage.gateway import TASK_COUNT_KEY, TASKS_KEY, PersistenceGateway, read_task_count
from habittrack.storage.kv_store import KeyValueStore, open_shared_store_readonly
from habittrack.tasks.task_models import AppTheme, Category, Priority, Task, TaskStatus

from .fakes import BrokenKV, MemoryKV

T0 = datetime(2026, 10, 19, 9, 30, tzinfo=UTC)


def _tasks() -> list[Task]:
    return [
        Task(
            id="7c0e1d2a-0000-4000-8000-000000000001",
            name="Pay rent",
            description="Transfer before noon",
            status=TaskStatus.PENDING,
            priority=Priority.HIGH,
            category=Category.PERSONAL,
            creation_date=T0,
            due_date=T0 + timedelta(days=3),
        ),
        Task(
            id="7c0e1d2a-0000-4000-8000-000000000002",
            name="Çay al",
            description="",
            status=TaskStatus.COMPLETED,
            priority=Priority.LOW,
            category=Category.OTHER,
            creation_date=T0 - timedelta(hours=2),
        ),
    ]


def test_snapshot_round_trip_on_sqlite(tmp_path: Path) -> None:
    gateway = PersistenceGateway(
        local=KeyValueStore(tmp_path / "app.sqlite3"),
        shared=KeyValueStore(tmp_path / "shared.sqlite3"),
    )
    tasks = _tasks()

    assert gateway.save_snapshot(tasks) is True
    assert gateway.load_snapshot() == tasks
    assert gateway.load_task_count() == 2


def test_snapshot_wire_format(local_kv: MemoryKV, shared_kv: MemoryKV, gateway: PersistenceGateway) -> None:
    gateway.save_snapshot(_tasks())

    raw = json.loads(local_kv.get(TASKS_KEY) or b"")
    assert set(raw[0]) == {
        "id", "name", "description", "status", "priority", "category", "creation_date", "due_date",
    }
    assert raw[0]["priority"] == "High"
    assert raw[1]["due_date"] is None
    assert shared_kv.get(TASKS_KEY) == local_kv.get(TASKS_KEY)
    assert shared_kv.get(TASK_COUNT_KEY) == b"2"


def test_load_without_data_is_empty(gateway: PersistenceGateway) -> None:
    assert gateway.load_snapshot() == []


def test_load_corrupt_data_is_empty(local_kv: MemoryKV, gateway: PersistenceGateway) -> None:
    local_kv.set(TASKS_KEY, b"\xff\xfe")
    assert gateway.load_snapshot() == []

    local_kv.set(TASKS_KEY, b'{"tasks": []}')
    assert gateway.load_snapshot() == []

    local_kv.set(TASKS_KEY, b'[{"id": "x", "name": "n", "status": "bogus"}]')
    assert gateway.load_snapshot() == []


def test_save_failure_is_reported_not_raised() -> None:
    gateway = PersistenceGateway(local=MemoryKV(), shared=BrokenKV())
    assert gateway.save_snapshot(_tasks()) is False


def test_settings_round_trip_and_defaults(gateway: PersistenceGateway, local_kv: MemoryKV) -> None:
    assert load_app_settings(gateway) == AppSettings()

    save_theme(gateway, AppTheme.BLUE)
    mark_onboarding_seen(gateway)
    assert load_app_settings(gateway) == AppSettings(theme=AppTheme.BLUE, onboarding_seen=True)

    # Unknown or mistyped values fall back to defaults.
    local_kv.set("app_theme", b'"Neon"')
    local_kv.set("has_seen_onboarding", b"not json")
    assert load_app_settings(gateway).theme is AppTheme.LIGHT
    assert gateway.load_setting("app_theme", 0) == 0


def test_onboarding_flag_never_reverts(gateway: PersistenceGateway) -> None:
    mark_onboarding_seen(gateway)
    mark_onboarding_seen(gateway)
    assert gateway.load_setting("has_seen_onboarding", False) is True


def test_task_count_defaults_to_zero(tmp_path: Path) -> None:
    assert read_task_count(None) == 0
    assert open_shared_store_readonly(tmp_path / "missing.sqlite3") is None

    shared = MemoryKV()
    assert read_task_count(shared) == 0
    shared.set(TASK_COUNT_KEY, b"garbage")
    assert read_task_count(shared) == 0


def test_kv_store_overwrite_and_delete(tmp_path: Path) -> None:
    kv = KeyValueStore(tmp_path / "kv.sqlite3")
    kv.set("a", b"1")
    kv.set("a", b"2")
    kv.set("b", b"3")
    assert kv.get("a") == b"2"
    assert kv.keys() == ["a", "b"]

    kv.delete("a")
    kv.delete("a")
    assert kv.get("a") is None

    # Data survives reopening the file.
    assert KeyValueStore(tmp_path / "kv.sqlite3").get("b") == b"3"


def test_shared_reader_never_writes(tmp_path: Path) -> None:
    path = tmp_path / "shared.sqlite3"
    writer = KeyValueStore(path)
    writer.set(TASK_COUNT_KEY, b"4")

    reader = open_shared_store_readonly(path)
    assert reader is not None
    assert read_task_count(reader) == 4
    with pytest.raises(sqlite3.OperationalError):
        reader.set(TASK_COUNT_KEY, b"0")
    assert writer.get(TASK_COUNT_KEY) == b"4"


def test_shared_reader_does_not_create_schema(tmp_path: Path) -> None:
    path = tmp_path / "bare.sqlite3"
    sqlite3.connect(str(path)).close()

    reader = open_shared_store_readonly(path)
    assert read_task_count(reader) == 0

    conn = sqlite3.connect(str(path))
    try:
        tables = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    finally:
        conn.close()
    assert tables == []
