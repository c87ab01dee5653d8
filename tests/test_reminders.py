# tests/test_reminders.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest

from habittrack.notifications.center import LocalNotificationCenter
from habittrack.notifications.reminders import REMINDER_TITLE, ReminderScheduler, reminder_time
from habittrack.storage.gateway import PersistenceGateway
from habittrack.tasks.task_models import Category, Priority, Task, TaskDraft, TaskStatus
from habittrack.tasks.task_store import TaskStore

from .fakes import ExplodingNotificationCenter, FixedClock


def test_reminder_fires_one_day_before_due(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    tomorrow = clock.now + timedelta(days=1)
    rent = store.add(TaskDraft(name="Pay rent", due_date=tomorrow + timedelta(days=2)))
    store.add(TaskDraft(name="Old task", due_date=clock.now - timedelta(days=1)))

    pending = center.pending_requests()
    assert len(pending) == 1
    request = pending[0]
    assert request.identifier == rent.id
    assert request.fire_at == tomorrow + timedelta(days=1)
    assert request.title == REMINDER_TITLE
    assert request.body.startswith("Pay rent is due soon! (")


def test_no_reminder_inside_the_last_day(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    store.add(TaskDraft(name="Soon", due_date=clock.now + timedelta(hours=12)))
    store.add(TaskDraft(name="Exactly a day", due_date=clock.now + timedelta(days=1)))
    store.add(TaskDraft(name="Someday"))

    assert center.pending_requests() == []


def test_reminder_time_is_strictly_future(store: TaskStore, clock: FixedClock) -> None:
    task = store.add(TaskDraft(name="x", due_date=clock.now + timedelta(days=1, seconds=1)))
    assert reminder_time(task, clock.now) == clock.now + timedelta(seconds=1)
    assert reminder_time(task, clock.now + timedelta(seconds=1)) is None


def test_update_reschedules_without_duplicates(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    task = store.add(TaskDraft(name="Dentist", due_date=clock.now + timedelta(days=5)))
    store.update(task.id, TaskDraft(name="Dentist", due_date=clock.now + timedelta(days=10)))

    pending = center.pending_requests()
    assert len(pending) == 1
    assert pending[0].fire_at == clock.now + timedelta(days=9)


def test_clearing_due_date_cancels(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    task = store.add(TaskDraft(name="Dentist", due_date=clock.now + timedelta(days=5)))
    store.update(task.id, TaskDraft(name="Dentist"))
    assert center.pending_requests() == []


def test_remove_cancels(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    task = store.add(TaskDraft(name="Trip", due_date=clock.now + timedelta(days=5)))
    store.remove(task.id)
    assert center.get_pending(task.id) is None


def test_completed_task_keeps_its_reminder(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    # Toggling status does not touch scheduling; a done task can still be reminded.
    task = store.add(TaskDraft(name="Gift", due_date=clock.now + timedelta(days=5)))
    store.toggle_status(task.id)
    assert center.get_pending(task.id) is not None


def test_resync_is_idempotent(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    store.add(TaskDraft(name="a", due_date=clock.now + timedelta(days=3)))
    store.add(TaskDraft(name="b", due_date=clock.now + timedelta(days=4)))

    assert store.resync() == 2
    assert store.resync() == 2
    assert len(center.pending_requests()) == 2


def test_cancel_unknown_id_is_noop(center: LocalNotificationCenter) -> None:
    center.remove_pending(["nothing-here"])
    assert center.pending_requests() == []


def test_denied_permission_is_logged_not_raised(
        gateway: PersistenceGateway,
        clock: FixedClock,
        caplog: pytest.LogCaptureFixture,
) -> None:
    center = LocalNotificationCenter(enabled=False)
    reminders = ReminderScheduler(center, clock)
    store = TaskStore(gateway, reminders, clock=clock)

    assert reminders.request_authorization() is False
    with caplog.at_level(logging.WARNING):
        task = store.add(TaskDraft(name="Pay rent", due_date=clock.now + timedelta(days=3)))

    assert store.get(task.id) == task
    assert center.pending_requests() == []
    assert "Reminder scheduling failed" in caplog.text


def test_crashing_host_scheduler_never_blocks_store(
        gateway: PersistenceGateway,
        clock: FixedClock,
) -> None:
    center = ExplodingNotificationCenter()
    reminders = ReminderScheduler(center, clock)
    store = TaskStore(gateway, reminders, clock=clock)

    assert reminders.request_authorization() is False
    task = store.add(TaskDraft(name="x", due_date=clock.now + timedelta(days=3)))
    store.remove(task.id)

    assert store.snapshot() == []
    assert center.removed == [task.id, task.id]


def test_pop_due_is_one_shot(store: TaskStore, center: LocalNotificationCenter, clock: FixedClock) -> None:
    task = store.add(TaskDraft(name="Call", due_date=clock.now + timedelta(days=2)))

    assert center.pop_due(clock.now) == []
    fired = center.pop_due(clock.now + timedelta(days=1))
    assert [r.identifier for r in fired] == [task.id]
    assert center.pop_due(clock.now + timedelta(days=1)) == []


def test_reminder_decision_error_is_logged_not_raised(
        center: LocalNotificationCenter,
        clock: FixedClock,
        caplog: pytest.LogCaptureFixture,
) -> None:
    # Built by hand: the store would have normalized this naive due date.
    task = Task(
        id="raw",
        name="Raw",
        description="",
        status=TaskStatus.PENDING,
        priority=Priority.LOW,
        category=Category.OTHER,
        creation_date=clock.now,
        due_date=datetime(2030, 1, 1, 9, 0),
    )
    reminders = ReminderScheduler(center, clock)

    with caplog.at_level(logging.ERROR):
        assert reminders.sync_task(task) is None
        assert reminders.sync_all([task]) == 0

    assert center.pending_requests() == []
    assert "Reminder decision failed task_id=raw" in caplog.text
