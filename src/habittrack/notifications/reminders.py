# src/habittrack/notifications/reminders.py

from __future__ import annotations

"""
Reminder scheduling policy.

Maps each task id to at most one pending reminder that fires one day before
the task's due date. Every scheduling decision cancels first and then
(maybe) re-adds, so running it repeatedly for the same task is harmless.

Host scheduler failures are logged and swallowed: a reminder is a best-effort
side channel and never blocks a task store mutation.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from ..core.ports import NotificationCenter
from ..tasks.task_models import Task
from .center import NotificationRequest, ScheduleResult

logger = logging.getLogger(__name__)

REMINDER_LEAD = timedelta(days=1)
REMINDER_TITLE = "Task Reminder"


def reminder_time(task: Task, now: datetime) -> datetime | None:
    """
    When should the reminder for this task fire?

    None when there is no due date, or when due_date - 1 day is not strictly
    in the future (past due dates and due dates less than a day away get no
    reminder at all).
    """
    if task.due_date is None:
        return None
    fire_at = task.due_date - REMINDER_LEAD
    if fire_at > now:
        return fire_at
    return None


def format_due_date(due: datetime) -> str:
    return f"{due:%b} {due.day}, {due.year}"


def build_request(task: Task, due: datetime, fire_at: datetime) -> NotificationRequest:
    return NotificationRequest(
        identifier=task.id,
        title=REMINDER_TITLE,
        body=f"{task.name} is due soon! ({format_due_date(due)})",
        fire_at=fire_at,
    )


class ReminderScheduler:
    def __init__(self, center: NotificationCenter, clock: Callable[[], datetime]) -> None:
        self._center = center
        self._clock = clock

    def request_authorization(self) -> bool:
        try:
            result = self._center.request_authorization()
        except Exception:
            logger.exception("Notification authorization request crashed")
            return False
        if result.ok:
            logger.info("Notification permission granted")
        else:
            logger.warning("Notification permission not granted: %s", result.error)
        return result.ok

    def sync_task(self, task: Task) -> NotificationRequest | None:
        """
        Cancel any reminder for task.id, then schedule a fresh one if the
        due date still qualifies. Returns the request handed to the host
        scheduler (None if nothing was scheduled or the host refused it).
        """
        self.cancel(task.id)

        try:
            fire_at = reminder_time(task, self._clock())
        except Exception:
            logger.exception("Reminder decision failed task_id=%s", task.id)
            return None
        if fire_at is None or task.due_date is None:
            return None

        request = build_request(task, task.due_date, fire_at)
        result = self._add(request)
        if not result.ok:
            logger.warning(
                "Reminder scheduling failed task_id=%s error=%s", task.id, result.error
            )
            return None

        logger.debug("Reminder scheduled task_id=%s fire_at=%s", task.id, fire_at.isoformat())
        return request

    def sync_all(self, tasks: Iterable[Task]) -> int:
        """Rerun the scheduling decision for every task; returns how many got a reminder."""
        scheduled = 0
        for task in tasks:
            if self.sync_task(task) is not None:
                scheduled += 1
        logger.info("Reminder resync done scheduled=%d", scheduled)
        return scheduled

    def cancel(self, task_id: str) -> None:
        try:
            self._center.remove_pending([task_id])
        except Exception:
            logger.exception("Reminder cancel failed task_id=%s", task_id)

    def _add(self, request: NotificationRequest) -> ScheduleResult:
        try:
            return self._center.add(request)
        except Exception as e:
            logger.debug("Notification center add() raised", exc_info=True)
            return ScheduleResult.failure(str(e) or type(e).__name__)
