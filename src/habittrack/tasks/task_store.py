# src/habittrack/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.ports import SnapshotGateway
from ..notifications.reminders import ReminderScheduler
from .errors import NotFoundError, ValidationError
from .task_models import Task, TaskDraft, TaskStatus, as_local_aware, new_task_id

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Authoritative in-memory task collection.

    Every mutation:
    - persists the full snapshot through the gateway before returning
      (a failed write is logged by the gateway, the mutation stays applied)
    - keeps reminders in sync (add/update reschedule, remove cancels)

    toggle_status() deliberately leaves reminders alone: a task marked
    completed keeps any reminder that is still in the future.

    Thread-safety:
    - mutations are serialized by one re-entrant lock
    """

    def __init__(
        self,
        gateway: SnapshotGateway,
        reminders: ReminderScheduler,
        *,
        clock: Callable[[], datetime],
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._gateway = gateway
        self._reminders = reminders
        self._clock = clock
        self._id_factory = id_factory
        self._tasks: list[Task] = []
        self._lock = threading.RLock()

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFoundError(task_id)

    @staticmethod
    def _clean_name(draft: TaskDraft) -> str:
        name = (draft.name or "").strip()
        if not name:
            raise ValidationError("Task name must not be empty")
        return name

    def _fresh_id(self) -> str:
        existing = {t.id for t in self._tasks}
        while True:
            tid = self._id_factory()
            if tid not in existing:
                return tid
            logger.warning("Task id collision id=%s; generating another", tid)

    def _persist(self) -> None:
        self._gateway.save_snapshot(self._tasks)

    # ---- public API ----

    def load(self) -> int:
        """Replace the collection with the persisted snapshot and resync reminders."""
        with self._lock:
            loaded = self._gateway.load_snapshot()
            seen: set[str] = set()
            tasks: list[Task] = []
            for t in loaded:
                if t.id in seen:
                    logger.warning("Duplicate task id in snapshot skipped id=%s", t.id)
                    continue
                seen.add(t.id)
                tasks.append(t)
            self._tasks = tasks
            self._reminders.sync_all(self._tasks)
            logger.info("TaskStore loaded total=%d", len(self._tasks))
            return len(self._tasks)

    def snapshot(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get(self, task_id: str) -> Task:
        with self._lock:
            return self._tasks[self._index_of(task_id)]

    def add(self, draft: TaskDraft) -> Task:
        name = self._clean_name(draft)
        with self._lock:
            task = Task(
                id=self._fresh_id(),
                name=name,
                description=draft.description or "",
                status=TaskStatus.PENDING,
                priority=draft.priority,
                category=draft.category,
                creation_date=self._clock(),
                due_date=as_local_aware(draft.due_date),
            )
            self._tasks.append(task)
            self._persist()
            self._reminders.sync_task(task)
            logger.info("Task added id=%s priority=%s category=%s", task.id, task.priority, task.category)
            return task

    def update(self, task_id: str, draft: TaskDraft) -> Task:
        with self._lock:
            idx = self._index_of(task_id)
            name = self._clean_name(draft)
            current = self._tasks[idx]
            updated = replace(
                current,
                name=name,
                description=draft.description or "",
                priority=draft.priority,
                category=draft.category,
                due_date=as_local_aware(draft.due_date),
            )
            self._tasks[idx] = updated
            self._persist()
            self._reminders.sync_task(updated)
            logger.info("Task updated id=%s", task_id)
            return updated

    def toggle_status(self, task_id: str) -> Task:
        with self._lock:
            idx = self._index_of(task_id)
            current = self._tasks[idx]
            updated = replace(current, status=current.status.toggled())
            self._tasks[idx] = updated
            self._persist()
            logger.info("Task %s -> %s", task_id, updated.status.value)
            return updated

    def remove(self, task_id: str) -> Task:
        with self._lock:
            idx = self._index_of(task_id)
            removed = self._tasks.pop(idx)
            self._persist()
            self._reminders.cancel(task_id)
            logger.info("Task removed id=%s", task_id)
            return removed

    def resync(self) -> int:
        with self._lock:
            return self._reminders.sync_all(self._tasks)
