# src/habittrack/tasks/errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for errors reported synchronously by TaskStore operations."""


class ValidationError(TaskStoreError, ValueError):
    """Rejected input on add/update (e.g. empty task name)."""


class NotFoundError(TaskStoreError, LookupError):
    """The referenced task id does not exist in the collection."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id
