# src/habittrack/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self is TaskStatus.PENDING else TaskStatus.PENDING


class Priority(StrEnum):
    """
    Task priority.

    The value doubles as the display label. Views sort by this label as a plain
    string, so the resulting order is High, Low, Medium.
    """

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Category(StrEnum):
    WORK = "Work"
    PERSONAL = "Personal"
    OTHER = "Other"


class AppTheme(StrEnum):
    LIGHT = "Light"
    DARK = "Dark"
    BLUE = "Blue"

    @classmethod
    def from_raw(cls, raw: Any) -> AppTheme:
        try:
            return cls(str(raw))
        except ValueError:
            return cls.LIGHT


def new_task_id() -> str:
    return str(uuid.uuid4())


def as_local_aware(value: datetime | None) -> datetime | None:
    """Naive timestamps are read as local time; aware ones pass through."""
    if value is None or value.tzinfo is not None:
        return value
    return value.astimezone()


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """Editable fields of a task, as submitted by the add/edit forms."""

    name: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    due_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    name: str
    description: str
    status: TaskStatus
    priority: Priority
    category: Category
    creation_date: datetime
    due_date: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "category": self.category.value,
            "creation_date": self.creation_date.isoformat(),
            "due_date": self.due_date.isoformat() if self.due_date is not None else None,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Decode one persisted record.

        Raises KeyError/ValueError/TypeError on malformed input; the gateway
        treats any of those as a corrupt snapshot.
        """
        due_raw = raw.get("due_date")
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            description=str(raw.get("description") or ""),
            status=TaskStatus(raw["status"]),
            priority=Priority(raw["priority"]),
            category=Category(raw["category"]),
            creation_date=as_local_aware(datetime.fromisoformat(raw["creation_date"])),
            due_date=as_local_aware(datetime.fromisoformat(due_raw)) if due_raw else None,
        )
