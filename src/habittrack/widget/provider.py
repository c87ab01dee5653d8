# src/habittrack/widget/provider.py

from __future__ import annotations

"""
Home-screen widget timeline provider.

The widget never touches the task snapshot: it only reads the integer task
count that the app mirrors into the shared store on every save. A missing
shared store (first run) or a stale value both render fine.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path

from ..core.ports import KeyValueRepo
from ..storage.gateway import read_task_count
from ..storage.kv_store import open_shared_store_readonly

WIDGET_KIND = "HabitTrackWidget"
WIDGET_TITLE = "Task Count"


class RefreshPolicy(StrEnum):
    # Ask for a new timeline once the last entry has been displayed.
    AT_END = "at_end"


@dataclass(frozen=True, slots=True)
class TaskCountEntry:
    date: datetime
    task_count: int


@dataclass(frozen=True, slots=True)
class Timeline:
    entries: list[TaskCountEntry]
    policy: RefreshPolicy = RefreshPolicy.AT_END


class TaskCountProvider:
    def __init__(
        self,
        shared_loader: Callable[[], KeyValueRepo | None],
        clock: Callable[[], datetime],
    ) -> None:
        self._shared_loader = shared_loader
        self._clock = clock

    @classmethod
    def for_path(cls, shared_db_path: str | Path, clock: Callable[[], datetime]) -> TaskCountProvider:
        return cls(lambda: open_shared_store_readonly(shared_db_path), clock)

    def placeholder(self) -> TaskCountEntry:
        return TaskCountEntry(date=self._clock(), task_count=0)

    def snapshot(self) -> TaskCountEntry:
        return TaskCountEntry(date=self._clock(), task_count=0)

    def timeline(self) -> Timeline:
        entry = TaskCountEntry(date=self._clock(), task_count=read_task_count(self._shared_loader()))
        return Timeline(entries=[entry], policy=RefreshPolicy.AT_END)


def render_entry(entry: TaskCountEntry) -> str:
    return f"{WIDGET_TITLE}\n{entry.task_count}"
