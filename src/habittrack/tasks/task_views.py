# src/habittrack/tasks/task_views.py

from __future__ import annotations

"""
Derived views over a task snapshot.

Everything here is a pure function of its arguments: filtering, the
priority-label sort, the pending/completed split and the statistics shown on
the stats screen.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .task_models import Category, Priority, Task, TaskStatus


def matches(
        task: Task,
        search_text: str = "",
        priority: Priority | None = None,
        category: Category | None = None,
) -> bool:
    if search_text and search_text.lower() not in task.name.lower():
        return False
    if priority is not None and task.priority is not priority:
        return False
    if category is not None and task.category is not category:
        return False
    return True


def sort_by_priority_label(tasks: Iterable[Task]) -> list[Task]:
    # Label order, not urgency: "High" < "Low" < "Medium".
    return sorted(tasks, key=lambda t: t.priority.value)


def filter_and_sort(
        tasks: Iterable[Task],
        search_text: str = "",
        priority: Priority | None = None,
        category: Category | None = None,
) -> list[Task]:
    return sort_by_priority_label(t for t in tasks if matches(t, search_text, priority, category))


def split_by_status(tasks: Iterable[Task]) -> tuple[list[Task], list[Task]]:
    pending: list[Task] = []
    completed: list[Task] = []
    for t in tasks:
        (completed if t.status is TaskStatus.COMPLETED else pending).append(t)
    return pending, completed


def completion_percentage(tasks: Sequence[Task]) -> float:
    if not tasks:
        return 0.0
    done = sum(1 for t in tasks if t.status is TaskStatus.COMPLETED)
    return done / len(tasks)


def category_counts(tasks: Iterable[Task]) -> dict[Category, int]:
    counts = {c: 0 for c in Category}
    for t in tasks:
        counts[t.category] += 1
    return counts


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    total: int
    completed: int
    completion_rate: float

    @property
    def percent_label(self) -> str:
        return f"{self.completion_rate * 100:.0f}%"


def statistics(tasks: Sequence[Task]) -> TaskStatistics:
    done = sum(1 for t in tasks if t.status is TaskStatus.COMPLETED)
    return TaskStatistics(
        total=len(tasks),
        completed=done,
        completion_rate=completion_percentage(tasks),
    )


@dataclass(frozen=True, slots=True)
class TaskView:
    pending: list[Task]
    completed: list[Task]
    completion_percentage: float
    category_counts: dict[Category, int]


def build_view(
        tasks: Sequence[Task],
        search_text: str = "",
        priority: Priority | None = None,
        category: Category | None = None,
) -> TaskView:
    """
    The main list screen in one value.

    pending/completed honour the filters. completion_percentage is the
    filtered completed count over the whole collection, so a filter can only
    lower it. category_counts ignore the filters.
    """
    pending, completed = split_by_status(filter_and_sort(tasks, search_text, priority, category))
    return TaskView(
        pending=pending,
        completed=completed,
        completion_percentage=len(completed) / len(tasks) if tasks else 0.0,
        category_counts=category_counts(tasks),
    )
