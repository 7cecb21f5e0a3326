# src/taskflow/tasks/projection.py

"""
Read-only view over the task collection: filter, sort, aggregate counts.

Pure functions; safe to recompute on every render.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from ..errors import TaskValidationError
from .task_models import Priority, Task


class PriorityFilter(StrEnum):
    ALL = "all"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def parse_filter(raw: str | None) -> PriorityFilter:
    if not raw:
        return PriorityFilter.ALL
    try:
        return PriorityFilter(raw.strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in PriorityFilter)
        raise TaskValidationError(f"Unknown filter {raw!r} (expected one of: {choices})") from None


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    high: int
    medium: int
    low: int
    with_reminders: int


@dataclass(frozen=True, slots=True)
class TaskView:
    tasks: tuple[Task, ...]
    stats: TaskStats
    priority_filter: PriorityFilter


def filter_tasks(tasks: Iterable[Task], priority_filter: PriorityFilter | str) -> list[Task]:
    flt = PriorityFilter(priority_filter)
    if flt is PriorityFilter.ALL:
        return list(tasks)
    return [t for t in tasks if t.priority.value == flt.value]


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable, so insertion order breaks ties.
    return sorted(tasks, key=lambda t: (t.completed, -t.priority.rank))


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    open_tasks = [t for t in tasks if not t.completed]
    return TaskStats(
        total=len(tasks),
        completed=len(tasks) - len(open_tasks),
        high=sum(1 for t in open_tasks if t.priority is Priority.HIGH),
        medium=sum(1 for t in open_tasks if t.priority is Priority.MEDIUM),
        low=sum(1 for t in open_tasks if t.priority is Priority.LOW),
        with_reminders=sum(1 for t in open_tasks if t.reminder_time is not None),
    )


def project(tasks: Sequence[Task], priority_filter: PriorityFilter | str = PriorityFilter.ALL) -> TaskView:
    """Filtered + sorted list; stats always cover the whole collection."""
    flt = PriorityFilter(priority_filter)
    return TaskView(
        tasks=tuple(sort_tasks(filter_tasks(tasks, flt))),
        stats=compute_stats(tasks),
        priority_filter=flt,
    )
