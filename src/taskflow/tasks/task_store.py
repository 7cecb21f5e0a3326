# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.ports import Clock, KeyValueStorage, SystemClock
from ..errors import StorageReadError, TaskNotFoundError, TaskValidationError
from .storage import TASKS_KEY, decode_tasks, encode_tasks
from .task_models import Priority, Task

logger = logging.getLogger(__name__)

# Sentinel for "field not supplied" in partial updates (None means "clear").
_UNSET = object()


class TaskStore:
    """
    In-memory ordered task collection mirrored to key-value storage.

    The in-memory list is the source of truth during a session; storage only
    seeds it once on load(). Every mutation writes the whole collection back
    before returning, so the durable copy is never behind.

    Not thread-safe: callers run on a single event loop.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Clock | None = None,
        key: str = TASKS_KEY,
    ) -> None:
        self._storage = storage
        self._clock: Clock = clock or SystemClock()
        self._key = key
        self._tasks: list[Task] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def clock(self) -> Clock:
        return self._clock

    # ---- persistence ----

    def load(self) -> int:
        """Seed the in-memory collection from storage. Bad data yields an empty store."""
        tasks: list[Task] = []
        try:
            raw = self._storage.get(self._key)
            if raw:
                tasks = decode_tasks(raw)
        except StorageReadError:
            logger.warning("Stored tasks under %r are malformed; starting empty.", self._key, exc_info=True)
            tasks = []

        # Drop duplicate ids from hand-edited data; first one wins.
        seen: set[str] = set()
        self._tasks = []
        for t in tasks:
            if t.id in seen:
                logger.warning("Duplicate task id %s in storage; dropping later copy.", t.id)
                continue
            seen.add(t.id)
            self._tasks.append(t)

        self._last_id = max((_numeric_id(t.id) for t in self._tasks), default=0)
        logger.info("TaskStore loaded key=%s total=%d", self._key, len(self._tasks))
        return len(self._tasks)

    def _persist(self) -> None:
        self._storage.set(self._key, encode_tasks(self._tasks))

    # ---- reads ----

    def get(self, task_id: str) -> Task | None:
        idx = self._index(task_id)
        return None if idx is None else replace(self._tasks[idx])

    def snapshot(self) -> list[Task]:
        """Copies of all tasks in insertion order."""
        return [replace(t) for t in self._tasks]

    def _index(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _require(self, task_id: str) -> int:
        idx = self._index(task_id)
        if idx is None:
            raise TaskNotFoundError(task_id)
        return idx

    # ---- validation / ids ----

    @staticmethod
    def _clean_text(text: str | None) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise TaskValidationError("Task text must not be empty")
        return cleaned

    def _check_reminder(self, reminder_time: datetime | None) -> None:
        if reminder_time is None:
            return
        if reminder_time.tzinfo is None:
            raise TaskValidationError("Reminder time must be timezone-aware")
        if reminder_time <= self._clock.now():
            raise TaskValidationError("Reminder time must be in the future")

    def _next_id(self, now: datetime) -> str:
        candidate = int(now.timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    # ---- mutations ----

    def add(
        self,
        text: str,
        priority: Priority | str = Priority.MEDIUM,
        reminder_time: datetime | None = None,
    ) -> Task:
        cleaned = self._clean_text(text)
        self._check_reminder(reminder_time)

        now = self._clock.now()
        task = Task(
            id=self._next_id(now),
            text=cleaned,
            priority=Priority.from_raw(priority),
            completed=False,
            created_at=now.timestamp(),
            reminder_time=reminder_time,
            reminder_notified=False,
        )
        self._tasks.append(task)
        self._persist()
        logger.debug("Task added id=%s priority=%s reminder=%s", task.id, task.priority, reminder_time)
        return replace(task)

    def update(
        self,
        task_id: str,
        *,
        text: str | object = _UNSET,
        priority: Priority | str | object = _UNSET,
        reminder_time: datetime | None | object = _UNSET,
    ) -> Task:
        """
        Apply a partial update.

        Supplying reminder_time (a datetime, or None to clear) always resets
        reminder_notified so the new reminder can fire.
        """
        idx = self._require(task_id)
        changes: dict[str, object] = {}

        if text is not _UNSET:
            changes["text"] = self._clean_text(text)  # type: ignore[arg-type]
        if priority is not _UNSET:
            changes["priority"] = Priority.from_raw(priority)  # type: ignore[arg-type]
        if reminder_time is not _UNSET:
            self._check_reminder(reminder_time)  # type: ignore[arg-type]
            changes["reminder_time"] = reminder_time
            changes["reminder_notified"] = False

        if not changes:
            return replace(self._tasks[idx])

        self._tasks[idx] = replace(self._tasks[idx], **changes)
        self._persist()
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return replace(self._tasks[idx])

    def clear_reminder(self, task_id: str) -> Task:
        return self.update(task_id, reminder_time=None)

    def set_completed(self, task_id: str, value: bool) -> Task:
        idx = self._require(task_id)
        self._tasks[idx] = replace(self._tasks[idx], completed=bool(value))
        self._persist()
        logger.debug("Task %s completed=%s", task_id, bool(value))
        return replace(self._tasks[idx])

    def toggle_completed(self, task_id: str) -> Task:
        idx = self._require(task_id)
        return self.set_completed(task_id, not self._tasks[idx].completed)

    def try_mark_notified(self, task_id: str) -> bool:
        """
        Compare-and-set reminder_notified False -> True.

        Returns True only for the caller that performed the transition, so a
        reminder is acknowledged exactly once.
        """
        idx = self._index(task_id)
        if idx is None or self._tasks[idx].reminder_notified:
            return False
        self._tasks[idx] = replace(self._tasks[idx], reminder_notified=True)
        self._persist()
        return True

    def remove(self, task_id: str) -> bool:
        return self.remove_where(lambda t: t.id == task_id) > 0

    def remove_where(self, predicate: Callable[[Task], bool]) -> int:
        kept = [t for t in self._tasks if not predicate(t)]
        removed = len(self._tasks) - len(kept)
        if removed:
            self._tasks = kept
            self._persist()
            logger.debug("Removed %d task(s)", removed)
        return removed

    def clear_completed(self) -> int:
        return self.remove_where(lambda t: t.completed)

    def clear_all(self) -> int:
        return self.remove_where(lambda t: True)


def _numeric_id(task_id: str) -> int:
    try:
        return int(task_id)
    except ValueError:
        return 0
