# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..errors import StorageReadError


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def from_raw(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as local time."""
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


@dataclass(slots=True)
class Task:
    id: str
    text: str
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    created_at: float = 0.0
    reminder_time: datetime | None = None
    reminder_notified: bool = False

    @property
    def has_active_reminder(self) -> bool:
        return self.reminder_time is not None and not self.completed

    def to_record(self) -> dict[str, Any]:
        """
        JSON-safe record as stored under the tasks key.

        Key names are camelCase, matching the persisted collection format.
        """
        rec: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "priority": self.priority.value,
            "completed": self.completed,
            "createdAt": self.created_at,
            "reminderNotified": self.reminder_notified,
        }
        if self.reminder_time is not None:
            rec["reminderTime"] = self.reminder_time.isoformat()
        return rec

    @classmethod
    def from_record(cls, rec: Any) -> Task:
        if not isinstance(rec, dict):
            raise StorageReadError(f"task record must be an object, got {type(rec).__name__}")

        task_id = rec.get("id")
        text = rec.get("text")
        if task_id is None or not isinstance(text, str) or not text.strip():
            raise StorageReadError(f"task record is missing id/text: {rec!r}")

        raw_reminder = rec.get("reminderTime")
        reminder_time: datetime | None = None
        if raw_reminder:
            try:
                reminder_time = parse_timestamp(str(raw_reminder))
            except ValueError as e:
                raise StorageReadError(f"bad reminderTime for task {task_id}: {raw_reminder!r}") from e

        try:
            created_at = float(rec.get("createdAt") or 0.0)
        except (TypeError, ValueError) as e:
            raise StorageReadError(f"bad createdAt for task {task_id}") from e

        return cls(
            id=str(task_id),
            text=text.strip(),
            priority=Priority.from_raw(rec.get("priority")),
            completed=_flag(rec, "completed", task_id),
            created_at=created_at,
            reminder_time=reminder_time,
            reminder_notified=_flag(rec, "reminderNotified", task_id),
        )


def _flag(rec: dict[str, Any], key: str, task_id: Any) -> bool:
    # Only real JSON booleans; a missing key or null reads as False.
    value = rec.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise StorageReadError(f"bad {key} for task {task_id}: {value!r}")
    return value
