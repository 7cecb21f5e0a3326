# src/taskflow/tasks/task_api.py

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.ports import NotificationPermission
from ..core.state import AppState
from ..errors import TaskNotFoundError, TaskValidationError
from .task_models import Priority, Task, parse_timestamp

logger = logging.getLogger(__name__)

_OFFSET_RE = re.compile(r"^\+(\d+)\s*([mhd])$", re.IGNORECASE)
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_OFFSET_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


@dataclass(frozen=True, slots=True)
class ActionResult:
    ok: bool
    message: str
    task: Task | None = None
    count: int = 0


def parse_reminder_time(raw: str, now: datetime) -> datetime:
    """
    Parse a user-entered reminder time.

    Accepted forms:
    - "+15m", "+2h", "+1d"      offset from now
    - "14:30"                   today at that local time
    - "2026-10-18T14:30"        ISO date/time (naive = local time)
    """
    s = (raw or "").strip()
    if not s:
        raise TaskValidationError("Reminder time is empty")

    m = _OFFSET_RE.match(s)
    if m:
        amount, unit = int(m.group(1)), m.group(2).lower()
        return now + timedelta(**{_OFFSET_UNITS[unit]: amount})

    m = _CLOCK_RE.match(s)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        try:
            return now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        except ValueError:
            raise TaskValidationError(f"Invalid time of day: {s!r}") from None

    try:
        return parse_timestamp(s.replace(" ", "T", 1))
    except ValueError:
        raise TaskValidationError(f"Unrecognized reminder time: {s!r}") from None


def format_reminder_time(when: datetime, now: datetime) -> str:
    local = when.astimezone(now.tzinfo)
    time_str = local.strftime("%H:%M")
    if local.date() == now.date():
        return f"Today at {time_str}"
    return f"{local.strftime('%b')} {local.day} at {time_str}"


def add_task(
    state: AppState,
    text: str,
    *,
    priority: Priority | str = Priority.MEDIUM,
    reminder_time: datetime | None = None,
) -> ActionResult:
    try:
        task = state.task_store.add(text, priority, reminder_time)
    except TaskValidationError as e:
        return ActionResult(False, str(e))

    if task.reminder_time is None:
        return ActionResult(True, f"Task added ({task.id}).", task=task)

    msg = "Task added with reminder set!"
    if state.notifier.permission is NotificationPermission.DEFAULT:
        msg += " Enable notifications to receive reminders: /notify"
    return ActionResult(True, msg, task=task)


def edit_task(
    state: AppState,
    task_id: str,
    *,
    text: str | None = None,
    reminder_time: datetime | None = None,
    clear_reminder: bool = False,
) -> ActionResult:
    fields: dict[str, object] = {}
    if text is not None:
        fields["text"] = text
    if clear_reminder:
        fields["reminder_time"] = None
    elif reminder_time is not None:
        fields["reminder_time"] = reminder_time

    if not fields:
        return ActionResult(False, "Nothing to change.")

    try:
        task = state.task_store.update(task_id, **fields)  # type: ignore[arg-type]
    except (TaskValidationError, TaskNotFoundError) as e:
        return ActionResult(False, str(e))
    return ActionResult(True, "Task updated.", task=task)


def remove_reminder(state: AppState, task_id: str) -> ActionResult:
    try:
        task = state.task_store.clear_reminder(task_id)
    except TaskNotFoundError as e:
        return ActionResult(False, str(e))
    return ActionResult(True, "Reminder removed", task=task)


def toggle_task(state: AppState, task_id: str) -> ActionResult:
    try:
        task = state.task_store.toggle_completed(task_id)
    except TaskNotFoundError as e:
        return ActionResult(False, str(e))
    word = "completed" if task.completed else "reopened"
    return ActionResult(True, f"Task {word}: {task.text}", task=task)


def delete_task(state: AppState, task_id: str) -> ActionResult:
    if not state.task_store.remove(task_id):
        return ActionResult(False, f"Task not found: {task_id}")
    return ActionResult(True, "Task deleted.", count=1)


def clear_completed(state: AppState) -> ActionResult:
    n = state.task_store.clear_completed()
    if n == 0:
        return ActionResult(False, "No completed tasks to clear.")
    return ActionResult(True, f"Cleared {n} completed task(s)", count=n)


def clear_all(state: AppState) -> ActionResult:
    n = state.task_store.clear_all()
    return ActionResult(True, "All tasks cleared", count=n)


async def enable_notifications(state: AppState) -> ActionResult:
    notifier = state.notifier
    if notifier.permission is not NotificationPermission.DEFAULT:
        return ActionResult(
            notifier.permission is NotificationPermission.GRANTED,
            f"Notifications are {notifier.permission.value}.",
        )

    try:
        permission = await notifier.request_permission()
    except Exception:
        logger.exception("Notification permission request failed")
        permission = NotificationPermission.DENIED

    if permission is NotificationPermission.GRANTED:
        return ActionResult(True, "Notifications enabled! You'll receive reminders for your tasks.")
    return ActionResult(False, "Notifications blocked. You won't receive reminder alerts.")

