# src/taskflow/tasks/reminder_poller.py

from __future__ import annotations

"""
Reminder poller.

A small polling loop that:
- reads the current task snapshot at tick time (never a captured copy),
- picks reminders that are due and still inside the grace window,
- claims each one on the store (reminder_notified False -> True),
- emits one system notification (best-effort) and one in-app alert.

Per-task reminder lifecycle:
  no_reminder -> scheduled -> due -> acknowledged
A due reminder that is not picked up within the window moves to "lapsed"
and never fires. This is deliberate: reminders missed while the app was
closed are dropped instead of firing late.
"""

import asyncio
import contextlib
import logging
from datetime import datetime, timedelta
from enum import StrEnum

from ..core.ports import AlertSink, Clock, NotificationPermission, Notifier, SystemClock
from ..errors import NotificationUnavailable
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "TaskFlow Reminder"


class ReminderState(StrEnum):
    NO_REMINDER = "no_reminder"
    SCHEDULED = "scheduled"
    DUE = "due"
    LAPSED = "lapsed"
    ACKNOWLEDGED = "acknowledged"


def reminder_state(task: Task, now: datetime, window: timedelta) -> ReminderState:
    if task.reminder_time is None:
        return ReminderState.NO_REMINDER
    if task.reminder_notified:
        return ReminderState.ACKNOWLEDGED
    if task.reminder_time > now:
        return ReminderState.SCHEDULED
    if task.completed or now - task.reminder_time >= window:
        return ReminderState.LAPSED
    return ReminderState.DUE


def is_due(task: Task, now: datetime, window: timedelta) -> bool:
    return reminder_state(task, now, window) is ReminderState.DUE


class ReminderPoller:
    def __init__(
        self,
        store: TaskStore,
        notifier: Notifier,
        alerts: AlertSink,
        *,
        clock: Clock | None = None,
        interval_seconds: float = 30.0,
        window_seconds: float = 60.0,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._alerts = alerts
        self._clock: Clock = clock or SystemClock()
        self._interval = max(0.01, float(interval_seconds))
        self._window = timedelta(seconds=max(0.0, float(window_seconds)))
        self._runner: asyncio.Task[None] | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def window(self) -> timedelta:
        return self._window

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    async def check_reminders(self) -> list[Task]:
        """Run one polling tick. Returns the tasks whose reminder fired."""
        now = self._clock.now()
        fired: list[Task] = []

        for snap in self._store.snapshot():
            # A command may have changed the task while an earlier notify() was awaited.
            task = self._store.get(snap.id)
            if task is None or not is_due(task, now, self._window):
                continue

            # Claim first: a second tick (or a re-entrant one) sees notified=True.
            if not self._store.try_mark_notified(task.id):
                continue

            await self._send_notification(task)
            self._alerts.alert(f"⏰ Reminder: {task.text}  (/done {task.id} to mark complete)", level="info")
            logger.info("Reminder fired task_id=%s", task.id)
            fired.append(task)

        return fired

    async def _send_notification(self, task: Task) -> None:
        if self._notifier.permission is not NotificationPermission.GRANTED:
            logger.debug("Notification skipped task_id=%s permission=%s", task.id, self._notifier.permission)
            return
        try:
            await self._notifier.notify(title=NOTIFICATION_TITLE, body=f"⏰ {task.text}", tag=task.id)
        except NotificationUnavailable:
            logger.debug("Notification unavailable task_id=%s", task.id, exc_info=True)
        except Exception:
            logger.exception("Notifier failed task_id=%s", task.id)

    async def run(self) -> None:
        """
        Poll forever: one immediate check, then one every interval.

        To stop the poller, cancel the coroutine/task (see stop()).
        """
        logger.info(
            "Reminder poller started interval=%.1fs window=%.0fs",
            self._interval,
            self._window.total_seconds(),
        )
        try:
            while True:
                try:
                    await self.check_reminders()
                except Exception:
                    logger.exception("Reminder check failed")
                await asyncio.sleep(self._interval)
        finally:
            logger.info("Reminder poller stopped")

    def start(self) -> asyncio.Task[None]:
        """Start polling on the running event loop (idempotent)."""
        if self._runner is None or self._runner.done():
            self._runner = asyncio.create_task(self.run(), name="reminder-poller")
        return self._runner

    async def stop(self) -> None:
        runner, self._runner = self._runner, None
        if runner is None:
            return
        runner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await runner
