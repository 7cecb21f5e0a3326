# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskflow.core.ports import NotificationPermission
from taskflow.core.state import AppState
from taskflow.errors import TaskValidationError
from taskflow.tasks import task_api
from taskflow.tasks.projection import project
from taskflow.tasks.task_models import Priority

from .fakes import FakeClock

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_add_buy_milk_scenario(state: AppState) -> None:
    res = task_api.add_task(state, "Buy milk", priority="low")

    assert res.ok
    tasks = state.task_store.snapshot()
    assert len(tasks) == 1
    assert tasks[0].reminder_notified is False
    assert tasks[0].reminder_time is None

    view = project(tasks, "all")
    assert [t.text for t in view.tasks] == ["Buy milk"]
    assert view.stats.low == 1


def test_add_with_reminder_hints_when_permission_undetermined(state: AppState, clock: FakeClock) -> None:
    state.notifier.permission = NotificationPermission.DEFAULT
    res = task_api.add_task(state, "Call dentist", reminder_time=clock.now() + timedelta(hours=1))
    assert res.ok
    assert res.message.startswith("Task added with reminder set!")
    assert "/notify" in res.message


def test_add_with_reminder_no_hint_when_granted(state: AppState, clock: FakeClock) -> None:
    res = task_api.add_task(state, "Call dentist", reminder_time=clock.now() + timedelta(hours=1))
    assert res.message == "Task added with reminder set!"


def test_add_past_reminder_is_reported(state: AppState, clock: FakeClock) -> None:
    res = task_api.add_task(state, "Too late", reminder_time=clock.now() - timedelta(minutes=1))
    assert not res.ok
    assert res.message == "Reminder time must be in the future"
    assert len(state.task_store) == 0


def test_clear_completed_scenario(state: AppState) -> None:
    ids = [task_api.add_task(state, t).task.id for t in ("a", "b", "c")]
    task_api.toggle_task(state, ids[0])
    task_api.toggle_task(state, ids[1])

    res = task_api.clear_completed(state)

    assert res.ok
    assert res.count == 2
    assert res.message == "Cleared 2 completed task(s)"
    assert [t.id for t in state.task_store.snapshot()] == [ids[2]]


def test_clear_all(state: AppState) -> None:
    task_api.add_task(state, "a")
    task_api.add_task(state, "b")
    res = task_api.clear_all(state)
    assert res.message == "All tasks cleared"
    assert res.count == 2
    assert len(state.task_store) == 0


def test_remove_reminder(state: AppState, clock: FakeClock) -> None:
    task = task_api.add_task(state, "x", reminder_time=clock.now() + timedelta(minutes=5)).task
    res = task_api.remove_reminder(state, task.id)
    assert res.message == "Reminder removed"
    assert state.task_store.get(task.id).reminder_time is None


def test_edit_and_not_found_messages(state: AppState) -> None:
    task = task_api.add_task(state, "old", priority=Priority.HIGH).task
    assert task_api.edit_task(state, task.id, text="new").ok
    assert state.task_store.get(task.id).text == "new"

    assert task_api.edit_task(state, task.id).message == "Nothing to change."
    assert "not found" in task_api.edit_task(state, "missing", text="x").message
    assert not task_api.toggle_task(state, "missing").ok
    assert not task_api.delete_task(state, "missing").ok


@pytest.mark.asyncio
async def test_enable_notifications(state: AppState) -> None:
    state.notifier.permission = NotificationPermission.DEFAULT
    res = await task_api.enable_notifications(state)
    assert res.ok
    assert res.message.startswith("Notifications enabled!")

    again = await task_api.enable_notifications(state)
    assert again.message == "Notifications are granted."


@pytest.mark.asyncio
async def test_enable_notifications_blocked(state: AppState) -> None:
    state.notifier.permission = NotificationPermission.DEFAULT
    state.notifier.grant_on_request = False
    res = await task_api.enable_notifications(state)
    assert not res.ok
    assert res.message.startswith("Notifications blocked.")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+15m", NOW + timedelta(minutes=15)),
        ("+2h", NOW + timedelta(hours=2)),
        ("+1d", NOW + timedelta(days=1)),
        ("14:30", NOW.replace(hour=14, minute=30)),
        ("2026-10-19T09:00+00:00", datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)),
        ("2026-10-19 09:00+00:00", datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)),
    ],
)
def test_parse_reminder_time(raw: str, expected: datetime) -> None:
    assert task_api.parse_reminder_time(raw, NOW) == expected


def test_parse_reminder_time_naive_is_local() -> None:
    parsed = task_api.parse_reminder_time("2026-10-19T09:00", NOW)
    assert parsed.tzinfo is not None
    assert parsed.replace(tzinfo=None) == datetime(2026, 10, 19, 9, 0)


@pytest.mark.parametrize("raw", ["", "soon", "25:99", "+5 weeks"])
def test_parse_reminder_time_rejects_garbage(raw: str) -> None:
    with pytest.raises(TaskValidationError):
        task_api.parse_reminder_time(raw, NOW)


def test_format_reminder_time() -> None:
    assert task_api.format_reminder_time(NOW.replace(hour=14, minute=30), NOW) == "Today at 14:30"
    assert task_api.format_reminder_time(datetime(2026, 10, 19, 9, 5, tzinfo=timezone.utc), NOW) == "Oct 19 at 09:05"
