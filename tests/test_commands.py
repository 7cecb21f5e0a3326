# tests/test_commands.py

from __future__ import annotations

from datetime import timedelta

import pytest

from taskflow.cli.commands import CommandRegistry, registry
from taskflow.core.ports import NotificationPermission
from taskflow.core.state import AppState
from taskflow.tasks.projection import PriorityFilter
from taskflow.tasks.task_models import Priority

from .fakes import FakeClock


@pytest.mark.asyncio
async def test_command_registry_routes_sync_and_async(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"sync": 0, "async": 0}

    def h_sync(state, args):
        called["sync"] += 1
        return "sync:" + ",".join(args)

    async def h_async(state, args):
        called["async"] += 1
        return "async"

    reg.register("a", h_sync, "a", aliases=["aa"])
    reg.register("b", h_async, "b")

    assert await reg.handle(state, '/a x "y z"') == "sync:x,y z"
    assert await reg.handle(state, "/AA") == "sync:"
    assert await reg.handle(state, "/b") == "async"
    assert called == {"sync": 2, "async": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_add_with_priority_and_reminder(state: AppState, clock: FakeClock) -> None:
    reply = await registry.handle(state, "/add -p high -r +10m Submit report")

    assert reply == "Task added with reminder set!"
    (task,) = state.task_store.snapshot()
    assert task.text == "Submit report"
    assert task.priority is Priority.HIGH
    assert task.reminder_time == clock.now() + timedelta(minutes=10)


@pytest.mark.asyncio
async def test_add_rejects_bad_input(state: AppState) -> None:
    assert "Unknown priority" in await registry.handle(state, "/add -p urgent thing")
    assert "Unrecognized reminder time" in await registry.handle(state, "/add -r whenever thing")
    assert "must not be empty" in await registry.handle(state, "/add -p low")
    assert len(state.task_store) == 0


@pytest.mark.asyncio
async def test_list_sets_filter_and_renders(state: AppState) -> None:
    await registry.handle(state, "/add -p low Buy milk")
    await registry.handle(state, "/add -p high Pay rent")

    out = await registry.handle(state, "/list")
    assert out.index("Pay rent") < out.index("Buy milk")
    assert "Total: 2" in out

    out = await registry.handle(state, "/list low")
    assert state.priority_filter is PriorityFilter.LOW
    assert "Buy milk" in out and "Pay rent" not in out

    assert "Unknown filter" in await registry.handle(state, "/list urgent")


@pytest.mark.asyncio
async def test_done_edit_remind_rm(state: AppState, clock: FakeClock) -> None:
    await registry.handle(state, "/add Water plants")
    (task,) = state.task_store.snapshot()

    assert "completed" in await registry.handle(state, f"/done {task.id}")
    assert state.task_store.get(task.id).completed is True

    assert await registry.handle(state, f"/edit {task.id} Water all plants") == "Task updated."
    assert state.task_store.get(task.id).text == "Water all plants"

    assert await registry.handle(state, f"/remind {task.id} +1h") == "Reminder set."
    assert state.task_store.get(task.id).reminder_time == clock.now() + timedelta(hours=1)

    assert await registry.handle(state, f"/edit {task.id} -r off") == "Task updated."
    assert state.task_store.get(task.id).reminder_time is None

    assert "future" in await registry.handle(state, f"/remind {task.id} +0m")

    assert await registry.handle(state, f"/rm {task.id}") == "Task deleted."
    assert len(state.task_store) == 0


@pytest.mark.asyncio
async def test_clear_commands(state: AppState) -> None:
    for text in ("a", "b", "c"):
        await registry.handle(state, f"/add {text}")
    ids = [t.id for t in state.task_store.snapshot()]
    await registry.handle(state, f"/done {ids[0]}")
    await registry.handle(state, f"/done {ids[1]}")

    assert await registry.handle(state, "/clear completed") == "Cleared 2 completed task(s)"
    assert await registry.handle(state, "/clear all") == "All tasks cleared"
    assert "Usage" in await registry.handle(state, "/clear")


@pytest.mark.asyncio
async def test_notify_and_logout(state: AppState) -> None:
    state.notifier.permission = NotificationPermission.DEFAULT
    assert (await registry.handle(state, "/notify")).startswith("Notifications enabled!")

    state.auth.sign_in("alice", "s3cret")
    assert await registry.handle(state, "/logout") == "Signed out."
    assert state.session is None
    assert state.auth.current_session() is None


@pytest.mark.asyncio
async def test_help_lists_commands(state: AppState) -> None:
    out = await registry.handle(state, "/help")
    for name in ("/add", "/list", "/done", "/edit", "/remind", "/rm", "/clear", "/notify"):
        assert name in out
