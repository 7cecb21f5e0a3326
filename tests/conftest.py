# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.auth.session import LocalAuth, Session
from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState
from taskflow.tasks.reminder_poller import ReminderPoller
from taskflow.tasks.task_store import TaskStore

from .fakes import FakeAlerts, FakeClock, FakeNotifier, MemoryStorage

START = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and auth.

    A SimpleNamespace instead of the real config keeps tests isolated from
    the environment and any local .env file.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        console_enabled=True,
        data_dir=tmp_path,
        db_path=tmp_path / "taskflow.sqlite3",
        session_path=tmp_path / "session.json",
        storage_key="taskflow-tasks",
        reminder_poll_seconds=30.0,
        reminder_window_seconds=60.0,
        notifier="none",
        auth_user="alice",
        auth_password="s3cret",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def alerts() -> FakeAlerts:
    return FakeAlerts()


@pytest.fixture()
def store(storage: MemoryStorage, clock: FakeClock) -> TaskStore:
    s = TaskStore(storage, clock=clock)
    s.load()
    return s


@pytest.fixture()
def poller(store: TaskStore, notifier: FakeNotifier, alerts: FakeAlerts, clock: FakeClock) -> ReminderPoller:
    return ReminderPoller(store, notifier, alerts, clock=clock, interval_seconds=30, window_seconds=60)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    clock: FakeClock,
    storage: MemoryStorage,
    notifier: FakeNotifier,
    alerts: FakeAlerts,
) -> AppState:
    """AppState wired with deterministic fakes for a signed-in user."""
    return create_initial_state(
        session=Session(user="alice", started_at=START.timestamp()),
        settings=settings,
        auth=LocalAuth(settings),
        clock=clock,
        storage=storage,
        notifier=notifier,
        alerts=alerts,
    )
