# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (storage, clock, notifier, alerts) into AppState,
- loads the task store and builds the reminder poller.
"""

from __future__ import annotations

import logging

from ..auth.session import LocalAuth, Session
from ..config import get_settings
from ..core.ports import AlertSink, Clock, KeyValueStorage, Notifier, SystemClock
from ..core.state import AppState
from ..errors import AuthError
from ..notify import ConsoleAlerts, build_notifier
from ..tasks.projection import PriorityFilter
from ..tasks.reminder_poller import ReminderPoller
from ..tasks.storage import SqliteKeyValueStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    session: Session | None,
    settings=None,
    auth: LocalAuth | None = None,
    clock: Clock | None = None,
    storage: KeyValueStorage | None = None,
    notifier: Notifier | None = None,
    alerts: AlertSink | None = None,
) -> AppState:
    """
    Create AppState for a signed-in user.

    Collaborators are injectable so tests can use a fake clock and in-memory
    storage. If settings is None, falls back to get_settings().
    """
    if session is None:
        raise AuthError("An active session is required to open the task list")

    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    clock = clock or SystemClock()
    storage = storage if storage is not None else SqliteKeyValueStorage(settings.db_path)
    notifier = notifier if notifier is not None else build_notifier(settings)
    alerts = alerts if alerts is not None else ConsoleAlerts()

    store = TaskStore(storage, clock=clock, key=settings.storage_key)
    store.load()

    poller = ReminderPoller(
        store,
        notifier,
        alerts,
        clock=clock,
        interval_seconds=settings.reminder_poll_seconds,
        window_seconds=settings.reminder_window_seconds,
    )

    logger.info("State ready for user=%s tasks=%d notifier=%s", session.user, len(store), type(notifier).__name__)

    return AppState(
        settings=settings,
        auth=auth or LocalAuth(settings),
        session=session,
        clock=clock,
        task_store=store,
        notifier=notifier,
        alerts=alerts,
        poller=poller,
        priority_filter=PriorityFilter.ALL,
    )
