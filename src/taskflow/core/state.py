# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .ports import AlertSink, Clock, Notifier

if TYPE_CHECKING:
    from ..auth.session import LocalAuth, Session
    from ..tasks.projection import PriorityFilter
    from ..tasks.reminder_poller import ReminderPoller
    from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything one signed-in console session needs.

    Built by cli.bootstrap.create_initial_state(); only reachable after the
    auth gate has produced a session.
    """

    settings: Any
    auth: LocalAuth
    session: Session | None
    clock: Clock
    task_store: TaskStore
    notifier: Notifier
    alerts: AlertSink
    poller: ReminderPoller
    priority_filter: PriorityFilter
