# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and reminder poller depend on Protocols instead of concrete
implementations. This keeps storage/notification backends swappable and lets
tests drive time and persistence deterministically.
"""

from datetime import datetime
from enum import StrEnum
from typing import Awaitable, Protocol


class NotificationPermission(StrEnum):
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"  # not asked yet


class Clock(Protocol):
    """Wall clock. Must return timezone-aware datetimes."""
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now().astimezone()


class KeyValueStorage(Protocol):
    """Passive durable mirror: one text value per key."""
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class Notifier(Protocol):
    """
    System-level notification sink.

    permission:
    - DEFAULT until request_permission() has been called
    - GRANTED / DENIED afterwards

    notify() raises NotificationUnavailable when delivery is not possible.
    """

    @property
    def permission(self) -> NotificationPermission: ...

    def request_permission(self) -> Awaitable[NotificationPermission]: ...

    def notify(self, *, title: str, body: str, tag: str | None = None) -> Awaitable[None]: ...


class AlertSink(Protocol):
    """In-app transient messages (the console equivalent of a toast)."""
    def alert(self, text: str, *, level: str = "info") -> None: ...
