# src/taskflow/notify/base.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.ports import NotificationPermission
from ..errors import NotificationUnavailable

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class NullNotifier:
    """Notifier used when notifications are switched off. Always denied."""

    @property
    def permission(self) -> NotificationPermission:
        return NotificationPermission.DENIED

    async def request_permission(self) -> NotificationPermission:
        return NotificationPermission.DENIED

    async def notify(self, *, title: str, body: str, tag: str | None = None) -> None:
        raise NotificationUnavailable("notifications are disabled")


class ConsoleAlerts:
    """Transient in-app messages printed to the terminal."""

    _PREFIX = {"info": "", "success": "[OK] ", "warning": "[WARN] ", "error": "[ERROR] "}

    def alert(self, text: str, *, level: str = "info") -> None:
        prefix = self._PREFIX.get(level, "")
        print(f"\n[{_ts_local()}] {prefix}{text}", flush=True)
        logger.debug("alert level=%s text=%r", level, text)
