# src/taskflow/notify/desktop.py

from __future__ import annotations

import asyncio
import logging
import shutil

from ..core.ports import NotificationPermission
from ..errors import NotificationUnavailable

logger = logging.getLogger(__name__)


class DesktopNotifier:
    """
    Desktop notifications through the freedesktop `notify-send` tool.

    Permission is DEFAULT until requested; the request succeeds when the
    binary is available on PATH.
    """

    def __init__(self, *, binary: str = "notify-send", expire_ms: int = 10_000) -> None:
        self._binary = binary
        self._expire_ms = int(expire_ms)
        self._path: str | None = None
        self._permission = NotificationPermission.DEFAULT

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    async def request_permission(self) -> NotificationPermission:
        self._path = shutil.which(self._binary)
        if self._path:
            self._permission = NotificationPermission.GRANTED
        else:
            logger.warning("%s not found on PATH; desktop notifications disabled", self._binary)
            self._permission = NotificationPermission.DENIED
        return self._permission

    async def notify(self, *, title: str, body: str, tag: str | None = None) -> None:
        if self._permission is not NotificationPermission.GRANTED or not self._path:
            raise NotificationUnavailable(f"desktop notifications are {self._permission.value}")

        args = [self._path, "--app-name=TaskFlow", f"--expire-time={self._expire_ms}"]
        if tag:
            # Lets the notification daemon replace an earlier popup for the same task.
            args.append(f"--hint=string:x-canonical-private-synchronous:{tag}")
        args += [title, body]

        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await proc.communicate()
        except OSError as e:
            raise NotificationUnavailable(f"failed to run {self._binary}: {e}") from e

        if proc.returncode != 0:
            raise NotificationUnavailable(
                f"{self._binary} exited with {proc.returncode}: {stderr.decode(errors='replace').strip()}"
            )
