# src/taskflow/notify/matrix.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from nio import AsyncClient, AsyncClientConfig, LoginResponse, RoomSendResponse

from ..core.ports import NotificationPermission
from ..errors import NotificationUnavailable

logger = logging.getLogger(__name__)


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


class MatrixNotifier:
    """
    Sends reminder notifications as plain text messages to one Matrix room.

    Permission maps onto the Matrix session:
    - DEFAULT  until request_permission() runs
    - GRANTED  once a saved session is restored or a password login succeeds
    - DENIED   when the account is not configured or login fails

    The access token is kept in <store_dir>/session.json so later runs do not
    need the password.
    """

    def __init__(self, settings) -> None:
        self._homeserver = (getattr(settings, "matrix_homeserver", "") or "").strip()
        self._user_id = (getattr(settings, "matrix_user_id", "") or "").strip()
        self._password = (getattr(settings, "matrix_password", "") or "").strip()
        self._room_id = (getattr(settings, "matrix_room", "") or "").strip()
        self._store_dir = Path(getattr(settings, "matrix_store_path", Path(".local/taskflow/matrix")))
        self._device_name = f"{getattr(settings, 'app_name', 'taskflow')} (Python)"
        self._client: AsyncClient | None = None
        self._permission = NotificationPermission.DEFAULT

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    @property
    def session_file(self) -> Path:
        return self._store_dir / "session.json"

    async def request_permission(self) -> NotificationPermission:
        if self._client is not None:
            return self._permission

        if not self._homeserver or not self._user_id or not self._room_id:
            logger.error(
                "Matrix notifier is not configured: set TASKFLOW_MATRIX_HOMESERVER, "
                "TASKFLOW_MATRIX_USER_ID and TASKFLOW_MATRIX_ROOM"
            )
            self._permission = NotificationPermission.DENIED
            return self._permission

        client = AsyncClient(
            self._homeserver,
            self._user_id,
            config=AsyncClientConfig(store_sync_tokens=False),
        )

        if self._restore_session(client) or await self._login(client):
            self._client = client
            self._permission = NotificationPermission.GRANTED
        else:
            await client.close()
            self._permission = NotificationPermission.DENIED
        return self._permission

    def _restore_session(self, client: AsyncClient) -> bool:
        if not self.session_file.exists():
            return False
        try:
            data = json.loads(self.session_file.read_text("utf-8"))
            access_token = data["access_token"]
            user_id = data["user_id"]
            device_id = data["device_id"]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Failed to restore Matrix session.json, will try password login: %r", e)
            return False

        client.access_token = str(access_token)
        client.user_id = str(user_id)
        client.device_id = str(device_id)
        logger.info("Matrix session restored for %s", client.user_id)
        return True

    async def _login(self, client: AsyncClient) -> bool:
        if not self._password:
            logger.error(
                "Matrix session.json not found and password is not set. "
                "Set TASKFLOW_MATRIX_PASSWORD once to bootstrap a session."
            )
            return False

        resp = await client.login(password=self._password, device_name=self._device_name)
        if not isinstance(resp, LoginResponse):
            logger.error("Matrix login failed: %r", resp)
            return False

        try:
            self._store_dir.mkdir(parents=True, exist_ok=True)
            _atomic_write_json(
                self.session_file,
                {"access_token": resp.access_token, "user_id": resp.user_id, "device_id": resp.device_id},
            )
            logger.info("Matrix session saved to %s (user=%s)", self.session_file, resp.user_id)
        except OSError:
            # Session still usable for this run.
            logger.exception("Failed to write Matrix session to %s", self.session_file)
        return True

    async def notify(self, *, title: str, body: str, tag: str | None = None) -> None:
        client = self._client
        if client is None or self._permission is not NotificationPermission.GRANTED:
            raise NotificationUnavailable(f"matrix notifications are {self._permission.value}")

        resp = await client.room_send(
            room_id=self._room_id,
            message_type="m.room.message",
            content={"msgtype": "m.text", "body": f"{title}: {body}"},
            ignore_unverified_devices=True,
        )
        if not isinstance(resp, RoomSendResponse):
            raise NotificationUnavailable(f"matrix room_send failed: {resp!r}")

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.close()
