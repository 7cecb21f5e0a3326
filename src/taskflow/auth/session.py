# src/taskflow/auth/session.py

from __future__ import annotations

import contextlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

from ..errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Session:
    user: str
    started_at: float


class SessionStore:
    """Single signed-in session persisted as a small private JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Session | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
            return Session(user=str(data["user"]), started_at=float(data["started_at"]))
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Session file %s is unreadable; treating as signed out", self._path)
            return None

    def save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps({"user": session.user, "started_at": session.started_at}), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()


class LocalAuth:
    """
    Minimal stand-in for an external auth service.

    Credentials come from settings (auth_user / auth_password). The task list
    is only reachable with an active session; nothing from here flows into
    the task store.
    """

    def __init__(self, settings, store: SessionStore | None = None) -> None:
        self._user = (getattr(settings, "auth_user", "") or "").strip()
        self._password = getattr(settings, "auth_password", "") or ""
        self._store = store or SessionStore(getattr(settings, "session_path"))

    @property
    def configured(self) -> bool:
        return bool(self._user and self._password)

    def current_session(self) -> Session | None:
        session = self._store.load()
        if session is None:
            return None
        if session.user != self._user:
            # Credentials changed since the session was created.
            logger.info("Stored session for %r no longer matches configured user", session.user)
            return None
        return session

    def sign_in(self, user: str, password: str) -> Session:
        if not self.configured:
            raise AuthError("Sign-in is not configured: set TASKFLOW_AUTH_USER and TASKFLOW_AUTH_PASSWORD")

        user_ok = hmac.compare_digest(user.strip().encode(), self._user.encode())
        pass_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if not (user_ok and pass_ok):
            logger.warning("Failed sign-in attempt for user=%r", user)
            raise AuthError("Invalid user name or password")

        session = Session(user=self._user, started_at=time.time())
        self._store.save(session)
        logger.info("Signed in user=%s", session.user)
        return session

    def sign_out(self) -> None:
        self._store.clear()
        logger.info("Signed out")
