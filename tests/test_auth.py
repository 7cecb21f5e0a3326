# tests/test_auth.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskflow.auth.session import LocalAuth, SessionStore
from taskflow.cli.bootstrap import create_initial_state
from taskflow.errors import AuthError

from .fakes import MemoryStorage


def test_sign_in_persists_session(settings: SimpleNamespace) -> None:
    auth = LocalAuth(settings)
    assert auth.current_session() is None

    session = auth.sign_in(" alice ", "s3cret")
    assert session.user == "alice"

    # A fresh instance sees the saved session.
    restored = LocalAuth(settings).current_session()
    assert restored == session

    auth.sign_out()
    assert auth.current_session() is None


@pytest.mark.parametrize(("user", "password"), [("alice", "wrong"), ("bob", "s3cret"), ("", "")])
def test_sign_in_rejects_bad_credentials(settings: SimpleNamespace, user: str, password: str) -> None:
    auth = LocalAuth(settings)
    with pytest.raises(AuthError):
        auth.sign_in(user, password)
    assert auth.current_session() is None


def test_sign_in_requires_configuration(settings: SimpleNamespace) -> None:
    settings.auth_password = ""
    auth = LocalAuth(settings)
    assert not auth.configured
    with pytest.raises(AuthError, match="not configured"):
        auth.sign_in("alice", "")


def test_session_for_other_user_is_ignored(settings: SimpleNamespace) -> None:
    LocalAuth(settings).sign_in("alice", "s3cret")
    settings.auth_user = "carol"
    assert LocalAuth(settings).current_session() is None


def test_corrupt_session_file_means_signed_out(settings: SimpleNamespace) -> None:
    settings.session_path.write_text("{broken", "utf-8")
    assert SessionStore(settings.session_path).load() is None
    assert LocalAuth(settings).current_session() is None


def test_task_state_requires_session(settings: SimpleNamespace) -> None:
    with pytest.raises(AuthError):
        create_initial_state(session=None, settings=settings, storage=MemoryStorage())
