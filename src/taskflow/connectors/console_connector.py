# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import getpass
import logging
import threading
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..auth.session import LocalAuth, Session
from ..cli.commands import registry as command_registry
from ..cli.commands import render_view
from ..core.state import AppState
from ..errors import AuthError
from ..tasks import task_api
from ..tasks.projection import project

logger = logging.getLogger(__name__)

LineReader = Callable[[str], Awaitable[str]]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def _read_stdin(prompt: str) -> str:
    """
    Read one line with input() on a daemon thread.

    A read abandoned on Ctrl+C never blocks interpreter shutdown. Store
    mutations stay on the loop thread.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def deliver(line: str | None, exc: Exception | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def runner() -> None:
        line: str | None = None
        exc: Exception | None = None
        try:
            line = input(prompt)
        except Exception as e:
            exc = e
        # The loop may already be closed if the read was abandoned.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(deliver, line, exc)

    threading.Thread(target=runner, name="taskflow-stdin", daemon=True).start()
    return await fut


def sign_in_interactive(auth: LocalAuth, *, attempts: int = 3) -> Session | None:
    """Console sign-in flow shown when there is no active session."""
    if not auth.configured:
        _print_ts("[AUTH] Sign-in is not configured. Set TASKFLOW_AUTH_USER and TASKFLOW_AUTH_PASSWORD.")
        return None

    _print_ts("[AUTH] Please sign in to view your tasks.")
    for _ in range(max(1, attempts)):
        try:
            user = input("User: ")
            password = getpass.getpass("Password: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        try:
            return auth.sign_in(user, password)
        except AuthError as e:
            _print_ts(f"[AUTH] {e}")
    return None


async def run_console_loop(state: AppState, *, read_line: LineReader | None = None) -> None:
    """
    Interactive task console.

    Plain text adds a medium-priority task; /commands do everything else.
    Returns on /exit, EOF or /logout. Ctrl+C cancels the pending read.
    """
    read = read_line or _read_stdin
    logger.info("Console connector started (user=%s).", state.session.user if state.session else None)
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    print(render_view(project(state.task_store.snapshot(), state.priority_filter), state))

    while state.session is not None:
        try:
            user_input = (await read(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            if user_input.startswith("/"):
                reply = await command_registry.handle(state, user_input)
            else:
                reply = task_api.add_task(state, user_input).message
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            _print_ts(reply)

    logger.info("Console connector finished.")
