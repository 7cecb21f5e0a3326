# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, runs the auth gate, builds AppState, then runs the
console and the reminder poller on one event loop until the user quits.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..auth.session import LocalAuth
from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop, sign_in_interactive
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    state.poller.start()

    try:
        if state.settings.console_enabled:
            await run_console_loop(state)
        else:
            stop = asyncio.Event()
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                # Not supported on every platform (e.g. Windows).
                with contextlib.suppress(NotImplementedError, RuntimeError):
                    loop.add_signal_handler(sig, stop.set)
            logger.info("Console disabled. Polling reminders only. Press Ctrl+C to stop.")
            await stop.wait()
    finally:
        await state.poller.stop()

        close = getattr(state.notifier, "close", None)
        if close is not None:
            try:
                await close()
            except Exception:
                logger.debug("Notifier close failed.", exc_info=True)


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    auth = LocalAuth(settings)
    session = auth.current_session() or sign_in_interactive(auth)
    if session is None:
        logger.info("No active session; exiting.")
        return 1

    state = create_initial_state(session=session, settings=settings, auth=auth)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        pass

    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
