"""
Notification sinks.

- base.py: NullNotifier and the console alert sink
- desktop.py: notify-send based desktop notifications
- matrix.py: reminders delivered to a Matrix room (matrix-nio)
"""

from __future__ import annotations

from .base import ConsoleAlerts, NullNotifier


def build_notifier(settings):
    """Pick the notifier named by settings.notifier (desktop | matrix | none)."""
    kind = str(getattr(settings, "notifier", "desktop") or "desktop").strip().lower()

    if kind == "matrix":
        from .matrix import MatrixNotifier

        return MatrixNotifier(settings)

    if kind == "desktop":
        from .desktop import DesktopNotifier

        return DesktopNotifier()

    return NullNotifier()


__all__ = ["ConsoleAlerts", "NullNotifier", "build_notifier"]
