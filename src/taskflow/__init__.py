"""TaskFlow: a personal task tracker with priorities and timed reminders."""

__version__ = "0.1.0"
