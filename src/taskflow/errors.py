# src/taskflow/errors.py

"""
Error taxonomy.

- TaskValidationError: blocks a mutation, shown to the user as a transient message.
- StorageReadError: corrupt persisted data; recovered locally by starting empty.
- NotificationUnavailable: the notification sink cannot deliver; degrades silently.
"""

from __future__ import annotations


class TaskFlowError(Exception):
    """Base class for all application errors."""


class TaskValidationError(TaskFlowError, ValueError):
    pass


class TaskNotFoundError(TaskFlowError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class StorageReadError(TaskFlowError):
    pass


class NotificationUnavailable(TaskFlowError):
    pass


class AuthError(TaskFlowError):
    pass
