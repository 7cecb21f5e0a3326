"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority)
- storage.py: key-value storage + JSON codec for the task collection
- task_store.py: in-memory store mirrored to storage on every mutation
- reminder_poller.py: polling loop that fires due reminders exactly once
- projection.py: filtered/sorted view and counts
- task_api.py: user-facing actions returning short status messages
"""
