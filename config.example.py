# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKFLOW_CONSOLE_ENABLED": "Run the interactive console (default: true). false = poll reminders only.",
    # Local data
    "TASKFLOW_DATA_DIR": "Directory for local data and logs (default: .local/taskflow).",
    "TASKFLOW_DB_PATH": "SQLite key-value file holding the task list (default: <data_dir>/taskflow.sqlite3).",
    "TASKFLOW_SESSION_PATH": "Signed-in session file (default: <data_dir>/session.json).",
    "TASKFLOW_STORAGE_KEY": "Key the task list is stored under (default: taskflow-tasks).",
    # Reminders
    "TASKFLOW_REMINDER_POLL_SECONDS": "Seconds between reminder checks (default: 30).",
    "TASKFLOW_REMINDER_WINDOW_SECONDS": "How long after its time a reminder may still fire (default: 60).",
    "TASKFLOW_NOTIFIER": "desktop | matrix | none (default: desktop).",
    # Auth gate
    "TASKFLOW_AUTH_USER": "User name accepted at sign-in.",
    "TASKFLOW_AUTH_PASSWORD": "Password accepted at sign-in.",
    # Matrix notifier
    "TASKFLOW_MATRIX_HOMESERVER": "Homeserver URL, e.g. https://matrix.org.",
    "TASKFLOW_MATRIX_USER_ID": "Bot user id, e.g. @taskflow:matrix.org.",
    "TASKFLOW_MATRIX_PASSWORD": "Needed once to create a session; the token is saved afterwards.",
    "TASKFLOW_MATRIX_ROOM": "Room id reminders are sent to.",
    "TASKFLOW_MATRIX_STORE_PATH": "Where the Matrix session is stored (default: <data_dir>/matrix_store).",
}
