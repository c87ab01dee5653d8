# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "HABIT_APP_NAME": "App display name (default: HabitTrack).",
    "HABIT_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "HABIT_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Notifications
    "HABIT_NOTIFICATIONS_ENABLED": "Allow reminders; false behaves like a denied permission.",
    "HABIT_REMINDER_POLL_SECONDS": "How often the reminder loop checks for due reminders (default: 30).",
    # Paths (gitignored)
    "HABIT_DATA_DIR": "Local data directory (default: .local/habittrack).",
    "HABIT_LOCAL_DB_PATH": "App-local key-value store (default: <data_dir>/app.sqlite3).",
    "HABIT_SHARED_DB_PATH": (
        "Shared key-value store read by the widget (default: <data_dir>/shared/group.sqlite3)."
    ),
}
