# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "LIFEPLAN_APP_NAME": "App display name (default: lifeplan).",
    "LIFEPLAN_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "LIFEPLAN_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Paths (gitignored)
    "LIFEPLAN_DATA_DIR": "Local data directory (default: .local/lifeplan).",
    "LIFEPLAN_STORE_DB_PATH": "Key/value SQLite path (default: <data_dir>/store.sqlite3).",
    # Storage slots
    "LIFEPLAN_TASKS_KEY": "Slot holding the task/goal records (default: task-store).",
    "LIFEPLAN_TAGS_KEY": "Slot holding the tag vocabulary (default: tags-store).",
    # Behaviour
    "LIFEPLAN_COMPLETION_SOUND": "Ring the terminal bell when something is completed (default: true).",
    "LIFEPLAN_DUPLICATE_WHEN_DRAGGING": (
        "Moves into or out of goal buckets copy the item instead of moving it (default: false)."
    ),
    "LIFEPLAN_FOCUS_SESSION_MINUTES": "Minutes per focus session for achievements (default: 25).",
    "LIFEPLAN_SEED_DEMO": "Seed starter records into an empty store (default: false).",
}
