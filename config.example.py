# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "WORKOUT_APP_NAME": "App display name (default: workout-tracker).",
    "WORKOUT_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "WORKOUT_LOG_MAX_BYTES": "Rotate the log file at this size in bytes (default: 1000000, 0 disables rotation).",
    "WORKOUT_LOG_BACKUP_COUNT": "Rotated log files to keep (default: 3).",
    # Connectors
    "WORKOUT_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Local paths
    "WORKOUT_DATA_DIR": "Base directory for local data (default: .local/workout).",
    "WORKOUT_STORAGE_DIR": "Directory holding workoutTasks.json / workoutCategories.json "
    "(default: <data_dir>/storage).",
    "WORKOUT_LOG_DIR": "Directory for the <app name>.log file (default: <data_dir>).",
}
