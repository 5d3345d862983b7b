# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/quest_clock/config.py for parsing and defaults.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "QUEST_CLOCK_APP_NAME": "App display name (default: quest-clock).",
    "QUEST_CLOCK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "QUEST_CLOCK_DATA_DIR": "Local data directory, also holds quest_clock.log (default: .local/quest_clock).",
    "QUEST_CLOCK_DB_PATH": "SQLite database path (default: <data_dir>/quest_clock.sqlite3).",
    "QUEST_CLOCK_DB_TIMEOUT_SECONDS": "SQLite busy timeout per connection (default: 30).",
    # Sweeps
    "QUEST_CLOCK_EXPAND_CONCURRENCY": "Templates expanded in parallel per sweep (default: 8).",
    "QUEST_CLOCK_RECONCILE_CONCURRENCY": "Quest flips issued in parallel per team (default: 8).",
    # `quest-clock watch`
    "QUEST_CLOCK_WATCH_INTERVAL_SECONDS": "Seconds between sweeps (default: 3600).",
    "QUEST_CLOCK_WATCH_TEAMS": "Comma/space separated team ids to reconcile on each tick.",
}
