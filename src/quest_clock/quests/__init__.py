"""
Quest subsystem.

Components:
- quest_models.py: data structures (Quest, QuestTransition)
- quest_store.py: SQLite-backed storage + query/update helpers
- window_validator.py: overlap check for proposed quest windows
- quest_reconciler.py: flips is_active to match the current time
- quest_api.py: create/reschedule/archive helpers used by the rest of the app
"""
