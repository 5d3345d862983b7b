"""
Task subsystem.

Components:
- task_models.py: data structures (Task, RecurrenceRule, WorkflowStatus, outcomes)
- task_store.py: SQLite-backed storage for templates and instances
- status_store.py: SQLite-backed workflow statuses
- recurrence.py: rule arithmetic
- resolvers.py: fallback chains for the target quest / status of a new instance
- recurrence_expander.py: the due-template sweep
"""
