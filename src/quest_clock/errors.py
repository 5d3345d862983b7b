# src/quest_clock/errors.py

from __future__ import annotations


class QuestClockError(Exception):
    """Base class for every error raised by quest_clock."""


class ValidationConflict(QuestClockError):
    """
    A proposed quest window overlaps an existing, non-archived quest.

    User-correctable: surface it to whoever is creating/editing the quest.
    """

    def __init__(self, quest_name: str, quest_id: int | None = None) -> None:
        self.quest_name = quest_name
        self.quest_id = quest_id
        super().__init__(f'Schedule overlaps with existing quest: "{quest_name}".')


class DataAccessError(QuestClockError):
    """The store was unreachable or a query failed. Transient: retry the whole operation."""


class CreationFailure(QuestClockError):
    """Inserting a task instance for a recurring template failed."""

    def __init__(self, template_id: int, cause: BaseException | None = None) -> None:
        self.template_id = template_id
        self.cause = cause
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Failed to clone template {template_id}: {detail}")
