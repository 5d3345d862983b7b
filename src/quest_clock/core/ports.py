# src/quest_clock/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the scheduling core.

The core depends on Protocols instead of concrete implementations.
The SQLite stores implement them; tests swap in in-memory fakes.
Implementations report store failures as DataAccessError.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..quests.quest_models import Quest
    from ..tasks.task_models import NewTaskInstance, Task, WorkflowStatus


class QuestRepo(Protocol):
    # Validator / reconciler API
    def list_schedulable_quests(self, team_id: str) -> list[Quest]: ...
    def set_quest_active(self, quest_id: int, active: bool) -> None: ...

    # Target-quest lookups for the recurrence sweep
    def find_quest_covering(self, team_id: str, at: datetime) -> Quest | None: ...
    def find_active_quest(self, team_id: str) -> Quest | None: ...


class StatusRepo(Protocol):
    def find_backlog_status(self, team_id: str) -> WorkflowStatus | None: ...


class TaskRepo(Protocol):
    # Sweep API (all teams)
    def list_due_templates(self, *, now: datetime) -> list[Task]: ...

    # Instance creation
    def add_instance(self, instance: NewTaskInstance) -> int: ...

    # Template lifecycle
    def advance_template(self, template_id: int, next_due: datetime) -> None: ...
    def end_recurrence(self, template_id: int) -> None: ...
