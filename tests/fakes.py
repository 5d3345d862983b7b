# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import UTC, datetime

from quest_clock.errors import DataAccessError
from quest_clock.quests.quest_models import Quest
from quest_clock.tasks.task_models import Frequency, NewTaskInstance, RecurrenceRule, Task, WorkflowStatus


class FakeQuestRepo:
    """
    In-memory QuestRepo.

    - records every set_quest_active call in `writes`
    - `fail_flip_ids`: quest ids whose flip raises DataAccessError
    - `fail_list`: make list_schedulable_quests raise
    """

    def __init__(self, quests: list[Quest] | None = None) -> None:
        self.quests: dict[int, Quest] = {q.id: q for q in quests or []}
        self.writes: list[tuple[int, bool]] = []
        self.fail_flip_ids: set[int] = set()
        self.fail_list = False
        self._lock = threading.Lock()

    def _team(self, team_id: str) -> list[Quest]:
        out = [q for q in self.quests.values() if q.team_id == team_id]
        out.sort(key=lambda q: (q.start, q.id))
        return out

    def list_schedulable_quests(self, team_id: str) -> list[Quest]:
        if self.fail_list:
            raise DataAccessError("quests table unavailable")
        return [replace(q) for q in self._team(team_id) if not q.is_archived]

    def set_quest_active(self, quest_id: int, active: bool) -> None:
        if quest_id in self.fail_flip_ids:
            raise DataAccessError(f"cannot update quest {quest_id}")
        with self._lock:
            self.writes.append((quest_id, active))
            self.quests[quest_id] = replace(self.quests[quest_id], is_active=active)

    def find_quest_covering(self, team_id: str, at: datetime) -> Quest | None:
        for q in self._team(team_id):
            if not q.is_archived and q.contains(at):
                return q
        return None

    def find_active_quest(self, team_id: str) -> Quest | None:
        for q in self._team(team_id):
            if q.is_active:
                return q
        return None


class FakeStatusRepo:
    def __init__(self, statuses: list[WorkflowStatus] | None = None) -> None:
        self.statuses = list(statuses or [])

    def find_backlog_status(self, team_id: str) -> WorkflowStatus | None:
        for s in self.statuses:
            if s.team_id == team_id and s.category == "backlog":
                return s
        return None


class FakeTaskRepo:
    """
    In-memory TaskRepo.

    - `fail_insert_for`: template ids whose clone insert raises
    - `fail_advance_for`: template ids whose next_due update raises
    """

    def __init__(self, templates: list[Task] | None = None) -> None:
        self.tasks: dict[int, Task] = {t.id: t for t in templates or []}
        self.instances: list[tuple[int, NewTaskInstance]] = []
        self.fail_insert_for: set[int] = set()
        self.fail_advance_for: set[int] = set()
        self._next_id = 1000
        self._lock = threading.Lock()

    def list_due_templates(self, *, now: datetime) -> list[Task]:
        out = [
            t
            for t in self.tasks.values()
            if t.is_recurring and t.next_due is not None and t.next_due <= now
        ]
        out.sort(key=lambda t: (t.next_due, t.id))
        return out

    def add_instance(self, instance: NewTaskInstance) -> int:
        if instance.parent_template_id in self.fail_insert_for:
            raise DataAccessError("insert rejected: foreign key violation")
        with self._lock:
            self._next_id += 1
            self.instances.append((self._next_id, instance))
            return self._next_id

    def advance_template(self, template_id: int, next_due: datetime) -> None:
        if template_id in self.fail_advance_for:
            raise DataAccessError("update timed out")
        with self._lock:
            self.tasks[template_id] = replace(self.tasks[template_id], next_due=next_due)

    def end_recurrence(self, template_id: int) -> None:
        with self._lock:
            self.tasks[template_id] = replace(self.tasks[template_id], is_recurring=False)

    def instances_of(self, template_id: int) -> list[NewTaskInstance]:
        return [i for _, i in self.instances if i.parent_template_id == template_id]


# ---- builders ----

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def day(n: int, hour: int = 0) -> datetime:
    """Day `n` of March 2026, UTC."""
    return datetime(2026, 3, n, hour, tzinfo=UTC)


def make_quest(
    quest_id: int,
    start: datetime,
    end: datetime | None,
    *,
    team_id: str = "team-a",
    name: str | None = None,
    is_active: bool = False,
    is_archived: bool = False,
) -> Quest:
    return Quest(
        id=quest_id,
        team_id=team_id,
        name=name or f"Quest {quest_id}",
        start=start,
        end=end,
        is_active=is_active,
        is_archived=is_archived,
    )


def make_template(
    template_id: int,
    *,
    next_due: datetime,
    frequency: Frequency = Frequency.DAILY,
    interval: int = 1,
    recurrence_end: datetime | None = None,
    team_id: str = "team-a",
    quest_id: int | None = 7,
    status_id: int | None = 70,
) -> Task:
    return Task(
        id=template_id,
        team_id=team_id,
        title=f"Recurring {template_id}",
        description="weekly report",
        quest_id=quest_id,
        status_id=status_id,
        size_id="size-m",
        urgency_id="urg-high",
        assignee_id="user-1",
        client_id="client-9",
        xp_points=30,
        is_recurring=True,
        recurrence_rule=RecurrenceRule(frequency, interval),
        next_due=next_due,
        recurrence_end=recurrence_end,
    )
