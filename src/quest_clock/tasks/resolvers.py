# src/quest_clock/tasks/resolvers.py

from __future__ import annotations

"""
Fallback chains for where a freshly cloned task lands.

Each resolver answers one question and returns an id or None; the chain is
tried in order and the first non-None answer wins. Keeping the tiers as
separate functions lets each one be exercised on its own.
"""

from collections.abc import Callable, Sequence
from datetime import datetime

from ..core.ports import QuestRepo, StatusRepo
from .task_models import Task

QuestResolver = Callable[[QuestRepo, Task, datetime], int | None]
StatusResolver = Callable[[StatusRepo, Task], int | None]


def resolve_first(resolvers: Sequence[Callable[..., int | None]], *args: object) -> int | None:
    for resolver in resolvers:
        found = resolver(*args)
        if found is not None:
            return found
    return None


# ---- target quest ----


def quest_covering_date(repo: QuestRepo, template: Task, intended: datetime) -> int | None:
    """A non-archived quest of the team whose window contains the intended date."""
    quest = repo.find_quest_covering(template.team_id, intended)
    return quest.id if quest else None


def any_active_quest(repo: QuestRepo, template: Task, intended: datetime) -> int | None:
    """Whatever quest the team currently has deployed."""
    quest = repo.find_active_quest(template.team_id)
    return quest.id if quest else None


def template_quest(repo: QuestRepo, template: Task, intended: datetime) -> int | None:
    """Last resort: the template's own quest, even if closed or archived."""
    return template.quest_id


QUEST_RESOLVERS: tuple[QuestResolver, ...] = (
    quest_covering_date,
    any_active_quest,
    template_quest,
)


# ---- target status ----


def backlog_status(repo: StatusRepo, template: Task) -> int | None:
    status = repo.find_backlog_status(template.team_id)
    return status.id if status else None


def template_status(repo: StatusRepo, template: Task) -> int | None:
    return template.status_id


STATUS_RESOLVERS: tuple[StatusResolver, ...] = (
    backlog_status,
    template_status,
)


def resolve_target_quest(
    repo: QuestRepo,
    template: Task,
    intended: datetime,
    resolvers: Sequence[QuestResolver] = QUEST_RESOLVERS,
) -> int | None:
    return resolve_first(resolvers, repo, template, intended)


def resolve_target_status(
    repo: StatusRepo,
    template: Task,
    resolvers: Sequence[StatusResolver] = STATUS_RESOLVERS,
) -> int | None:
    return resolve_first(resolvers, repo, template)
