# src/quest_clock/quests/window_validator.py

from __future__ import annotations

"""
Quest window overlap check.

Two windows A (candidate) and B (existing) overlap iff

    A.start <= B.end  and  A.end >= B.start

with a missing end read as +infinity. The test is symmetric, so a candidate
inside, around, or straddling an existing window is rejected alike.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from ..core.ports import QuestRepo
from ..core.timeutil import ensure_utc
from ..errors import ValidationConflict
from .quest_models import Quest

logger = logging.getLogger(__name__)


def windows_overlap(
    a_start: datetime,
    a_end: datetime | None,
    b_start: datetime,
    b_end: datetime | None,
) -> bool:
    start_before_b_end = b_end is None or a_start <= b_end
    end_after_b_start = a_end is None or a_end >= b_start
    return start_before_b_end and end_after_b_start


def find_overlapping_quest(
    quests: Iterable[Quest],
    start: datetime,
    end: datetime | None,
    exclude_id: int | None = None,
) -> Quest | None:
    """Return the first non-archived, non-excluded quest overlapping [start, end]."""
    for quest in quests:
        if quest.is_archived:
            continue
        if exclude_id is not None and quest.id == exclude_id:
            continue
        if windows_overlap(start, end, quest.start, quest.end):
            return quest
    return None


def validate_overlap(
    repo: QuestRepo,
    team_id: str,
    start: datetime,
    end: datetime | None,
    exclude_id: int | None = None,
) -> None:
    """
    Raise ValidationConflict if [start, end] overlaps a scheduled quest of the team.

    exclude_id lets an edit re-validate a quest against everyone but itself.
    Store failures propagate as DataAccessError.
    """
    start = ensure_utc(start)
    end = ensure_utc(end) if end is not None else None
    if end is not None and end < start:
        raise ValueError("quest end must not be before its start")

    quests = repo.list_schedulable_quests(team_id)
    conflict = find_overlapping_quest(quests, start, end, exclude_id=exclude_id)
    if conflict is not None:
        logger.info(
            "Quest window rejected team=%s start=%s end=%s conflicts_with=%s",
            team_id,
            start.isoformat(),
            end.isoformat() if end else None,
            conflict.id,
        )
        raise ValidationConflict(conflict.name, conflict.id)
