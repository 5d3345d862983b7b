# src/quest_clock/quests/quest_api.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.state import AppState
from ..core.timeutil import ensure_utc
from .window_validator import validate_overlap

logger = logging.getLogger(__name__)


def create_quest(
    state: AppState,
    *,
    team_id: str,
    name: str,
    start: datetime,
    end: datetime | None = None,
) -> int:
    """
    Schedule a new quest after checking its window against the team's quests.

    Raises ValidationConflict naming the quest it collides with. The new quest
    starts inactive; the reconciler deploys it once its window opens.
    """
    start = ensure_utc(start)
    end = ensure_utc(end) if end is not None else None
    validate_overlap(state.quest_store, team_id, start, end)

    quest_id = state.quest_store.add_quest(team_id=team_id, name=name, start=start, end=end)
    logger.info("Quest scheduled id=%s team=%s name=%s", quest_id, team_id, name)
    return quest_id


def reschedule_quest(
    state: AppState,
    quest_id: int,
    *,
    start: datetime,
    end: datetime | None,
) -> None:
    """Move a quest's window, re-validating against every other quest of its team."""
    quest = state.quest_store.get_quest(quest_id)
    if quest is None:
        raise LookupError(f"quest {quest_id} not found")

    start = ensure_utc(start)
    end = ensure_utc(end) if end is not None else None
    validate_overlap(state.quest_store, quest.team_id, start, end, exclude_id=quest.id)

    state.quest_store.update_quest_window(quest.id, start=start, end=end)
    logger.info("Quest rescheduled id=%s team=%s", quest.id, quest.team_id)


def archive_quest(state: AppState, quest_id: int) -> None:
    """Retire a quest for good; archived quests are invisible to validation and reconciling."""
    state.quest_store.archive_quest(quest_id)
    logger.info("Quest archived id=%s", quest_id)
