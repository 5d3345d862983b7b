# src/quest_clock/quests/quest_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class QuestTransition(StrEnum):
    """
    Flag flips the reconciler can issue.

    RECALL (window closed) and HOLD (window not yet open) both persist
    is_active=False; the distinction only shows up in logs and reports.
    """

    DEPLOY = "deploy"
    RECALL = "recall"
    HOLD = "hold"

    @property
    def target_active(self) -> bool:
        return self is QuestTransition.DEPLOY


@dataclass(slots=True)
class Quest:
    id: int
    team_id: str
    name: str

    start: datetime
    end: datetime | None  # None: open-ended

    is_active: bool
    is_archived: bool

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def contains(self, at: datetime) -> bool:
        """Closed-interval membership, a missing end counts as +infinity."""
        if at < self.start:
            return False
        return self.end is None or at <= self.end
