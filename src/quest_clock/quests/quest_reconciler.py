# src/quest_clock/quests/quest_reconciler.py

from __future__ import annotations

"""
Quest reconciler.

One pass that:
- loads the team's non-archived quests,
- works out which ones have the wrong is_active flag for "now",
- issues every flip at once and waits for all of them.

A flip that fails is logged and reported; the others still go through.
Called opportunistically (e.g. before a board read), never on its own timer.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ..core.ports import QuestRepo
from ..core.timeutil import ensure_utc, utc_now
from .quest_models import Quest, QuestTransition

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconcileReport:
    team_id: str
    deployed: list[int] = field(default_factory=list)
    recalled: list[int] = field(default_factory=list)  # recall + hold
    failed: list[int] = field(default_factory=list)
    # Set when the team could not be loaded at all; nothing was written.
    error: str | None = None

    @property
    def writes(self) -> int:
        return len(self.deployed) + len(self.recalled)


def should_be_active(quest: Quest, now: datetime) -> bool:
    return quest.contains(now)


def plan_transitions(quests: Iterable[Quest], now: datetime) -> list[tuple[Quest, QuestTransition]]:
    """Pure part of the pass: which quests need a flip, and why."""
    plan: list[tuple[Quest, QuestTransition]] = []
    for quest in quests:
        if quest.is_archived:
            continue

        target = should_be_active(quest, now)
        if target == quest.is_active:
            continue

        if target:
            plan.append((quest, QuestTransition.DEPLOY))
        elif now < quest.start:
            plan.append((quest, QuestTransition.HOLD))
        else:
            plan.append((quest, QuestTransition.RECALL))
    return plan


async def reconcile_quests(
    repo: QuestRepo,
    team_id: str,
    *,
    now: datetime | None = None,
    max_concurrency: int = 8,
) -> ReconcileReport:
    """
    Align every non-archived quest of the team with the current time.

    Idempotent: a second call at the same instant finds nothing to flip.
    A failure to load the quests raises DataAccessError (nothing was written);
    failures of individual flips are collected in report.failed.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    report = ReconcileReport(team_id=team_id)

    quests = await asyncio.to_thread(repo.list_schedulable_quests, team_id)
    plan = plan_transitions(quests, now)
    if not plan:
        return report

    gate = asyncio.Semaphore(max(1, int(max_concurrency)))

    async def _flip(quest: Quest, transition: QuestTransition) -> None:
        async with gate:
            await asyncio.to_thread(repo.set_quest_active, quest.id, transition.target_active)
        if transition is QuestTransition.DEPLOY:
            logger.info("Auto-deploying quest %s team=%s", quest.id, team_id)
        else:
            logger.info("Auto-%s quest %s team=%s", transition.value, quest.id, team_id)

    results = await asyncio.gather(
        *(_flip(quest, transition) for quest, transition in plan),
        return_exceptions=True,
    )

    for (quest, transition), result in zip(plan, results):
        if isinstance(result, BaseException):
            logger.error(
                "Quest flip failed quest=%s team=%s transition=%s",
                quest.id,
                team_id,
                transition.value,
                exc_info=result,
            )
            report.failed.append(quest.id)
        elif transition is QuestTransition.DEPLOY:
            report.deployed.append(quest.id)
        else:
            report.recalled.append(quest.id)

    return report
