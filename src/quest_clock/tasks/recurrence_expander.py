# src/quest_clock/tasks/recurrence_expander.py

from __future__ import annotations

"""
Recurrence expander.

One sweep over every due template (is_recurring and next_due <= now, all teams).
For each template, independently:

1. intended date = next_due (may lie in the past if sweeps were missed)
2. next trigger  = intended + one period of the rule
3. recurrence_end < next trigger -> stop recurring, no instance this pass
4. pick the target quest   (covering quest -> active quest -> template's quest)
5. pick the target status  (team backlog -> template's status)
6. insert the instance
7. only then move next_due to the next trigger

Exactly one period is drained per sweep; a long outage catches up one call at
a time. Nothing is leased: two overlapping sweeps can clone the same template
twice (at-least-once).
"""

import asyncio
import logging
from datetime import datetime

from ..core.ports import QuestRepo, StatusRepo, TaskRepo
from ..core.timeutil import ensure_utc, utc_now
from ..errors import CreationFailure
from .recurrence import is_terminated, next_trigger_date
from .resolvers import resolve_target_quest, resolve_target_status
from .task_models import ExpansionReport, NewTaskInstance, OutcomeStatus, Task, TemplateOutcome

logger = logging.getLogger(__name__)


def build_instance(template: Task, *, quest_id: int | None, status_id: int | None) -> NewTaskInstance:
    """Clone the descriptive fields of a template into a non-recurring instance."""
    return NewTaskInstance(
        team_id=template.team_id,
        parent_template_id=template.id,
        title=template.title,
        description=template.description,
        quest_id=quest_id,
        status_id=status_id,
        size_id=template.size_id,
        urgency_id=template.urgency_id,
        assignee_id=template.assignee_id,
        client_id=template.client_id,
        xp_points=template.xp_points,
        is_recurring=False,
    )


def expand_template(
    template: Task,
    *,
    task_repo: TaskRepo,
    quest_repo: QuestRepo,
    status_repo: StatusRepo,
) -> TemplateOutcome:
    """
    Run steps 1-7 for one template.

    Raises CreationFailure if the insert fails (the schedule is left untouched
    so the template stays due); other store errors propagate as-is.
    """
    rule = template.recurrence_rule
    if rule is None or template.next_due is None:
        return TemplateOutcome(
            template_id=template.id,
            status=OutcomeStatus.ERROR,
            error="template has no usable recurrence rule or next due date",
        )

    intended = template.next_due
    next_due = next_trigger_date(intended, rule)

    if is_terminated(template, next_due):
        task_repo.end_recurrence(template.id)
        logger.info(
            "Template %s ended (recurrence_end=%s < next=%s)",
            template.id,
            template.recurrence_end.isoformat() if template.recurrence_end else None,
            next_due.isoformat(),
        )
        return TemplateOutcome(template_id=template.id, status=OutcomeStatus.ENDED)

    quest_id = resolve_target_quest(quest_repo, template, intended)
    status_id = resolve_target_status(status_repo, template)
    instance = build_instance(template, quest_id=quest_id, status_id=status_id)

    try:
        instance_id = task_repo.add_instance(instance)
    except Exception as exc:
        raise CreationFailure(template.id, exc) from exc

    task_repo.advance_template(template.id, next_due)
    logger.info(
        "Template %s cloned -> task %s quest=%s next_due=%s",
        template.id,
        instance_id,
        quest_id,
        next_due.isoformat(),
    )
    return TemplateOutcome(
        template_id=template.id,
        status=OutcomeStatus.PROCESSED,
        next_due=next_due,
        instance_id=instance_id,
    )


async def expand_due_templates(
    task_repo: TaskRepo,
    quest_repo: QuestRepo,
    status_repo: StatusRepo,
    *,
    now: datetime | None = None,
    max_concurrency: int = 8,
) -> ExpansionReport:
    """
    Expand every template due at `now` (defaults to the current UTC time).

    Fetching the due templates can raise DataAccessError; after that nothing
    raises: every template yields its own outcome in the report.
    """
    now = ensure_utc(now) if now is not None else utc_now()

    templates = await asyncio.to_thread(task_repo.list_due_templates, now=now)
    report = ExpansionReport()
    if not templates:
        logger.debug("No recurring tasks due at %s", now.isoformat())
        return report

    gate = asyncio.Semaphore(max(1, int(max_concurrency)))

    async def _run(template: Task) -> TemplateOutcome:
        async with gate:
            try:
                return await asyncio.to_thread(
                    expand_template,
                    template,
                    task_repo=task_repo,
                    quest_repo=quest_repo,
                    status_repo=status_repo,
                )
            except CreationFailure as exc:
                logger.error("Failed to clone task %s", template.id, exc_info=exc.cause)
                return TemplateOutcome(
                    template_id=template.id,
                    status=OutcomeStatus.FAILED_INSERT,
                    error=str(exc.cause),
                )
            except Exception as exc:
                logger.exception("Error processing task %s", template.id)
                return TemplateOutcome(
                    template_id=template.id,
                    status=OutcomeStatus.ERROR,
                    error=str(exc),
                )

    report.outcomes.extend(await asyncio.gather(*(_run(t) for t in templates)))

    logger.info(
        "Recurrence sweep done total=%s processed=%s ended=%s failed_insert=%s error=%s",
        report.total,
        len(report.processed),
        len(report.ended),
        len(report.failed),
        len(report.errors),
    )
    return report
