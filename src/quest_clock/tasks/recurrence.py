# src/quest_clock/tasks/recurrence.py

from __future__ import annotations

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from .task_models import Frequency, RecurrenceRule, Task


def next_trigger_date(intended: datetime, rule: RecurrenceRule) -> datetime:
    """
    Advance `intended` by exactly one period of the rule.

    Months use calendar arithmetic; relativedelta clamps to the last day of a
    shorter month (Jan 31 + 1 month -> Feb 28/29).
    """
    if rule.frequency is Frequency.DAILY:
        return intended + timedelta(days=rule.interval)
    if rule.frequency is Frequency.WEEKLY:
        return intended + timedelta(days=rule.interval * 7)
    return intended + relativedelta(months=rule.interval)


def is_terminated(template: Task, next_trigger: datetime) -> bool:
    # Compared against the *next* trigger, so the last occurrence before the
    # end date is not instantiated.
    return template.recurrence_end is not None and template.recurrence_end < next_trigger
