# tests/test_recurrence.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from quest_clock.tasks.recurrence import is_terminated, next_trigger_date
from quest_clock.tasks.task_models import Frequency, RecurrenceRule

from .fakes import day, make_template


def test_daily_weekly_monthly_steps() -> None:
    d = day(10, 9)
    assert next_trigger_date(d, RecurrenceRule(Frequency.DAILY, 3)) == d + timedelta(days=3)
    assert next_trigger_date(d, RecurrenceRule(Frequency.WEEKLY, 2)) == d + timedelta(days=14)
    assert next_trigger_date(d, RecurrenceRule(Frequency.MONTHLY, 1)) == datetime(2026, 4, 10, 9, tzinfo=UTC)
    assert next_trigger_date(d, RecurrenceRule(Frequency.MONTHLY, 12)) == datetime(2027, 3, 10, 9, tzinfo=UTC)


def test_monthly_clamps_to_end_of_shorter_month() -> None:
    jan31 = datetime(2026, 1, 31, tzinfo=UTC)
    assert next_trigger_date(jan31, RecurrenceRule(Frequency.MONTHLY, 1)) == datetime(2026, 2, 28, tzinfo=UTC)


@pytest.mark.parametrize("interval", [0, -1, 1.5, True])
def test_rule_rejects_non_positive_or_non_int_interval(interval) -> None:
    with pytest.raises(ValueError):
        RecurrenceRule(Frequency.DAILY, interval)


def test_rule_rejects_unknown_frequency() -> None:
    with pytest.raises(ValueError):
        RecurrenceRule.from_dict({"frequency": "hourly", "interval": 1})


def test_rule_from_dict_defaults_interval_and_coerces_frequency() -> None:
    rule = RecurrenceRule.from_dict({"frequency": "weekly", "days": ["mon"]})
    assert rule == RecurrenceRule(Frequency.WEEKLY, 1)
    assert RecurrenceRule("monthly", 2).frequency is Frequency.MONTHLY
    assert RecurrenceRule.from_dict(rule.to_dict()) == rule


def test_termination_compares_against_next_trigger() -> None:
    template = make_template(1, next_due=day(1), recurrence_end=day(5))
    assert is_terminated(template, day(8)) is True
    assert is_terminated(template, day(5)) is False
    assert is_terminated(make_template(2, next_due=day(1)), day(30)) is False
