# src/quest_clock/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class Frequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(slots=True, frozen=True)
class RecurrenceRule:
    """
    How often a template repeats: every `interval` days / weeks / months.

    Construction rejects anything else, so a rule that exists is a valid rule.
    """

    frequency: Frequency
    interval: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.frequency, Frequency):
            object.__setattr__(self, "frequency", Frequency(self.frequency))
        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise ValueError(f"interval must be an int, got {self.interval!r}")
        if self.interval < 1:
            raise ValueError(f"interval must be positive, got {self.interval}")

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> RecurrenceRule:
        """Build from the stored JSON payload; a missing/null interval means 1."""
        interval = raw.get("interval")
        return cls(frequency=Frequency(raw["frequency"]), interval=1 if interval is None else interval)

    def to_dict(self) -> dict[str, Any]:
        return {"frequency": self.frequency.value, "interval": self.interval}


class StatusCategory(StrEnum):
    BACKLOG = "backlog"
    ACTIVE = "active"
    DONE = "done"


@dataclass(slots=True)
class WorkflowStatus:
    id: int
    team_id: str
    name: str
    category: str
    created_at: datetime | None = None


@dataclass(slots=True)
class Task:
    id: int
    team_id: str
    title: str
    description: str | None

    quest_id: int | None
    status_id: int | None

    size_id: str | None = None
    urgency_id: str | None = None
    assignee_id: str | None = None
    client_id: str | None = None
    xp_points: int = 0

    # Recurrence (templates only)
    is_recurring: bool = False
    recurrence_rule: RecurrenceRule | None = None
    next_due: datetime | None = None
    recurrence_end: datetime | None = None

    # Instances only
    parent_template_id: int | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class NewTaskInstance:
    """Insert payload for a task cloned from a recurring template."""

    team_id: str
    parent_template_id: int
    title: str
    description: str | None
    quest_id: int | None
    status_id: int | None
    size_id: str | None
    urgency_id: str | None
    assignee_id: str | None
    client_id: str | None
    xp_points: int
    is_recurring: bool = False


class OutcomeStatus(StrEnum):
    PROCESSED = "processed"
    ENDED = "ended"
    FAILED_INSERT = "failed_insert"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class TemplateOutcome:
    template_id: int
    status: OutcomeStatus
    next_due: datetime | None = None
    instance_id: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.template_id, "status": self.status.value}
        if self.next_due is not None:
            out["next_date"] = self.next_due.isoformat()
        if self.instance_id is not None:
            out["instance_id"] = self.instance_id
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(slots=True)
class ExpansionReport:
    """Per-template outcomes of one recurrence sweep."""

    outcomes: list[TemplateOutcome] = field(default_factory=list)

    def _with(self, status: OutcomeStatus) -> list[TemplateOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def processed(self) -> list[TemplateOutcome]:
        return self._with(OutcomeStatus.PROCESSED)

    @property
    def ended(self) -> list[TemplateOutcome]:
        return self._with(OutcomeStatus.ENDED)

    @property
    def failed(self) -> list[TemplateOutcome]:
        return self._with(OutcomeStatus.FAILED_INSERT)

    @property
    def errors(self) -> list[TemplateOutcome]:
        return self._with(OutcomeStatus.ERROR)

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.total,
            "counts": {s.value: len(self._with(s)) for s in OutcomeStatus},
            "details": [o.to_dict() for o in self.outcomes],
        }
