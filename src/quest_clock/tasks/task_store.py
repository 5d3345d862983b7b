# src/quest_clock/tasks/task_store.py

from __future__ import annotations

import json
import logging
import sqlite3
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.db import SQLiteStore
from ..core.timeutil import from_ts, to_ts
from .task_models import NewTaskInstance, RecurrenceRule, Task

logger = logging.getLogger(__name__)


class TaskStore(SQLiteStore):
    """
    SQLite task store.

    Templates and instances share one table:
    - templates: is_recurring = 1, recurrence_rule JSON, next_due_at set
    - instances: is_recurring = 0, parent_template_id set

    The schema is migration-safe: create table if missing, then ALTER TABLE
    for any column an older database lacks.
    """

    def __init__(self, db_path: str | Path = "quest_clock.sqlite3", *, timeout: float = 30.0) -> None:
        super().__init__(db_path, timeout=timeout)
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def _ensure_schema(self) -> None:
        with self._session() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    team_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    quest_id INTEGER,
                    status_id INTEGER,
                    size_id TEXT,
                    urgency_id TEXT,
                    assignee_id TEXT,
                    client_id TEXT,
                    xp_points INTEGER NOT NULL DEFAULT 0,
                    is_recurring INTEGER NOT NULL DEFAULT 0,
                    recurrence_rule TEXT,
                    next_due_at REAL,
                    recurrence_end_at REAL,
                    parent_template_id INTEGER,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            self._add_missing_columns(
                cur,
                "tasks",
                {
                    "xp_points": "INTEGER NOT NULL DEFAULT 0",
                    "is_recurring": "INTEGER NOT NULL DEFAULT 0",
                    "recurrence_rule": "TEXT",
                    "next_due_at": "REAL",
                    "recurrence_end_at": "REAL",
                    "parent_template_id": "INTEGER",
                },
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_recurring_due ON tasks(is_recurring, next_due_at)"
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_parent ON tasks(parent_template_id)")

    @staticmethod
    def _rule_to_str(rule: RecurrenceRule | None) -> str | None:
        if rule is None:
            return None
        return json.dumps(rule.to_dict())

    @staticmethod
    def _str_to_rule(raw: str | None, *, task_id: int) -> RecurrenceRule | None:
        if not raw:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("rule payload is not an object")
            return RecurrenceRule.from_dict(data)
        except (ValueError, KeyError, TypeError):
            logger.warning("Task %s has an unreadable recurrence rule: %r", task_id, raw)
            return None

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        task_id = int(row["id"])
        return Task(
            id=task_id,
            team_id=str(row["team_id"]),
            title=str(row["title"] or ""),
            description=row["description"],
            quest_id=row["quest_id"],
            status_id=row["status_id"],
            size_id=row["size_id"],
            urgency_id=row["urgency_id"],
            assignee_id=row["assignee_id"],
            client_id=row["client_id"],
            xp_points=int(row["xp_points"] or 0),
            is_recurring=bool(row["is_recurring"]),
            recurrence_rule=self._str_to_rule(row["recurrence_rule"], task_id=task_id),
            next_due=from_ts(row["next_due_at"]),
            recurrence_end=from_ts(row["recurrence_end_at"]),
            parent_template_id=row["parent_template_id"],
            created_at=from_ts(row["created_at"]),
            updated_at=from_ts(row["updated_at"]),
        )

    def _insert(self, values: dict[str, Any]) -> int:
        now = time.time()
        values = {**values, "created_at": now, "updated_at": now}
        cols = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._session() as conn:
            cur = conn.execute(
                f"INSERT INTO tasks({cols}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for tasks insert")
        return int(rowid)

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._session() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(n)

    def add_template(
        self,
        *,
        team_id: str,
        title: str,
        rule: RecurrenceRule,
        next_due: datetime,
        recurrence_end: datetime | None = None,
        description: str | None = None,
        quest_id: int | None = None,
        status_id: int | None = None,
        size_id: str | None = None,
        urgency_id: str | None = None,
        assignee_id: str | None = None,
        client_id: str | None = None,
        xp_points: int = 0,
    ) -> int:
        """Create a recurring template (the user-facing part lives outside this package)."""
        if not team_id:
            raise ValueError("team_id is required")
        if not title or not title.strip():
            raise ValueError("title is required")

        task_id = self._insert(
            {
                "team_id": team_id,
                "title": title.strip(),
                "description": description,
                "quest_id": quest_id,
                "status_id": status_id,
                "size_id": size_id,
                "urgency_id": urgency_id,
                "assignee_id": assignee_id,
                "client_id": client_id,
                "xp_points": int(xp_points),
                "is_recurring": 1,
                "recurrence_rule": self._rule_to_str(rule),
                "next_due_at": to_ts(next_due),
                "recurrence_end_at": to_ts(recurrence_end),
            }
        )
        logger.debug(
            "Template added id=%s team=%s rule=%s next_due=%s",
            task_id,
            team_id,
            rule.to_dict(),
            next_due.isoformat(),
        )
        return task_id

    def add_instance(self, instance: NewTaskInstance) -> int:
        task_id = self._insert(
            {
                "team_id": instance.team_id,
                "title": instance.title,
                "description": instance.description,
                "quest_id": instance.quest_id,
                "status_id": instance.status_id,
                "size_id": instance.size_id,
                "urgency_id": instance.urgency_id,
                "assignee_id": instance.assignee_id,
                "client_id": instance.client_id,
                "xp_points": int(instance.xp_points),
                "is_recurring": int(instance.is_recurring),
                "parent_template_id": instance.parent_template_id,
            }
        )
        logger.debug(
            "Instance added id=%s template=%s quest=%s",
            task_id,
            instance.parent_template_id,
            instance.quest_id,
        )
        return task_id

    def get_task(self, task_id: int) -> Task | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
        return self._row_to_task(row) if row else None

    def list_due_templates(self, *, now: datetime) -> list[Task]:
        """Recurring templates with next_due <= now, across every team."""
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT *
                FROM tasks
                WHERE is_recurring = 1
                  AND next_due_at IS NOT NULL
                  AND next_due_at <= ?
                ORDER BY next_due_at ASC, id ASC
                """,
                (to_ts(now),),
            ).fetchall()
        return [self._row_to_task(r) for r in rows]

    def list_instances(self, template_id: int) -> list[Task]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE parent_template_id = ? ORDER BY id ASC",
                (int(template_id),),
            ).fetchall()
        return [self._row_to_task(r) for r in rows]

    def advance_template(self, template_id: int, next_due: datetime) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE tasks SET next_due_at = ?, updated_at = ? WHERE id = ?",
                (to_ts(next_due), time.time(), int(template_id)),
            )

    def end_recurrence(self, template_id: int) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE tasks SET is_recurring = 0, updated_at = ? WHERE id = ?",
                (time.time(), int(template_id)),
            )
