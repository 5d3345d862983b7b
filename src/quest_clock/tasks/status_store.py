# src/quest_clock/tasks/status_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path

from ..core.db import SQLiteStore
from ..core.timeutil import from_ts
from .task_models import StatusCategory, WorkflowStatus

logger = logging.getLogger(__name__)


class StatusStore(SQLiteStore):
    """Team-scoped workflow statuses. Read-only as far as scheduling is concerned."""

    def __init__(self, db_path: str | Path = "quest_clock.sqlite3", *, timeout: float = 30.0) -> None:
        super().__init__(db_path, timeout=timeout)
        logger.info("StatusStore ready db=%s", self._db_path)

    def _ensure_schema(self) -> None:
        with self._session() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS statuses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    team_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_statuses_team_category ON statuses(team_id, category)"
            )

    @staticmethod
    def _row_to_status(row: sqlite3.Row) -> WorkflowStatus:
        return WorkflowStatus(
            id=int(row["id"]),
            team_id=str(row["team_id"]),
            name=str(row["name"] or ""),
            category=str(row["category"] or ""),
            created_at=from_ts(row["created_at"]),
        )

    def add_status(self, *, team_id: str, name: str, category: str) -> int:
        if not team_id:
            raise ValueError("team_id is required")
        with self._session() as conn:
            cur = conn.execute(
                "INSERT INTO statuses(team_id, name, category, created_at) VALUES (?, ?, ?, ?)",
                (team_id, name, str(category), time.time()),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for statuses insert")
        return int(rowid)

    def find_backlog_status(self, team_id: str) -> WorkflowStatus | None:
        """Earliest-created status of the team in the backlog category."""
        with self._session() as conn:
            row = conn.execute(
                """
                SELECT *
                FROM statuses
                WHERE team_id = ?
                  AND category = ?
                ORDER BY created_at ASC, id ASC
                    LIMIT 1
                """,
                (team_id, StatusCategory.BACKLOG.value),
            ).fetchone()
        return self._row_to_status(row) if row else None
