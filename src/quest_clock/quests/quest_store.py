# src/quest_clock/quests/quest_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import datetime
from pathlib import Path

from ..core.db import SQLiteStore
from ..core.timeutil import from_ts, to_ts
from .quest_models import Quest

logger = logging.getLogger(__name__)


class QuestStore(SQLiteStore):
    """
    SQLite quest store.

    Windows are stored as REAL epoch seconds (UTC); end_at NULL means open-ended.
    Nothing here enforces non-overlap: that check is advisory and lives in
    window_validator.
    """

    def __init__(self, db_path: str | Path = "quest_clock.sqlite3", *, timeout: float = 30.0) -> None:
        super().__init__(db_path, timeout=timeout)
        logger.info("QuestStore ready db=%s", self._db_path)

    def _ensure_schema(self) -> None:
        with self._session() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS quests (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    team_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    start_at REAL NOT NULL,
                    end_at REAL,
                    is_active INTEGER NOT NULL DEFAULT 0,
                    is_archived INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            self._add_missing_columns(
                cur,
                "quests",
                {
                    "end_at": "REAL",
                    "is_active": "INTEGER NOT NULL DEFAULT 0",
                    "is_archived": "INTEGER NOT NULL DEFAULT 0",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                    "updated_at": "REAL NOT NULL DEFAULT 0",
                },
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_quests_team ON quests(team_id, is_archived)"
            )

    @staticmethod
    def _row_to_quest(row: sqlite3.Row) -> Quest:
        start = from_ts(row["start_at"])
        assert start is not None
        return Quest(
            id=int(row["id"]),
            team_id=str(row["team_id"]),
            name=str(row["name"] or ""),
            start=start,
            end=from_ts(row["end_at"]),
            is_active=bool(row["is_active"]),
            is_archived=bool(row["is_archived"]),
            created_at=from_ts(row["created_at"]),
            updated_at=from_ts(row["updated_at"]),
        )

    # ---- public API ----

    def add_quest(
        self,
        *,
        team_id: str,
        name: str,
        start: datetime,
        end: datetime | None = None,
        is_active: bool = False,
        is_archived: bool = False,
    ) -> int:
        if not team_id:
            raise ValueError("team_id is required")
        if not name or not name.strip():
            raise ValueError("name is required")

        now = time.time()
        with self._session() as conn:
            cur = conn.execute(
                """
                INSERT INTO quests(
                    team_id, name, start_at, end_at,
                    is_active, is_archived, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    team_id,
                    name.strip(),
                    to_ts(start),
                    to_ts(end),
                    int(is_active),
                    int(is_archived),
                    now,
                    now,
                ),
            )
            rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for quests insert")
        logger.debug("Quest added id=%s team=%s name=%s", rowid, team_id, name)
        return int(rowid)

    def get_quest(self, quest_id: int) -> Quest | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM quests WHERE id = ?", (int(quest_id),)).fetchone()
        return self._row_to_quest(row) if row else None

    def list_schedulable_quests(self, team_id: str) -> list[Quest]:
        """Non-archived quests of a team, oldest window first."""
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT *
                FROM quests
                WHERE team_id = ?
                  AND is_archived = 0
                ORDER BY start_at ASC, id ASC
                """,
                (team_id,),
            ).fetchall()
        return [self._row_to_quest(r) for r in rows]

    def find_quest_covering(self, team_id: str, at: datetime) -> Quest | None:
        """
        First non-archived quest whose [start, end] contains `at`.

        A NULL end is open-ended here as well, so such a quest covers every date
        after its start (unlike a plain `end_at >= ?` filter, which would skip it).
        """
        ts = to_ts(at)
        with self._session() as conn:
            row = conn.execute(
                """
                SELECT *
                FROM quests
                WHERE team_id = ?
                  AND is_archived = 0
                  AND start_at <= ?
                  AND (end_at IS NULL OR end_at >= ?)
                ORDER BY start_at ASC, id ASC
                    LIMIT 1
                """,
                (team_id, ts, ts),
            ).fetchone()
        return self._row_to_quest(row) if row else None

    def find_active_quest(self, team_id: str) -> Quest | None:
        with self._session() as conn:
            row = conn.execute(
                """
                SELECT *
                FROM quests
                WHERE team_id = ?
                  AND is_active = 1
                ORDER BY start_at ASC, id ASC
                    LIMIT 1
                """,
                (team_id,),
            ).fetchone()
        return self._row_to_quest(row) if row else None

    def set_quest_active(self, quest_id: int, active: bool) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE quests SET is_active = ?, updated_at = ? WHERE id = ?",
                (int(active), time.time(), int(quest_id)),
            )

    def update_quest_window(self, quest_id: int, *, start: datetime, end: datetime | None) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE quests SET start_at = ?, end_at = ?, updated_at = ? WHERE id = ?",
                (to_ts(start), to_ts(end), time.time(), int(quest_id)),
            )

    def archive_quest(self, quest_id: int) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE quests SET is_archived = 1, is_active = 0, updated_at = ? WHERE id = ?",
                (time.time(), int(quest_id)),
            )
