# src/quest_clock/core/db.py

from __future__ import annotations

"""
Shared SQLite plumbing for the stores.

Every store opens a short-lived connection per call (no pooling, no shared
connection across threads), so store methods can be offloaded with
asyncio.to_thread and run side by side.
"""

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from ..errors import DataAccessError

logger = logging.getLogger(__name__)


class SQLiteStore:
    """
    Base class for the SQLite stores.

    Subclasses implement _ensure_schema(); everything else goes through _session(),
    which commits on success, rolls back on failure and re-raises sqlite3 errors as
    DataAccessError.
    """

    def __init__(self, db_path: str | Path, *, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._timeout = float(timeout)
        self._ensure_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise DataAccessError(f"cannot open {self._db_path}: {exc}") from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise DataAccessError(str(exc)) from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        raise NotImplementedError

    @staticmethod
    def _add_missing_columns(
        cur: sqlite3.Cursor, table: str, columns: dict[str, str]
    ) -> None:
        # Migrations (safe): add missing columns.
        cur.execute(f"PRAGMA table_info({table})")
        existing = {row["name"] for row in cur.fetchall()}
        for name, decl in columns.items():
            if name in existing:
                continue
            cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
            logger.info("%s migration: added column %s", table, name)
