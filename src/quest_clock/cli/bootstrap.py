# src/quest_clock/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite stores into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..quests.quest_store import QuestStore
from ..tasks.status_store import StatusStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    timeout = float(getattr(settings, "db_timeout_seconds", 30.0))
    state = AppState(
        settings=settings,
        quest_store=QuestStore(settings.db_path, timeout=timeout),
        task_store=TaskStore(settings.db_path, timeout=timeout),
        status_store=StatusStore(settings.db_path, timeout=timeout),
    )
    logger.debug("AppState ready db=%s", settings.db_path)
    return state
