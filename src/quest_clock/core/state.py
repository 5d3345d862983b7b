# src/quest_clock/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..quests.quest_store import QuestStore
from ..tasks.status_store import StatusStore
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (Settings in production, SimpleNamespace in tests).
    settings: Any

    quest_store: QuestStore
    task_store: TaskStore
    status_store: StatusStore
