# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from quest_clock.cli.bootstrap import create_initial_state
from quest_clock.core.state import AppState


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="quest-clock-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "quest_clock.sqlite3",
        db_timeout_seconds=5.0,
        expand_concurrency=4,
        reconcile_concurrency=4,
        watch_interval_seconds=0.01,
        watch_teams=["team-a"],
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with real SQLite stores in a temp directory.

    Store correctness is part of what we want to test, so no fakes here.
    """
    return create_initial_state(settings=settings)
