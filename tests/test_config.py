# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from quest_clock.config import Settings


def test_defaults(monkeypatch) -> None:
    for suffix in ("DATA_DIR", "DB_PATH", "EXPAND_CONCURRENCY", "WATCH_TEAMS", "LOG_LEVEL"):
        monkeypatch.delenv(f"QUEST_CLOCK_{suffix}", raising=False)

    s = Settings.from_env()
    assert s.data_dir == Path(".local/quest_clock")
    assert s.db_path == s.data_dir / "quest_clock.sqlite3"
    assert s.expand_concurrency == 8
    assert s.watch_teams == []
    assert s.log_level == "INFO"


def test_env_overrides_and_bad_values(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("QUEST_CLOCK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("QUEST_CLOCK_DB_PATH", raising=False)
    monkeypatch.setenv("QUEST_CLOCK_EXPAND_CONCURRENCY", "not-a-number")
    monkeypatch.setenv("QUEST_CLOCK_RECONCILE_CONCURRENCY", "0")
    monkeypatch.setenv("QUEST_CLOCK_WATCH_TEAMS", "team-a, team-b  team-c")
    monkeypatch.setenv("QUEST_CLOCK_WATCH_INTERVAL_SECONDS", "90")

    s = Settings.from_env()
    assert s.db_path == tmp_path / "quest_clock.sqlite3"
    assert s.expand_concurrency == 8
    assert s.reconcile_concurrency == 1
    assert s.watch_teams == ["team-a", "team-b", "team-c"]
    assert s.watch_interval_seconds == 90.0
