# src/quest_clock/cli/main.py

"""
CLI entrypoint (`quest-clock`).

This is the external invoker of the scheduling core: cron (or a systemd timer)
calls `quest-clock expand` / `quest-clock reconcile TEAM`, or a long-running
`quest-clock watch` polls on a fixed interval. The core itself owns no timers.

Exit codes: 0 ok, 1 validation conflict, 2 data access error, 3 invalid window.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime

from ..config import get_settings
from ..core.state import AppState
from ..core.timeutil import parse_instant
from ..errors import DataAccessError, ValidationConflict
from ..logging_setup import setup_logging
from ..quests.quest_reconciler import ReconcileReport, reconcile_quests
from ..quests.window_validator import validate_overlap
from ..tasks.recurrence_expander import expand_due_templates
from ..tasks.task_models import ExpansionReport
from .bootstrap import create_initial_state

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFLICT = 1
EXIT_DATA_ACCESS = 2
EXIT_INVALID = 3


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quest-clock",
        description="Keep quests and recurring tasks in step with wall-clock time.",
    )
    p.add_argument(
        "--now",
        type=parse_instant,
        default=None,
        help="Override the current instant (ISO-8601, UTC if no offset).",
    )
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("expand", help="Expand every due recurring template once.")

    rec = sub.add_parser("reconcile", help="Align quests' active flags with the current time.")
    rec.add_argument("teams", nargs="+", metavar="TEAM")

    val = sub.add_parser("validate", help="Check a proposed quest window for overlaps.")
    val.add_argument("team", metavar="TEAM")
    val.add_argument("--start", type=parse_instant, required=True)
    val.add_argument("--end", type=parse_instant, default=None)
    val.add_argument("--exclude", type=int, default=None, metavar="QUEST_ID")

    watch = sub.add_parser("watch", help="Poll: expand (and reconcile configured teams) forever.")
    watch.add_argument("--interval", type=float, default=None, help="Seconds between sweeps.")
    watch.add_argument("--team", action="append", dest="teams", default=None, metavar="TEAM")

    return p


def _reconcile_to_dict(report: ReconcileReport) -> dict[str, object]:
    return {
        "team_id": report.team_id,
        "deployed": report.deployed,
        "recalled": report.recalled,
        "failed": report.failed,
        "writes": report.writes,
        "error": report.error,
    }


async def run_expand(state: AppState, *, now: datetime | None = None) -> ExpansionReport:
    return await expand_due_templates(
        state.task_store,
        state.quest_store,
        state.status_store,
        now=now,
        max_concurrency=int(getattr(state.settings, "expand_concurrency", 8)),
    )


async def run_reconcile(
    state: AppState, teams: Sequence[str], *, now: datetime | None = None
) -> list[ReconcileReport]:
    limit = int(getattr(state.settings, "reconcile_concurrency", 8))
    reports: list[ReconcileReport] = []
    for team_id in teams:
        try:
            report = await reconcile_quests(state.quest_store, team_id, now=now, max_concurrency=limit)
        except DataAccessError as exc:
            logger.exception("reconcile failed team=%s", team_id)
            report = ReconcileReport(team_id=team_id, error=str(exc))
        reports.append(report)
    return reports


async def watch_loop(
    state: AppState,
    *,
    interval_seconds: float,
    teams: Sequence[str],
    iterations: int | None = None,
) -> None:
    """
    Simple polling invoker.

    Every interval_seconds:
    - reconcile each configured team (so covering/active quest lookups see fresh flags)
    - run one recurrence sweep

    A failed sweep is logged and retried on the next tick. To stop, cancel the
    coroutine (Ctrl+C) or pass `iterations`.
    """
    sleep_s = max(0.01, float(interval_seconds))
    done = 0

    while iterations is None or done < iterations:
        try:
            await run_reconcile(state, teams)
        except Exception:
            logger.exception("reconcile failed teams=%s", list(teams))

        try:
            await run_expand(state)
        except Exception:
            logger.exception("recurrence sweep failed")

        done += 1
        if iterations is not None and done >= iterations:
            break
        await asyncio.sleep(sleep_s)


def _emit(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def run_command(state: AppState, args: argparse.Namespace) -> int:
    try:
        if args.command == "expand":
            report = asyncio.run(run_expand(state, now=args.now))
            _emit(report.to_dict())
            return EXIT_OK

        if args.command == "reconcile":
            reports = asyncio.run(run_reconcile(state, args.teams, now=args.now))
            _emit([_reconcile_to_dict(r) for r in reports])
            return EXIT_OK

        if args.command == "validate":
            try:
                validate_overlap(
                    state.quest_store, args.team, args.start, args.end, exclude_id=args.exclude
                )
            except ValidationConflict as exc:
                _emit({"ok": False, "conflict": exc.quest_name, "quest_id": exc.quest_id})
                return EXIT_CONFLICT
            except ValueError as exc:
                _emit({"ok": False, "error": str(exc)})
                return EXIT_INVALID
            _emit({"ok": True})
            return EXIT_OK

        if args.command == "watch":
            settings = state.settings
            interval = args.interval or float(getattr(settings, "watch_interval_seconds", 3600.0))
            teams = args.teams or list(getattr(settings, "watch_teams", []))
            logger.info("Watching every %ss teams=%s", interval, teams)
            try:
                asyncio.run(watch_loop(state, interval_seconds=interval, teams=teams))
            except KeyboardInterrupt:
                logger.info("Interrupted, stopping.")
            return EXIT_OK

    except DataAccessError:
        logger.exception("Data access failed during %s", args.command)
        return EXIT_DATA_ACCESS

    raise ValueError(f"unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    args = build_parser().parse_args(argv)
    logger.debug("Starting %s command=%s", settings.app_name, args.command)

    try:
        state = create_initial_state(settings=settings)
    except DataAccessError:
        logger.exception("Cannot open the database at %s", settings.db_path)
        return EXIT_DATA_ACCESS
    return run_command(state, args)


if __name__ == "__main__":
    sys.exit(main())
