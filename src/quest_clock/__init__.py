"""
quest_clock: temporal scheduling core for quest-based work tracking.

Keeps quests (time-boxed sprints) and recurring task templates consistent with
wall-clock time. Every entry point is a plain call; the cadence belongs to the
caller (cron, `quest-clock watch`, a request handler).
"""

__version__ = "0.3.0"
