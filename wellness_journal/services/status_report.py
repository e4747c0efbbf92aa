"""
Status report: a plain dict snapshot of the journal for the CLI.
"""
from typing import Any, Dict

from wellness_journal.core.config import integration_status, missing_integration_settings
from wellness_journal.services.journal import Journal
from wellness_journal.services.streaks import describe_streak

RECENT_ENTRY_DAYS = 30
RECENT_ENTRY_ROWS = 5


def build_status_report(journal: Journal) -> Dict[str, Any]:
    """
    Returns:
        {
            "integrations": {"whoop": bool, "google": bool, "claude": bool},
            "missing_settings": [str],
            "entries_last_30_days": int,
            "stats": HistoricalStats as dict,
            "streak": int,
            "streak_message": str,
            "habits": [HabitStat as dict],
            "recent_entries": [{"date", "recovery", "energy", "has_evening"}]
        }
    """
    # get_recent(n) spans n + 1 calendar days including today
    entries = journal.get_recent(RECENT_ENTRY_DAYS - 1)
    stats = journal.get_historical_stats()
    streak = journal.get_current_streak()

    recent = []
    for entry in entries[:RECENT_ENTRY_ROWS]:
        snapshot = entry.whoop_snapshot
        recovery = snapshot.recovery.score if snapshot and snapshot.recovery else None
        recent.append({
            "date": entry.date.isoformat(),
            "recovery": recovery,
            "energy": entry.energy_rating,
            "has_evening": entry.evening is not None,
        })

    return {
        "integrations": integration_status(journal.settings),
        "missing_settings": missing_integration_settings(journal.settings),
        "entries_last_30_days": len(entries),
        "stats": stats.model_dump(mode="json"),
        "streak": streak,
        "streak_message": describe_streak(streak),
        "habits": [h.model_dump(mode="json") for h in journal.get_habit_stats()],
        "recent_entries": recent,
    }
