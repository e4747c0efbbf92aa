"""
Weekly review

Summarizes the last seven calendar days: averages against the wider
two-week baseline, a day-by-day breakdown, the top wins and challenges,
and how often the day's one priority got done.
"""

from datetime import date, timedelta
from typing import Optional, Sequence, Tuple
import logging

from sqlalchemy.orm import Session

from wellness_journal.core.config import Settings, settings as default_settings
from wellness_journal.schemas import DailyEntry, DayBreakdown, PriorityCompletion, WeeklySummary
from wellness_journal.services.entry_store import EntryStore
from wellness_journal.services.historical_stats import compare_averages, get_historical_stats

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
BASELINE_WINDOW_DAYS = 14
TOP_REFLECTIONS = 3


def priority_completion(entries: Sequence[DailyEntry]) -> Tuple[int, int, Optional[float]]:
    """
    (done, partial, rate) over days that set a priority and closed the evening.

    A partial day counts as half done. The rate is None when no such day exists.
    """
    closed = [e for e in entries if e.one_thing and e.evening is not None]
    done = sum(1 for e in closed if e.evening.priority_completed == PriorityCompletion.YES)
    partial = sum(1 for e in closed if e.evening.priority_completed == PriorityCompletion.PARTIAL)

    if not closed:
        return done, partial, None
    return done, partial, round((done + partial * 0.5) / len(closed) * 100, 1)


def _breakdown(entry: DailyEntry) -> DayBreakdown:
    snapshot = entry.whoop_snapshot
    recovery = snapshot.recovery if snapshot else None
    sleep = snapshot.sleep if snapshot else None
    return DayBreakdown(
        date=entry.date,
        recovery=recovery.score if recovery else None,
        sleep_minutes=sleep.quality_duration if sleep else None,
        energy=entry.energy_rating,
        priority_completed=entry.evening.priority_completed if entry.evening else None,
    )


def build_weekly_summary(
    db: Session,
    today: Optional[date] = None,
    config: Optional[Settings] = None
) -> WeeklySummary:
    config = config or default_settings
    today = today or date.today()
    start = today - timedelta(days=WEEK_DAYS - 1)

    # Newest first, so the top reflections are the most recent ones
    entries = EntryStore(db).get_recent(WEEK_DAYS - 1, today=today)

    trend_kwargs = dict(
        today=today,
        trend_window_days=config.TREND_WINDOW_DAYS,
        recent_days=config.TREND_RECENT_DAYS,
        threshold_pct=config.TREND_THRESHOLD_PCT,
    )
    current = get_historical_stats(db, WEEK_DAYS, **trend_kwargs)
    previous = get_historical_stats(db, BASELINE_WINDOW_DAYS, **trend_kwargs)

    done, partial, rate = priority_completion(entries)

    summary = WeeklySummary(
        week=today.strftime("%Y-W%W"),
        start_date=start,
        end_date=today,
        days_tracked=len(entries),
        days_in_week=WEEK_DAYS,
        current=current,
        previous=previous,
        changes=compare_averages(current, previous),
        wins=[e.yesterday_win for e in entries if e.yesterday_win][:TOP_REFLECTIONS],
        challenges=[e.yesterday_challenge for e in entries if e.yesterday_challenge][:TOP_REFLECTIONS],
        priorities_done=done,
        priorities_partial=partial,
        priority_completion_rate=rate,
        daily=[_breakdown(e) for e in reversed(entries)],
    )

    logger.info(f"Weekly summary {summary.week}: {summary.days_tracked}/{WEEK_DAYS} days tracked")
    return summary
