"""
Habit Aggregator

Completion rate per active habit over a trailing window of days.

The rate is completed days divided by the window length, not by days
logged: a day with no log counts as a miss.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional, Set
import logging

from sqlalchemy.orm import Session

from wellness_journal.core.config import settings
from wellness_journal.core.exceptions import ValidationError
from wellness_journal.models import Habit, HabitLog
from wellness_journal.schemas import HabitStat
from wellness_journal.services.streaks import streak_from_dates

logger = logging.getLogger(__name__)


def completion_rate(completed_days: int, window_days: int) -> float:
    """Percent of the window completed, one decimal place."""
    return round(completed_days / window_days * 100, 1)


def _completed_dates_by_habit(db: Session, start: date, end: date) -> Dict[int, Set[date]]:
    rows = db.query(HabitLog.habit_id, HabitLog.date).filter(
        HabitLog.date >= start,
        HabitLog.date <= end,
        HabitLog.completed.is_(True)
    ).all()

    completed = defaultdict(set)
    for habit_id, day in rows:
        completed[habit_id].add(day)
    return completed


def get_habit_stats(
    db: Session,
    window_days: int = 7,
    today: Optional[date] = None,
    max_streak_days: Optional[int] = None
) -> List[HabitStat]:
    """
    Completion rate and current streak for each active habit.

    The window is the ``window_days`` days ending today, so a habit done
    every day scores exactly 100. The streak uses the same walk as the
    journal streak: consecutive completed days ending today, where an
    incomplete today does not break it.
    """
    if window_days < 1:
        raise ValidationError("window_days must be at least 1", field="window_days")

    today = today or date.today()
    max_streak_days = max_streak_days or settings.STREAK_MAX_DAYS

    window_start = today - timedelta(days=window_days - 1)
    lookback_start = today - timedelta(days=max(window_days, max_streak_days) - 1)
    completed = _completed_dates_by_habit(db, lookback_start, today)

    habits = db.query(Habit).filter(
        Habit.active.is_(True)
    ).order_by(Habit.category, Habit.name).all()

    stats = []
    for habit in habits:
        done = completed.get(habit.id, set())
        in_window = sum(1 for day in done if day >= window_start)
        stats.append(HabitStat(
            habit_id=habit.id,
            habit_name=habit.name,
            emoji=habit.emoji,
            completion_rate=completion_rate(in_window, window_days),
            streak=streak_from_dates(done, today, max_streak_days),
        ))

    logger.debug(f"Computed habit stats for {len(stats)} habits over {window_days} days")
    return stats
