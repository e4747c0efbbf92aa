"""
Streak Calculator

"Consistency is the leading indicator of success."

Counts the unbroken run of journaled days ending today. Today not being
logged yet does not break the run: the walk starts from yesterday instead.
"""

from datetime import date, timedelta
from typing import Callable, Iterable, Optional, Set
import logging

from sqlalchemy.orm import Session

from wellness_journal.core.config import settings
from wellness_journal.models import DailyEntry

logger = logging.getLogger(__name__)


# Streak milestones with celebrations
STREAK_MILESTONES = {
    7: "One full week! The habit is taking shape.",
    30: "A month of showing up. This is who you are now.",
    100: "100 days! Triple digits of consistency.",
}


def count_streak(
    is_tracked: Callable[[date], bool],
    today: date,
    max_days: int
) -> int:
    """
    Walk backward from ``today`` while ``is_tracked`` holds.

    An untracked today is skipped without counting. The walk never inspects
    more than ``max_days`` days, whatever the data looks like.
    """
    streak = 0
    for offset in range(max_days):
        day = today - timedelta(days=offset)
        if is_tracked(day):
            streak += 1
        elif offset == 0:
            # Today just hasn't been logged yet
            continue
        else:
            return streak

    if streak:
        logger.warning(f"Streak walk reached the {max_days}-day cap at {streak} days")
    return streak


def _tracked_dates(db: Session, start: date, end: date) -> Set[date]:
    rows = db.query(DailyEntry.date).filter(
        DailyEntry.date >= start,
        DailyEntry.date <= end
    ).all()
    return {row.date for row in rows}


def get_current_streak(
    db: Session,
    today: Optional[date] = None,
    max_days: Optional[int] = None
) -> int:
    """Consecutive days with a DailyEntry, ending today or yesterday."""
    today = today or date.today()
    max_days = max_days or settings.STREAK_MAX_DAYS

    # One range scan instead of a query per day
    tracked = _tracked_dates(db, today - timedelta(days=max_days - 1), today)
    return count_streak(tracked.__contains__, today, max_days)


def streak_from_dates(dates: Iterable[date], today: date, max_days: int) -> int:
    """Same walk over an in-memory collection of dates."""
    tracked = set(dates)
    return count_streak(tracked.__contains__, today, max_days)


def describe_streak(streak: int) -> str:
    """Short motivational line for the current streak length."""
    if streak == 0:
        message = "Start your streak today with the morning routine!"
    elif streak < 7:
        message = f"{streak} day{'s' if streak > 1 else ''} - Building momentum!"
    elif streak < 30:
        message = f"{streak} days - On fire!"
    else:
        message = f"{streak} days - Legendary!"

    celebration = STREAK_MILESTONES.get(streak)
    if celebration:
        message = f"{message} {celebration}"
    return message
