"""
Statistics Engine

Rolling averages and trend direction for recovery, HRV, sleep and energy.

Two windows are deliberately independent:
- the averaging window (``average_window_days``) chosen by the caller
- the trend window (``trend_window_days``), a fixed 7-day lens split into a
  recent bucket (today back to ``recent_days`` ago) and an older bucket
  (the remaining days of the window)

Display code relies on the trend always describing the last week even when
averages span 14 or 30 days.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional
import logging

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from wellness_journal.core.config import settings
from wellness_journal.core.exceptions import ValidationError
from wellness_journal.models import DailyEntry
from wellness_journal.schemas import HistoricalStats, PeriodAverages, Trend

logger = logging.getLogger(__name__)


TREND_METRICS = {
    "recovery": DailyEntry.recovery_score,
    "hrv": DailyEntry.hrv,
    "sleep": DailyEntry.sleep_quality_minutes,
}

PERIOD_FORMATS = {
    "week": "%Y-W%W",
    "month": "%Y-%m",
}


def calculate_trend(
    recent: Optional[float],
    older: Optional[float],
    threshold_pct: float = 5.0
) -> Trend:
    """
    Classify the relative change from the older mean to the recent mean.

    Missing data on either side is "stable". A zero older mean has no
    relative change, so any positive recent mean counts as "up".
    """
    if recent is None or older is None:
        return Trend.STABLE

    if older == 0:
        return Trend.UP if recent > 0 else Trend.STABLE

    change_pct = (recent - older) / older * 100
    if change_pct > threshold_pct:
        return Trend.UP
    if change_pct < -threshold_pct:
        return Trend.DOWN
    return Trend.STABLE


def _as_float(value) -> float:
    return float(value) if value is not None else 0.0


def get_historical_stats(
    db: Session,
    average_window_days: int = 7,
    today: Optional[date] = None,
    trend_window_days: Optional[int] = None,
    recent_days: Optional[int] = None,
    threshold_pct: Optional[float] = None,
) -> HistoricalStats:
    """
    Averages over ``[today - average_window_days, today]`` plus 7-day trends.

    Only entries with a recovery score take part in the averages and in
    ``days_tracked``; days with subjective fields alone carry no biometric
    data. An empty window yields zeros, never a division error.
    """
    if average_window_days < 0:
        raise ValidationError("average_window_days must not be negative", field="average_window_days")

    today = today or date.today()
    trend_window_days = trend_window_days or settings.TREND_WINDOW_DAYS
    recent_days = recent_days or settings.TREND_RECENT_DAYS
    threshold_pct = settings.TREND_THRESHOLD_PCT if threshold_pct is None else threshold_pct

    if recent_days >= trend_window_days:
        raise ValidationError(
            "recent_days must be shorter than trend_window_days",
            field="recent_days"
        )

    average_start = today - timedelta(days=average_window_days)

    averages = db.query(
        func.avg(DailyEntry.recovery_score).label("avg_recovery"),
        func.avg(DailyEntry.hrv).label("avg_hrv"),
        func.avg(DailyEntry.sleep_quality_minutes).label("avg_sleep"),
        func.avg(DailyEntry.energy_rating).label("avg_energy"),
        func.count(DailyEntry.date).label("days_tracked"),
    ).filter(
        DailyEntry.date >= average_start,
        DailyEntry.date <= today,
        DailyEntry.recovery_score.isnot(None)
    ).one()

    trends = _get_trends(db, today, trend_window_days, recent_days, threshold_pct)

    stats = HistoricalStats(
        avg_recovery=_as_float(averages.avg_recovery),
        avg_hrv=_as_float(averages.avg_hrv),
        avg_sleep_minutes=_as_float(averages.avg_sleep),
        avg_energy=_as_float(averages.avg_energy),
        days_tracked=averages.days_tracked or 0,
        recovery_trend=trends["recovery"],
        hrv_trend=trends["hrv"],
        sleep_trend=trends["sleep"],
        average_window_days=average_window_days,
        trend_window_days=trend_window_days,
    )

    logger.debug(
        f"Historical stats for {average_start.isoformat()}..{today.isoformat()}: "
        f"{stats.days_tracked} days tracked"
    )
    return stats


def _get_trends(
    db: Session,
    today: date,
    trend_window_days: int,
    recent_days: int,
    threshold_pct: float
) -> Dict[str, Trend]:
    """Compare recent vs older bucket means for each trend metric."""
    window_start = today - timedelta(days=trend_window_days)
    recent_start = today - timedelta(days=recent_days)

    is_recent = DailyEntry.date >= recent_start
    is_older = DailyEntry.date < recent_start

    columns = []
    for name, column in TREND_METRICS.items():
        columns.append(func.avg(case((is_recent, column))).label(f"recent_{name}"))
        columns.append(func.avg(case((is_older, column))).label(f"older_{name}"))

    row = db.query(*columns).filter(
        DailyEntry.date >= window_start,
        DailyEntry.date <= today
    ).one()

    return {
        name: calculate_trend(
            getattr(row, f"recent_{name}"),
            getattr(row, f"older_{name}"),
            threshold_pct
        )
        for name in TREND_METRICS
    }


def _mean(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def get_period_averages(
    db: Session,
    period: str = "week",
    limit: Optional[int] = None
) -> List[PeriodAverages]:
    """
    Weekly or monthly averages over days with biometric data, newest first.

    Weeks are keyed Monday-first (``%Y-W%W``), months as ``%Y-%m``.
    """
    if period not in PERIOD_FORMATS:
        raise ValidationError(f"Unknown period '{period}', expected week or month", field="period")

    fmt = PERIOD_FORMATS[period]
    rows = db.query(DailyEntry).filter(
        DailyEntry.recovery_score.isnot(None)
    ).order_by(DailyEntry.date.desc()).all()

    groups = defaultdict(list)
    for row in rows:
        groups[row.date.strftime(fmt)].append(row)

    results = []
    for key in sorted(groups, reverse=True):
        members = groups[key]
        results.append(PeriodAverages(
            period=key,
            days_tracked=len(members),
            avg_recovery=_mean([m.recovery_score for m in members if m.recovery_score is not None]),
            avg_hrv=_mean([m.hrv for m in members if m.hrv is not None]),
            avg_sleep_minutes=_mean([m.sleep_quality_minutes for m in members if m.sleep_quality_minutes is not None]),
            avg_energy=_mean([m.energy_rating for m in members if m.energy_rating is not None]),
            avg_strain=_mean([m.strain_score for m in members if m.strain_score is not None]),
        ))

    return results[:limit] if limit is not None else results


def compare_averages(current: HistoricalStats, previous: HistoricalStats) -> Dict[str, Optional[float]]:
    """
    Per-metric change between two stats snapshots (e.g. this week vs last).

    None when the previous value is 0, since there is nothing to compare to.
    """
    metrics = ("avg_recovery", "avg_hrv", "avg_sleep_minutes", "avg_energy")
    changes = {}
    for metric in metrics:
        before = getattr(previous, metric)
        after = getattr(current, metric)
        changes[metric] = None if before == 0 else round(after - before, 1)
    return changes
