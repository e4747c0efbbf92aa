"""
Entry Store

One DailyEntry per calendar date. The morning routine creates or refreshes
the morning half of the row; the evening routine extends an existing row and
never creates one.

Every write is one committed unit of work: a reader sees either the previous
record or the complete new one.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from wellness_journal.core.database import commit_or_raise
from wellness_journal.core.exceptions import NotFoundError, ValidationError
from wellness_journal.models import DailyEntry as DailyEntryRow, utcnow
from wellness_journal.schemas import (
    CalendarSnapshot,
    DailyEntry,
    EveningEntry,
    EveningRecord,
    MorningEntry,
    WhoopSnapshot,
)

logger = logging.getLogger(__name__)


def extract_metrics(snapshot: Optional[WhoopSnapshot]) -> Dict[str, Any]:
    """
    Copy the queryable scalars out of a Whoop snapshot.

    Missing parts of the snapshot simply leave their columns NULL.
    """
    recovery = snapshot.recovery if snapshot else None
    sleep = snapshot.sleep if snapshot else None
    strain = snapshot.strain if snapshot else None

    return {
        "recovery_score": recovery.score if recovery else None,
        "hrv": recovery.hrv_rmssd if recovery else None,
        "resting_hr": recovery.resting_heart_rate if recovery else None,
        "sleep_quality_minutes": sleep.quality_duration if sleep else None,
        "sleep_efficiency": sleep.efficiency if sleep else None,
        "strain_score": strain.score if strain else None,
    }


def _morning_columns(entry: MorningEntry) -> Dict[str, Any]:
    columns = {
        "whoop_data": entry.whoop_snapshot.model_dump(mode="json") if entry.whoop_snapshot else None,
        "calendar_data": entry.calendar_snapshot.model_dump(mode="json") if entry.calendar_snapshot else None,
        "energy_rating": entry.energy_rating,
        "mood": entry.mood.value if entry.mood else None,
        "sleep_reflection": entry.sleep_reflection,
        "yesterday_win": entry.yesterday_win,
        "yesterday_challenge": entry.yesterday_challenge,
        "one_thing": entry.one_thing,
        "movement_intention": entry.movement_intention.value if entry.movement_intention else None,
        "success_metric": entry.success_metric,
        "patterns": entry.patterns,
        "dynamic_questions": list(entry.dynamic_questions) if entry.dynamic_questions is not None else None,
    }
    columns.update(extract_metrics(entry.whoop_snapshot))
    return columns


def row_to_entry(row: DailyEntryRow) -> DailyEntry:
    """Rebuild the typed DailyEntry from its stored row."""
    evening = None
    if row.has_evening:
        evening = EveningRecord(
            priority_completed=row.priority_completed,
            evening_reflection=row.evening_reflection or "",
            gratitude=row.gratitude or [],
            tomorrow_remember=row.tomorrow_remember or "",
            created_at=row.evening_created_at,
            updated_at=row.evening_updated_at,
        )

    return DailyEntry(
        date=row.date,
        created_at=row.created_at,
        updated_at=row.updated_at,
        whoop_snapshot=WhoopSnapshot.model_validate(row.whoop_data) if row.whoop_data else None,
        calendar_snapshot=CalendarSnapshot.model_validate(row.calendar_data) if row.calendar_data else None,
        energy_rating=row.energy_rating,
        mood=row.mood,
        sleep_reflection=row.sleep_reflection or "",
        yesterday_win=row.yesterday_win or "",
        yesterday_challenge=row.yesterday_challenge or "",
        one_thing=row.one_thing or "",
        movement_intention=row.movement_intention,
        success_metric=row.success_metric or "",
        patterns=row.patterns,
        dynamic_questions=row.dynamic_questions,
        evening=evening,
    )


class EntryStore:
    """Durable table of DailyEntry records keyed by date."""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, day: date) -> Optional[DailyEntryRow]:
        return self.db.get(DailyEntryRow, day)

    def upsert_morning(self, entry: MorningEntry) -> DailyEntry:
        """
        Insert the day's entry, or overwrite its morning fields.

        An existing evening sub-record and the original creation timestamp
        are left untouched.
        """
        columns = _morning_columns(entry)
        row = self._get_row(entry.date)
        now = utcnow()

        if row is None:
            row = DailyEntryRow(date=entry.date, created_at=now, updated_at=now, **columns)
            self.db.add(row)
            action = "created"
        else:
            for name, value in columns.items():
                setattr(row, name, value)
            row.updated_at = now
            action = "updated"

        commit_or_raise(self.db)
        logger.info(
            f"Morning entry {action} for {entry.date.isoformat()}",
            extra={"entry_date": entry.date.isoformat()}
        )
        return row_to_entry(row)

    def upsert_evening(self, evening: EveningEntry, day: date) -> DailyEntry:
        """
        Set the evening sub-record on an existing entry.

        Raises:
            NotFoundError: no morning entry exists for ``day``
        """
        row = self._get_row(day)
        if row is None:
            raise NotFoundError("Morning entry", day.isoformat())

        now = utcnow()
        if row.evening_created_at is None:
            # Never earlier than the entry itself, even if clocks disagree
            row.evening_created_at = max(now, row.created_at)
        row.evening_updated_at = max(now, row.evening_created_at)
        row.priority_completed = evening.priority_completed.value
        row.evening_reflection = evening.evening_reflection
        row.gratitude = list(evening.gratitude)
        row.tomorrow_remember = evening.tomorrow_remember
        row.updated_at = max(now, row.updated_at)

        commit_or_raise(self.db)
        logger.info(f"Evening entry saved for {day.isoformat()}", extra={"entry_date": day.isoformat()})
        return row_to_entry(row)

    def get_by_date(self, day: date) -> Optional[DailyEntry]:
        row = self._get_row(day)
        return row_to_entry(row) if row else None

    def get_recent(self, days: int, today: Optional[date] = None) -> List[DailyEntry]:
        """
        Entries dated within the trailing window ending today, newest first.

        The window reaches back ``days`` days before today, so ``days=7``
        spans today and the seven days before it.
        """
        if days < 0:
            raise ValidationError("days must not be negative", field="days")

        today = today or date.today()
        start = today - timedelta(days=days)

        rows = self.db.query(DailyEntryRow).filter(
            DailyEntryRow.date >= start,
            DailyEntryRow.date <= today
        ).order_by(DailyEntryRow.date.desc()).all()

        return [row_to_entry(row) for row in rows]

    def get_entry_dates(self, start: date, end: date) -> List[date]:
        """Dates that have an entry in ``[start, end]``, oldest first."""
        rows = self.db.query(DailyEntryRow.date).filter(
            DailyEntryRow.date >= start,
            DailyEntryRow.date <= end
        ).order_by(DailyEntryRow.date).all()
        return [row.date for row in rows]
