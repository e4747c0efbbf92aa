"""
Journal facade

Single entry point the CLI and renderers use. Holds one Session (from the
process-wide ``Database``) and the settings that size each analytics window.
"""
from datetime import date, tzinfo
from typing import List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from wellness_journal.core.config import Settings, settings as default_settings
from wellness_journal.schemas import (
    CalendarEvent,
    CalendarSnapshot,
    DailyEntry,
    EveningEntry,
    HabitCategory,
    HabitLogResponse,
    HabitResponse,
    HabitStat,
    HistoricalStats,
    MorningEntry,
    Reminder,
    WeeklySummary,
)
from wellness_journal.services import calendar_blocks, habit_stats, historical_stats, reminders, streaks
from wellness_journal.services.entry_store import EntryStore
from wellness_journal.services.habit_store import HabitStore
from wellness_journal.services.weekly_summary import build_weekly_summary


class Journal:
    def __init__(self, db: Session, config: Optional[Settings] = None, today: Optional[date] = None):
        self.db = db
        self.settings = config or default_settings
        # Pinned "today" for reproducible reports; None means the real date
        self._today = today
        self.entries = EntryStore(db)
        self.habits = HabitStore(db)

    @property
    def today(self) -> date:
        return self._today or date.today()

    # Entry Store

    def upsert_morning(self, entry: MorningEntry) -> DailyEntry:
        return self.entries.upsert_morning(entry)

    def upsert_evening(self, evening: EveningEntry, day: Optional[date] = None) -> DailyEntry:
        return self.entries.upsert_evening(evening, day or self.today)

    def get_by_date(self, day: date) -> Optional[DailyEntry]:
        return self.entries.get_by_date(day)

    def get_recent(self, days: int) -> List[DailyEntry]:
        return self.entries.get_recent(days, today=self.today)

    # Analytics

    def get_historical_stats(self, average_window_days: Optional[int] = None) -> HistoricalStats:
        if average_window_days is None:
            average_window_days = self.settings.STATS_WINDOW_DAYS
        return historical_stats.get_historical_stats(
            self.db,
            average_window_days=average_window_days,
            today=self.today,
            trend_window_days=self.settings.TREND_WINDOW_DAYS,
            recent_days=self.settings.TREND_RECENT_DAYS,
            threshold_pct=self.settings.TREND_THRESHOLD_PCT,
        )

    def get_current_streak(self) -> int:
        return streaks.get_current_streak(self.db, today=self.today, max_days=self.settings.STREAK_MAX_DAYS)

    def weekly_summary(self) -> WeeklySummary:
        return build_weekly_summary(self.db, today=self.today, config=self.settings)

    def reminder(self, hour: int) -> Reminder:
        """Reminder due at ``hour`` today, based on today's entry and the streak."""
        return reminders.reminder_due(
            self.get_by_date(self.today),
            hour,
            streak=self.get_current_streak(),
            config=self.settings,
        )

    # Habits

    def get_active_habits(self, category: Optional[Union[HabitCategory, str]] = None) -> List[HabitResponse]:
        return self.habits.get_active_habits(category)

    def log_habit(
        self,
        habit_id: int,
        completed: bool,
        note: Optional[str] = None,
        day: Optional[date] = None
    ) -> HabitLogResponse:
        return self.habits.log_habit(day or self.today, habit_id, completed, note)

    def get_habit_stats(self, window_days: Optional[int] = None) -> List[HabitStat]:
        if window_days is None:
            window_days = self.settings.HABIT_STATS_WINDOW_DAYS
        return habit_stats.get_habit_stats(
            self.db,
            window_days=window_days,
            today=self.today,
            max_streak_days=self.settings.STREAK_MAX_DAYS,
        )

    # Calendar

    def summarize_calendar(
        self,
        day: date,
        events: Sequence[CalendarEvent],
        tz: Optional[tzinfo] = None
    ) -> CalendarSnapshot:
        """Working hours are read in ``tz``, or the local zone when omitted."""
        return calendar_blocks.build_calendar_snapshot(
            day,
            events,
            start_hour=self.settings.WORKDAY_START_HOUR,
            end_hour=self.settings.WORKDAY_END_HOUR,
            tz=tz,
        )
