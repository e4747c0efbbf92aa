"""
Tests for the Journal facade, the status report and the command line.
"""

import json
from datetime import timedelta, timezone

import pytest

from wellness_journal import cli
from wellness_journal.core.config import Settings
from wellness_journal.core.database import Database
from wellness_journal.core.exceptions import NotFoundError, ValidationError
from wellness_journal.schemas import EveningEntry, ReminderKind, Trend
from wellness_journal.services.calendar_blocks import make_event
from wellness_journal.services.entry_store import EntryStore
from wellness_journal.services.journal import Journal
from wellness_journal.services.status_report import build_status_report


@pytest.fixture
def config():
    return Settings(
        DATABASE_URL="sqlite://",
        STATS_WINDOW_DAYS=7,
        STREAK_MAX_DAYS=60,
        HABIT_STATS_WINDOW_DAYS=7,
        WHOOP_CLIENT_ID="id",
        WHOOP_CLIENT_SECRET="secret",
        GOOGLE_CLIENT_ID=None,
        GOOGLE_CLIENT_SECRET=None,
        ANTHROPIC_API_KEY=None,
    )


@pytest.fixture
def journal(db_session, config, today):
    return Journal(db_session, config=config, today=today)


class TestJournal:

    def test_evening_defaults_to_today(self, journal, make_morning, today):
        journal.upsert_morning(make_morning(today, energy=6))

        stored = journal.upsert_evening(EveningEntry(priority_completed="yes"))

        assert stored.date == today
        assert journal.get_by_date(today).evening is not None

    def test_evening_without_morning(self, journal):
        with pytest.raises(NotFoundError):
            journal.upsert_evening(EveningEntry(priority_completed="no"))

    def test_analytics_use_pinned_today(self, journal, add_entry):
        add_entry(1, recovery=80, energy=7)
        add_entry(2, recovery=60, energy=5)

        assert journal.get_current_streak() == 2
        assert [e.energy_rating for e in journal.get_recent(7)] == [7, 5]

        stats = journal.get_historical_stats()
        assert stats.days_tracked == 2
        assert stats.avg_recovery == pytest.approx(70)
        assert stats.average_window_days == 7

    def test_habit_logging_defaults_to_today(self, journal, habit_store, today):
        habit = habit_store.add_habit("Journal", "✍️", "evening")

        log = journal.log_habit(habit.id, True)

        assert log.date == today
        stats = journal.get_habit_stats()
        assert stats[0].habit_name == "Journal"
        assert stats[0].completion_rate == pytest.approx(14.3)
        assert stats[0].streak == 1

    def test_summarize_calendar_uses_working_window(self, journal, work_day, today):
        events = [make_event("a", "Team sync", work_day(10), work_day(11))]

        snapshot = journal.summarize_calendar(today, events)

        assert snapshot.summary.meeting_minutes == 60
        assert snapshot.summary.longest_free_block == 420

    def test_summarize_calendar_in_given_zone(self, journal, utc_work_day, today):
        phoenix = timezone(timedelta(hours=-7))
        events = [make_event("a", "Team sync", utc_work_day(16), utc_work_day(17))]

        snapshot = journal.summarize_calendar(today, events, tz=phoenix)

        assert snapshot.summary.longest_free_block == 480

    def test_zero_day_window_is_not_the_default(self, journal, add_entry):
        add_entry(0, recovery=50)
        add_entry(5, recovery=90)

        stats = journal.get_historical_stats(0)

        assert stats.days_tracked == 1
        assert stats.avg_recovery == pytest.approx(50)
        assert stats.average_window_days == 0
        assert journal.get_historical_stats().days_tracked == 2

    def test_zero_day_habit_window_is_rejected(self, journal):
        with pytest.raises(ValidationError):
            journal.get_habit_stats(0)

    def test_weekly_summary_uses_pinned_today(self, journal, add_entry, today):
        add_entry(0, recovery=75)
        add_entry(7, recovery=75)

        summary = journal.weekly_summary()

        assert summary.end_date == today
        assert summary.days_tracked == 1

    def test_reminder_reads_todays_entry(self, journal, add_entry):
        assert journal.reminder(7).kind == ReminderKind.MORNING

        add_entry(0)

        assert journal.reminder(7).kind == ReminderKind.NONE
        assert journal.reminder(21).kind == ReminderKind.EVENING


class TestStatusReport:

    def test_entry_count_covers_thirty_calendar_days(self, journal, add_entry):
        add_entry(0)
        add_entry(29)
        add_entry(30)

        report = build_status_report(journal)

        assert report["entries_last_30_days"] == 2

    def test_empty_journal(self, journal):
        report = build_status_report(journal)

        assert report["entries_last_30_days"] == 0
        assert report["streak"] == 0
        assert "Start your streak" in report["streak_message"]
        assert report["recent_entries"] == []
        assert report["habits"] == []
        assert report["integrations"] == {"whoop": True, "google": False, "claude": False}
        assert report["missing_settings"] == ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"]

    def test_recent_entries_capped_and_json_safe(self, journal, add_entry, today):
        for days_ago in range(0, 8):
            add_entry(days_ago, recovery=70 + days_ago, energy=6)
        journal.upsert_evening(EveningEntry(priority_completed="partial"), today)

        report = build_status_report(journal)

        assert report["entries_last_30_days"] == 8
        assert report["streak"] == 8
        assert len(report["recent_entries"]) == 5
        assert report["recent_entries"][0] == {
            "date": today.isoformat(),
            "recovery": 70,
            "energy": 6,
            "has_evening": True,
        }
        assert report["recent_entries"][1]["has_evening"] is False
        assert report["stats"]["recovery_trend"] == Trend.DOWN.value
        json.dumps(report)


class TestCli:

    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(cli, "setup_logging", lambda config=None: None)

    @pytest.fixture
    def db_url(self, tmp_path):
        return f"sqlite:///{tmp_path / 'journal.db'}"

    def run(self, db_url, *args):
        return cli.main(["--database-url", db_url, *args])

    def test_init_seeds_habits_once(self, db_url, capsys):
        assert self.run(db_url, "init") == 0
        assert "7 habits added" in capsys.readouterr().out

        assert self.run(db_url, "init") == 0
        assert "0 habits added" in capsys.readouterr().out

    def test_log_habit_and_list(self, db_url, capsys, today):
        self.run(db_url, "init")
        capsys.readouterr()

        assert self.run(db_url, "log-habit", "Read", "--date", today.isoformat()) == 0
        assert f"Read: done on {today.isoformat()}" in capsys.readouterr().out

        assert self.run(db_url, "log-habit", "Read", "--missed", "--date", today.isoformat()) == 0
        assert "missed" in capsys.readouterr().out

        assert self.run(db_url, "habits") == 0
        out = capsys.readouterr().out
        assert "Read" in out
        assert "Meditate" in out

    def test_unknown_habit_fails(self, db_url, capsys):
        self.run(db_url, "init")
        capsys.readouterr()

        assert self.run(db_url, "log-habit", "Juggling") == 1
        assert "Habit not found: Juggling" in capsys.readouterr().err

    def test_status_json(self, db_url, capsys):
        assert self.run(db_url, "status", "--json") == 0

        report = json.loads(capsys.readouterr().out)
        assert report["entries_last_30_days"] == 0
        assert report["streak"] == 0
        assert set(report["integrations"]) == {"whoop", "google", "claude"}

    def test_status_text(self, db_url, capsys):
        assert self.run(db_url, "status") == 0

        out = capsys.readouterr().out
        assert "Wellness Journal Status" in out
        assert "Streak:" in out

    def test_storage_unavailable_exits_nonzero(self, tmp_path, capsys):
        url = f"sqlite:///{tmp_path / 'missing' / 'journal.db'}"

        assert cli.main(["--database-url", url, "status"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_weekly_json(self, db_url, capsys):
        assert self.run(db_url, "weekly", "--json") == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["days_tracked"] == 0
        assert summary["days_in_week"] == 7

    def test_weekly_text_without_entries(self, db_url, capsys):
        assert self.run(db_url, "weekly") == 0
        assert "No entries found for this week." in capsys.readouterr().out

    def test_remind_outside_windows(self, db_url, capsys):
        assert self.run(db_url, "remind", "--hour", "14") == 0
        assert "All caught up" in capsys.readouterr().out

    def test_remind_morning(self, db_url, capsys):
        assert self.run(db_url, "remind", "--hour", "7") == 0
        assert "Time for your morning check-in!" in capsys.readouterr().out

    def test_remind_invalid_hour(self, db_url, capsys):
        assert self.run(db_url, "remind", "--hour", "25") == 1
        assert "Invalid hour" in capsys.readouterr().err

    def test_history_empty(self, db_url, capsys):
        assert self.run(db_url, "history", "--period", "month") == 0
        assert capsys.readouterr().out == ""

    def test_history_lists_periods(self, db_url, capsys, make_morning, today):
        with Database(db_url) as database:
            database.create_all()
            with database.session() as db:
                EntryStore(db).upsert_morning(make_morning(today, recovery=72))

        assert self.run(db_url, "history", "--period", "month") == 0

        out = capsys.readouterr().out
        assert "2026-10" in out
        assert "72%" in out

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            cli.main([])
