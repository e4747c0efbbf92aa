"""
Wellness Journal command line.

Usage:
    wellness-journal init                      # Create tables and seed habits
    wellness-journal status [--json]           # Stats, streak and recent entries
    wellness-journal habits                    # Active habits with completion rates
    wellness-journal log-habit "Read"          # Mark a habit done today
    wellness-journal log-habit "Read" --missed --date 2026-10-17
    wellness-journal weekly [--json]           # Last 7 days vs the two-week baseline
    wellness-journal remind [--hour 21]        # Which check-in is due
    wellness-journal history --period month    # Weekly or monthly averages

Environment Variables:
    WELLNESS_DATA_DIR, DATABASE_URL, LOG_LEVEL, LOG_FORMAT
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime

from wellness_journal.core.config import settings
from wellness_journal.core.database import Database
from wellness_journal.core.exceptions import JournalError, NotFoundError
from wellness_journal.core.logging import setup_logging
from wellness_journal.schemas import ReminderKind, WeeklySummary
from wellness_journal.services.calendar_blocks import format_duration
from wellness_journal.services.habit_store import HabitStore
from wellness_journal.services.historical_stats import get_period_averages
from wellness_journal.services.journal import Journal
from wellness_journal.services.status_report import build_status_report

logger = logging.getLogger(__name__)

TREND_ARROWS = {"up": "↑", "down": "↓", "stable": "→"}


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="wellness-journal",
        description="Daily wellness journal: stats, streaks and habits.",
    )
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create tables and seed default habits")

    status = subparsers.add_parser("status", help="Show journal status")
    status.add_argument("--json", action="store_true", help="Print the report as JSON")

    subparsers.add_parser("habits", help="List active habits with completion rates")

    log_habit = subparsers.add_parser("log-habit", help="Log a habit for a day")
    log_habit.add_argument("name", help="Habit name")
    log_habit.add_argument("--missed", action="store_true", help="Record the habit as not done")
    log_habit.add_argument("--note", default=None)
    log_habit.add_argument("--date", type=date.fromisoformat, default=None, help="YYYY-MM-DD (default: today)")

    weekly = subparsers.add_parser("weekly", help="Weekly review against the two-week baseline")
    weekly.add_argument("--json", action="store_true", help="Print the summary as JSON")

    remind = subparsers.add_parser("remind", help="Show which check-in is due now")
    remind.add_argument("--hour", type=int, default=None, help="Hour of day 0-23 (default: now)")

    history = subparsers.add_parser("history", help="Weekly or monthly averages")
    history.add_argument("--period", choices=["week", "month"], default="week")
    history.add_argument("--limit", type=int, default=8)

    return parser


def print_status(report: dict) -> None:
    integrations = report["integrations"]
    print("Wellness Journal Status")
    print("-" * 50)
    print("Integrations:")
    print(f"  Whoop:           {'connected' if integrations['whoop'] else 'not connected'}")
    print(f"  Google Calendar: {'connected' if integrations['google'] else 'not connected'}")
    print(f"  Claude API:      {'configured' if integrations['claude'] else 'optional'}")

    if report["missing_settings"]:
        print("Missing configuration:")
        for name in report["missing_settings"]:
            print(f"  - {name}")

    print(f"\nEntries (last 30 days): {report['entries_last_30_days']}")

    stats = report["stats"]
    if stats["days_tracked"] > 0:
        print(f"\n{stats['average_window_days']}-Day Averages:")
        print(f"  Recovery: {stats['avg_recovery']:.0f}% {TREND_ARROWS[stats['recovery_trend']]}")
        print(f"  HRV:      {stats['avg_hrv']:.0f}ms {TREND_ARROWS[stats['hrv_trend']]}")
        print(f"  Sleep:    {format_duration(round(stats['avg_sleep_minutes']))} {TREND_ARROWS[stats['sleep_trend']]}")
        print(f"  Energy:   {stats['avg_energy']:.1f}/10")

    print(f"\nStreak: {report['streak_message']}")

    if report["recent_entries"]:
        print("\nRecent Entries:")
        for row in report["recent_entries"]:
            recovery = f"{row['recovery']:.0f}%" if row["recovery"] is not None else "--"
            energy = f"{row['energy']}/10" if row["energy"] is not None else "--"
            evening = "yes" if row["has_evening"] else "no"
            print(f"  {row['date']}  Recovery: {recovery:<5} Energy: {energy:<6} Evening: {evening}")


def _change(value, unit: str = "") -> str:
    if not value:
        return ""
    arrow = "↑" if value > 0 else "↓"
    return f"{arrow} {abs(value):.1f}{unit} vs prev"


def print_weekly(summary: WeeklySummary) -> None:
    current, changes = summary.current, summary.changes
    print(f"Weekly Review {summary.week} ({summary.start_date.isoformat()} to {summary.end_date.isoformat()})")
    print("-" * 50)

    if summary.days_tracked == 0:
        print("No entries found for this week.")
        return

    print(f"  Recovery: {current.avg_recovery:.0f}% {_change(changes['avg_recovery'], '%')}")
    print(f"  HRV:      {current.avg_hrv:.0f}ms {_change(changes['avg_hrv'], 'ms')}")
    print(f"  Sleep:    {format_duration(round(current.avg_sleep_minutes))} {_change(changes['avg_sleep_minutes'], 'm')}")
    print(f"  Energy:   {current.avg_energy:.1f}/10 {_change(changes['avg_energy'])}")
    print(f"  Days:     {summary.days_tracked}/{summary.days_in_week} tracked")

    print("\nDaily Breakdown:")
    for day in summary.daily:
        recovery = f"{day.recovery:.0f}%" if day.recovery is not None else "--"
        sleep = format_duration(day.sleep_minutes) if day.sleep_minutes is not None else "--"
        energy = str(day.energy) if day.energy is not None else "--"
        priority = day.priority_completed.value if day.priority_completed else "--"
        print(f"  {day.date.strftime('%a')}  Rec: {recovery:>4}  Sleep: {sleep:>6}  Energy: {energy:>2}  Priority: {priority}")

    if summary.wins:
        print("\nWins:")
        for win in summary.wins:
            print(f"  - {win}")
    if summary.challenges:
        print("Challenges:")
        for challenge in summary.challenges:
            print(f"  - {challenge}")

    if summary.priority_completion_rate is not None:
        print(
            f"\nPriority completion: {summary.priority_completion_rate:.0f}% "
            f"({summary.priorities_done} done, {summary.priorities_partial} partial)"
        )


def main(argv=None) -> int:
    """Main entry point for the application."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(settings)

    try:
        with Database(args.database_url) as database:
            database.create_all()
            with database.session() as db:
                journal = Journal(db)

                if args.command == "init":
                    added = HabitStore(db).seed_default_habits()
                    print(f"Journal ready at {database.url} ({added} habits added)")

                elif args.command == "status":
                    report = build_status_report(journal)
                    if args.json:
                        print(json.dumps(report, indent=2, ensure_ascii=False))
                    else:
                        print_status(report)

                elif args.command == "habits":
                    for stat in journal.get_habit_stats():
                        print(f"  {stat.emoji} {stat.habit_name:<24} {stat.completion_rate:5.1f}%  streak {stat.streak}")

                elif args.command == "log-habit":
                    habit = journal.habits.get_habit_by_name(args.name)
                    if habit is None:
                        raise NotFoundError("Habit", args.name)
                    log = journal.log_habit(habit.id, not args.missed, args.note, day=args.date)
                    print(f"{habit.emoji} {habit.name}: {'done' if log.completed else 'missed'} on {log.date.isoformat()}")

                elif args.command == "weekly":
                    summary = journal.weekly_summary()
                    if args.json:
                        print(summary.model_dump_json(indent=2))
                    else:
                        print_weekly(summary)

                elif args.command == "remind":
                    hour = args.hour if args.hour is not None else datetime.now().hour
                    reminder = journal.reminder(hour)
                    if reminder.kind == ReminderKind.NONE:
                        print("All caught up! No reminders needed.")
                    else:
                        print(f"{reminder.message}\n  {reminder.subtitle}")

                elif args.command == "history":
                    for row in get_period_averages(db, args.period, limit=args.limit):
                        recovery = f"{row.avg_recovery:.0f}%" if row.avg_recovery is not None else "--"
                        hrv = f"{row.avg_hrv:.0f}ms" if row.avg_hrv is not None else "--"
                        print(f"  {row.period:<9} days {row.days_tracked}  Recovery: {recovery:>4}  HRV: {hrv}")

    except JournalError as e:
        logger.error(f"{e.error_code}: {e.detail}", extra={"command": args.command})
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
