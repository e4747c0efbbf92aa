"""
Unit tests for the Free-Block Interval Engine and calendar summaries.
"""

import pytest
from datetime import timedelta, timezone

from wellness_journal.core.exceptions import ValidationError
from wellness_journal.schemas import EventCategory
from wellness_journal.services import calendar_blocks
from wellness_journal.services.calendar_blocks import (
    build_calendar_snapshot,
    calculate_longest_free_block,
    categorize_event,
    format_duration,
    make_event,
    summarize_events,
)


def meeting(event_id, start, end, title="Project sync"):
    return make_event(event_id, title, start, end)


class TestLongestFreeBlock:

    def test_no_events_whole_window_free(self, today):
        assert calculate_longest_free_block([], today, 9, 18) == 540

    def test_free_gaps_between_events(self, today, work_day):
        events = [
            meeting("a", work_day(10), work_day(11)),
            meeting("b", work_day(14), work_day(14, 30)),
        ]

        assert calculate_longest_free_block(events, today, 9, 18) == 210

    def test_unsorted_input(self, today, work_day):
        events = [
            meeting("b", work_day(14), work_day(14, 30)),
            meeting("a", work_day(10), work_day(11)),
        ]

        assert calculate_longest_free_block(events, today, 9, 18) == 210

    def test_overlapping_and_nested_events_are_absorbed(self, today, work_day):
        events = [
            meeting("a", work_day(9), work_day(12)),
            meeting("b", work_day(10), work_day(11)),    # nested in a
            meeting("c", work_day(11, 30), work_day(13)),  # overlaps a
            meeting("d", work_day(15), work_day(18)),
        ]

        # Only 13:00-15:00 is free
        assert calculate_longest_free_block(events, today, 9, 18) == 120

    def test_event_covering_whole_window(self, today, work_day):
        events = [meeting("a", work_day(8), work_day(19))]

        assert calculate_longest_free_block(events, today, 9, 18) == 0

    def test_events_before_window_start(self, today, work_day):
        events = [meeting("a", work_day(7), work_day(10))]

        assert calculate_longest_free_block(events, today, 9, 18) == 480

    def test_events_after_window_end_are_clipped(self, today, work_day):
        events = [meeting("a", work_day(19), work_day(20))]

        assert calculate_longest_free_block(events, today, 9, 18) == 540

    def test_timezone_aware_events(self, today, utc_work_day):
        events = [meeting("a", utc_work_day(9), utc_work_day(17, 15))]

        assert calculate_longest_free_block(events, today, 9, 18, tz=timezone.utc) == 45

    def test_utc_events_use_local_working_hours(self, today, utc_work_day, monkeypatch):
        phoenix = timezone(timedelta(hours=-7))
        monkeypatch.setattr(calendar_blocks, "local_timezone", lambda day: phoenix)
        # 16:00-17:00 UTC is 09:00-10:00 in Phoenix
        events = [meeting("a", utc_work_day(16), utc_work_day(17))]

        assert calculate_longest_free_block(events, today, 9, 18) == 480

    def test_window_does_not_depend_on_first_event_zone(self, today, utc_work_day, monkeypatch):
        monkeypatch.setattr(calendar_blocks, "local_timezone", lambda day: timezone.utc)
        plus_two = timezone(timedelta(hours=2))
        events = [
            meeting("a", utc_work_day(10).astimezone(plus_two), utc_work_day(11).astimezone(plus_two)),
            meeting("b", utc_work_day(14), utc_work_day(14, 30)),
        ]

        assert calculate_longest_free_block(events, today, 9, 18) == 210

    def test_explicit_timezone_shifts_window(self, today, utc_work_day):
        plus_two = timezone(timedelta(hours=2))
        # 09:00-18:00 at UTC+2 is 07:00-16:00 UTC
        events = [meeting("a", utc_work_day(7), utc_work_day(15))]

        assert calculate_longest_free_block(events, today, 9, 18, tz=plus_two) == 60

    def test_invalid_window(self, today):
        with pytest.raises(ValidationError):
            calculate_longest_free_block([], today, 18, 9)


class TestSummaries:

    def test_meeting_minutes_and_focus_blocks(self, today, work_day):
        events = [
            meeting("a", work_day(10), work_day(11), title="Team standup"),
            meeting("b", work_day(14), work_day(14, 30), title="Design review"),
            make_event("c", "Deep work", work_day(11), work_day(13)),
            make_event("d", "Lunch", work_day(13), work_day(14)),
        ]

        summary = summarize_events(events, today, 9, 18)

        assert summary.total_events == 4
        assert summary.meeting_minutes == 90
        assert summary.focus_blocks == 1
        assert summary.longest_free_block == 210

    def test_empty_day(self, today):
        summary = summarize_events([], today, 9, 18)

        assert summary.total_events == 0
        assert summary.meeting_minutes == 0
        assert summary.focus_blocks == 0
        assert summary.longest_free_block == 540

    def test_snapshot_orders_events(self, today, work_day):
        late = meeting("late", work_day(16), work_day(17))
        early = meeting("early", work_day(9, 30), work_day(10))

        snapshot = build_calendar_snapshot(today, [late, early], 9, 18)

        assert [e.id for e in snapshot.events] == ["early", "late"]
        assert snapshot.date == today
        assert snapshot.summary.meeting_minutes == 90
        assert snapshot.summary.longest_free_block == 360


class TestMakeEvent:

    def test_duration_and_category(self, work_day):
        event = make_event("x", "1:1 with Sam", work_day(9), work_day(9, 45), location="Room 4")

        assert event.duration_minutes == 45
        assert event.category == EventCategory.MEETING
        assert event.location == "Room 4"

    def test_half_minutes_round_up(self, work_day):
        start = work_day(9)

        event = make_event("x", "Quick call", start, start + timedelta(minutes=2, seconds=30))
        short = make_event("y", "Quick call", start, start + timedelta(minutes=2, seconds=29))

        assert event.duration_minutes == 3
        assert short.duration_minutes == 2

    def test_untitled(self, work_day):
        event = make_event("x", "", work_day(9), work_day(10))

        assert event.title == "Untitled Event"

    def test_custom_categorizer(self, work_day):
        event = make_event("x", "Anything", work_day(9), work_day(10),
                           categorize=lambda title, description: EventCategory.OTHER)

        assert event.category == EventCategory.OTHER

    def test_end_before_start(self, work_day):
        with pytest.raises(ValidationError):
            make_event("x", "Broken", work_day(10), work_day(9))


class TestCategorizeEvent:

    @pytest.mark.parametrize("title,expected", [
        ("Focus time", EventCategory.FOCUS),
        ("Heads down: Q4 plan", EventCategory.FOCUS),
        ("Gym", EventCategory.PERSONAL),
        ("Dentist", EventCategory.PERSONAL),
        ("Weekly sync", EventCategory.MEETING),
        ("Candidate interview", EventCategory.MEETING),
        ("Quarterly planning", EventCategory.MEETING),
    ])
    def test_keywords(self, title, expected):
        assert categorize_event(title) == expected

    def test_focus_beats_meeting(self):
        assert categorize_event("Sync", "blocked for deep work") == EventCategory.FOCUS


@pytest.mark.parametrize("minutes,expected", [
    (0, "0m"),
    (45, "45m"),
    (60, "1h"),
    (90, "1h 30m"),
    (540, "9h"),
])
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected
