"""
Free-Block Interval Engine

Summarizes a day's calendar events: meeting minutes, focus blocks and the
longest uninterrupted free interval inside the working window.

Events arrive already fetched and categorized. ``categorize_event`` is only
the default keyword policy and can be swapped for any callable with the
same signature.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, List, Optional, Sequence
import logging
import math

from wellness_journal.core.config import settings
from wellness_journal.core.exceptions import ValidationError
from wellness_journal.schemas import CalendarEvent, CalendarSnapshot, CalendarSummary, EventCategory

logger = logging.getLogger(__name__)


FOCUS_KEYWORDS = ['focus', 'deep work', 'heads down', 'no meetings', 'blocked', 'focus time']
PERSONAL_KEYWORDS = ['lunch', 'break', 'gym', 'workout', 'doctor', 'dentist', 'personal', 'errand']
MEETING_KEYWORDS = ['meeting', 'sync', 'standup', 'stand-up', '1:1', '1-1', 'call', 'chat', 'review', 'interview']

Categorizer = Callable[[str, str], EventCategory]


def categorize_event(title: str, description: str = "") -> EventCategory:
    """
    Keyword-based category from title and description.

    Focus wins over personal, personal over meeting. Anything unrecognised
    is assumed to be a meeting, since most timed events involve other people.
    """
    combined = f"{title} {description}".lower()

    if any(kw in combined for kw in FOCUS_KEYWORDS):
        return EventCategory.FOCUS
    if any(kw in combined for kw in PERSONAL_KEYWORDS):
        return EventCategory.PERSONAL
    if any(kw in combined for kw in MEETING_KEYWORDS):
        return EventCategory.MEETING
    return EventCategory.MEETING


def _minutes(delta: timedelta) -> int:
    # Half a minute rounds up
    return int(math.floor(delta.total_seconds() / 60 + 0.5))


def local_timezone(day: date) -> tzinfo:
    """The machine's local UTC offset in effect at noon on ``day``."""
    return datetime.combine(day, time(12)).astimezone().tzinfo


def make_event(
    event_id: str,
    title: str,
    start: datetime,
    end: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    categorize: Categorizer = categorize_event
) -> CalendarEvent:
    """Build a CalendarEvent with its duration and category filled in."""
    if end < start:
        raise ValidationError(f"Event '{title}' ends before it starts", field="end_time")

    return CalendarEvent(
        id=event_id,
        title=title or "Untitled Event",
        start_time=start,
        end_time=end,
        duration_minutes=_minutes(end - start),
        category=categorize(title or "", description or ""),
        location=location,
        description=description,
    )


def working_window(
    day: date,
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    tz: Optional[tzinfo] = None
):
    """(start, end) datetimes of the working window on ``day``."""
    start_hour = settings.WORKDAY_START_HOUR if start_hour is None else start_hour
    end_hour = settings.WORKDAY_END_HOUR if end_hour is None else end_hour

    if not 0 <= start_hour < end_hour <= 24:
        raise ValidationError(
            f"Invalid working window {start_hour}:00-{end_hour}:00",
            field="working_window"
        )

    midnight = datetime.combine(day, time(0), tzinfo=tz)
    return midnight + timedelta(hours=start_hour), midnight + timedelta(hours=end_hour)


def calculate_longest_free_block(
    events: Sequence[CalendarEvent],
    day: date,
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    tz: Optional[tzinfo] = None
) -> int:
    """
    Longest free interval (minutes) inside the working window.

    Events are swept in start order with a cursor that only moves forward,
    so overlapping and nested events are absorbed. Gaps are clipped to the
    window. With no events the whole window is free.

    Naive event times are read as local wall-clock times. For timezone-aware
    events the window is built in ``tz``, defaulting to the machine's local
    zone, and every event is converted into it before the sweep.
    """
    aware = bool(events) and events[0].start_time.tzinfo is not None
    if not aware:
        tz = None
    elif tz is None:
        tz = local_timezone(day)

    window_start, window_end = working_window(day, start_hour, end_hour, tz)

    if not events:
        return _minutes(window_end - window_start)

    if aware:
        spans = [(e.start_time.astimezone(tz), e.end_time.astimezone(tz)) for e in events]
    else:
        spans = [(e.start_time, e.end_time) for e in events]

    longest_free = 0
    cursor = window_start

    for start, end in sorted(spans):
        gap_end = min(start, window_end)
        if gap_end > cursor:
            longest_free = max(longest_free, _minutes(gap_end - cursor))
        cursor = max(cursor, end)

    # Free time after the last event until the end of the work day
    if cursor < window_end:
        longest_free = max(longest_free, _minutes(window_end - cursor))

    return longest_free


def summarize_events(
    events: Sequence[CalendarEvent],
    day: date,
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    tz: Optional[tzinfo] = None
) -> CalendarSummary:
    meeting_minutes = sum(
        e.duration_minutes for e in events if e.category == EventCategory.MEETING
    )
    focus_blocks = sum(1 for e in events if e.category == EventCategory.FOCUS)

    return CalendarSummary(
        total_events=len(events),
        meeting_minutes=meeting_minutes,
        focus_blocks=focus_blocks,
        longest_free_block=calculate_longest_free_block(events, day, start_hour, end_hour, tz),
    )


def build_calendar_snapshot(
    day: date,
    events: Sequence[CalendarEvent],
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    tz: Optional[tzinfo] = None
) -> CalendarSnapshot:
    """CalendarSnapshot with events in start order and a computed summary."""
    ordered: List[CalendarEvent] = sorted(events, key=lambda e: e.start_time)
    summary = summarize_events(ordered, day, start_hour, end_hour, tz)

    logger.debug(
        f"Calendar {day.isoformat()}: {summary.total_events} events, "
        f"{summary.meeting_minutes}m meetings, longest free {summary.longest_free_block}m"
    )
    return CalendarSnapshot(date=day, events=ordered, summary=summary)


def format_duration(minutes: int) -> str:
    """Format duration for display (e.g., "1h 30m")."""
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
