"""
Check-in reminders.

Decides which routine, if any, the user should be nudged towards at a
given hour. Delivering the notification is left to the caller.
"""

from typing import Optional

from wellness_journal.core.config import Settings, settings as default_settings
from wellness_journal.core.exceptions import ValidationError
from wellness_journal.schemas import DailyEntry, Reminder, ReminderKind


def reminder_due(
    entry: Optional[DailyEntry],
    hour: int,
    streak: int = 0,
    config: Optional[Settings] = None
) -> Reminder:
    """
    Reminder for ``hour`` given today's entry (None when not written yet).

    Morning window: nudge only when there is no entry.
    Evening window: nudge for the reflection when the morning is done but
    the evening is not, or for the missed check-in when there is no entry.
    """
    if not 0 <= hour <= 23:
        raise ValidationError(f"Invalid hour: {hour}", field="hour")

    config = config or default_settings

    if config.EVENING_REMINDER_START_HOUR <= hour < config.EVENING_REMINDER_END_HOUR:
        if entry is None:
            return Reminder(
                kind=ReminderKind.MORNING,
                message="You missed today's check-in!",
                subtitle="Run the morning routine to log your day",
            )
        if entry.evening is None:
            priority = f'Did you accomplish "{entry.one_thing}"?' if entry.one_thing else "Take a minute to close the day."
            return Reminder(
                kind=ReminderKind.EVENING,
                message="Time for your evening reflection!",
                subtitle=f"How did today go? {priority}",
            )

    elif config.MORNING_REMINDER_START_HOUR <= hour < config.MORNING_REMINDER_END_HOUR:
        if entry is None:
            subtitle = (
                f"Keep your {streak}-day streak alive" if streak > 0
                else "Start your wellness journey today"
            )
            return Reminder(
                kind=ReminderKind.MORNING,
                message="Time for your morning check-in!",
                subtitle=subtitle,
            )

    return Reminder(kind=ReminderKind.NONE)
