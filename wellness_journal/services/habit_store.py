"""
Habit Store

Catalogue of recurring habits and the per-day completion log.
Habits are seeded once and never deleted; retiring one clears ``active``.
"""
from datetime import date
from typing import List, Optional, Union
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from wellness_journal.core.database import commit_or_raise
from wellness_journal.core.exceptions import ConflictError, NotFoundError
from wellness_journal.models import Habit, HabitLog, utcnow
from wellness_journal.schemas import HabitCategory, HabitLogResponse, HabitResponse

logger = logging.getLogger(__name__)

# (name, emoji, category)
DEFAULT_HABITS = [
    ("Hydrate on waking", "💧", HabitCategory.MORNING),
    ("Meditate", "🧘", HabitCategory.MORNING),
    ("Sunlight walk", "🌅", HabitCategory.MORNING),
    ("Read", "📚", HabitCategory.EVENING),
    ("Screens off by 10pm", "📵", HabitCategory.EVENING),
    ("Stretch", "🤸", HabitCategory.ANYTIME),
    ("Move for 30 minutes", "🏃", HabitCategory.ANYTIME),
]


def _category_value(category: Union[HabitCategory, str]) -> str:
    return HabitCategory(category).value


class HabitStore:
    def __init__(self, db: Session):
        self.db = db

    def seed_default_habits(self) -> int:
        """Insert any default habit not already in the catalogue. Returns count added."""
        existing = {name for (name,) in self.db.query(Habit.name).all()}
        added = 0
        for name, emoji, category in DEFAULT_HABITS:
            if name in existing:
                continue
            self.db.add(Habit(name=name, emoji=emoji, category=category.value, active=True))
            added += 1

        if added:
            commit_or_raise(self.db)
            logger.info(f"Seeded {added} default habits")
        return added

    def add_habit(self, name: str, emoji: str, category: Union[HabitCategory, str]) -> HabitResponse:
        if self.db.query(Habit.id).filter(Habit.name == name).first() is not None:
            raise ConflictError(f"Habit already exists: {name}")

        habit = Habit(name=name, emoji=emoji, category=_category_value(category), active=True)
        self.db.add(habit)
        commit_or_raise(self.db)
        logger.info(f"Added habit '{name}'")
        return HabitResponse.model_validate(habit)

    def get_habit(self, habit_id: int) -> Optional[HabitResponse]:
        habit = self.db.get(Habit, habit_id)
        return HabitResponse.model_validate(habit) if habit else None

    def get_habit_by_name(self, name: str) -> Optional[HabitResponse]:
        habit = self.db.query(Habit).filter(Habit.name == name).first()
        return HabitResponse.model_validate(habit) if habit else None

    def set_habit_active(self, habit_id: int, active: bool) -> HabitResponse:
        habit = self.db.get(Habit, habit_id)
        if habit is None:
            raise NotFoundError("Habit", str(habit_id))
        habit.active = active
        commit_or_raise(self.db)
        return HabitResponse.model_validate(habit)

    def get_active_habits(self, category: Optional[Union[HabitCategory, str]] = None) -> List[HabitResponse]:
        """
        Active habits ordered by (category, name).

        With a category, "anytime" habits are included alongside it.
        """
        query = self.db.query(Habit).filter(Habit.active.is_(True))
        if category is not None:
            value = _category_value(category)
            query = query.filter(or_(
                Habit.category == value,
                Habit.category == HabitCategory.ANYTIME.value
            ))

        habits = query.order_by(Habit.category, Habit.name).all()
        return [HabitResponse.model_validate(h) for h in habits]

    def log_habit(
        self,
        day: date,
        habit_id: int,
        completed: bool,
        note: Optional[str] = None
    ) -> HabitLogResponse:
        """Record one habit for one day. Re-logging overwrites (last write wins)."""
        if self.db.get(Habit, habit_id) is None:
            raise NotFoundError("Habit", str(habit_id))

        log = self.db.query(HabitLog).filter(
            HabitLog.date == day,
            HabitLog.habit_id == habit_id
        ).first()

        if log is None:
            log = HabitLog(date=day, habit_id=habit_id)
            self.db.add(log)

        log.completed = completed
        log.note = note
        log.updated_at = utcnow()

        commit_or_raise(self.db)
        logger.info(
            f"Habit {habit_id} logged for {day.isoformat()}: completed={completed}",
            extra={"entry_date": day.isoformat(), "habit_id": habit_id}
        )
        return HabitLogResponse.model_validate(log)

    def get_habit_logs(self, day: date) -> List[HabitLogResponse]:
        logs = self.db.query(HabitLog).filter(
            HabitLog.date == day
        ).order_by(HabitLog.habit_id).all()
        return [HabitLogResponse.model_validate(log) for log in logs]
