from sqlalchemy import Column, Integer, Boolean, CheckConstraint, Float, Date, DateTime, ForeignKey, JSON, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from wellness_journal.core.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite does not keep tzinfo across a round trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DailyEntry(Base):
    """
    One journal day.

    The morning routine creates the row; the evening routine only fills the
    evening_* columns. Snapshots are stored whole as JSON, and the scalar
    metrics used by aggregate queries are copied out at write time.
    """
    __tablename__ = "daily_entries"

    date = Column(Date, primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    # Provider snapshots (full fidelity)
    whoop_data = Column(JSON, nullable=True)
    calendar_data = Column(JSON, nullable=True)

    # Extracted metrics for querying
    recovery_score = Column(Float, nullable=True)
    hrv = Column(Float, nullable=True)
    resting_hr = Column(Float, nullable=True)
    sleep_quality_minutes = Column(Integer, nullable=True)
    sleep_efficiency = Column(Float, nullable=True)
    strain_score = Column(Float, nullable=True)

    # Subjective ratings
    energy_rating = Column(Integer, nullable=True)
    mood = Column(Text, nullable=True)
    sleep_reflection = Column(Text, nullable=True)

    # Reflections
    yesterday_win = Column(Text, nullable=True)
    yesterday_challenge = Column(Text, nullable=True)

    # Intentions
    one_thing = Column(Text, nullable=True)
    movement_intention = Column(Text, nullable=True)
    success_metric = Column(Text, nullable=True)

    # AI-generated content
    patterns = Column(Text, nullable=True)
    dynamic_questions = Column(JSON, nullable=True)

    # Evening follow-up (all NULL until the evening routine runs)
    evening_created_at = Column(DateTime, nullable=True)
    evening_updated_at = Column(DateTime, nullable=True)
    priority_completed = Column(Text, nullable=True)
    evening_reflection = Column(Text, nullable=True)
    gratitude = Column(JSON, nullable=True)
    tomorrow_remember = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("energy_rating BETWEEN 1 AND 10", name="ck_energy_rating_range"),
        CheckConstraint(
            "priority_completed IN ('yes', 'partial', 'no')",
            name="ck_priority_completed_values",
        ),
        Index("ix_daily_entries_recovery", "date", "recovery_score"),
    )

    @property
    def has_evening(self) -> bool:
        return self.evening_created_at is not None


class Habit(Base):
    """Recurring habit. Never deleted; retired habits are marked inactive."""
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, unique=True, nullable=False)
    emoji = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False, default="anytime")
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    logs = relationship("HabitLog", back_populates="habit")

    __table_args__ = (
        CheckConstraint(
            "category IN ('morning', 'evening', 'anytime')",
            name="ck_habit_category_values",
        ),
    )


class HabitLog(Base):
    __tablename__ = "habit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    habit_id = Column(Integer, ForeignKey("habits.id"), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    note = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    habit = relationship("Habit", back_populates="logs")

    __table_args__ = (
        UniqueConstraint("date", "habit_id", name="uq_habit_log_date_habit"),
    )


class Pattern(Base):
    """Observation about the journal (correlation, trend, anomaly, insight)."""
    __tablename__ = "patterns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    detected_at = Column(DateTime, default=utcnow, nullable=False)
    pattern_type = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    data_points = Column(JSON, nullable=False, default=list)  # ISO dates
    confidence = Column(Float, nullable=False, default=0.0)
    dismissed = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(
            "pattern_type IN ('correlation', 'trend', 'anomaly', 'insight')",
            name="ck_pattern_type_values",
        ),
        CheckConstraint("confidence >= 0 AND confidence <= 1", name="ck_pattern_confidence_range"),
    )
