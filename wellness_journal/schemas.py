from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, date
from enum import Enum
from typing import Dict, Optional, List


# ============================================================================
# Enumerations
# ============================================================================

class Mood(str, Enum):
    CALM_FOCUSED = "calm_focused"
    ENERGIZED = "energized"
    TIRED_OKAY = "tired_okay"
    ANXIOUS_STRESSED = "anxious_stressed"
    LOW_FLAT = "low_flat"


class MovementIntention(str, Enum):
    REST = "rest"
    ACTIVE_RECOVERY = "active_recovery"
    LIGHT_WORKOUT = "light_workout"
    FULL_INTENSITY = "full_intensity"


class PriorityCompletion(str, Enum):
    YES = "yes"
    PARTIAL = "partial"
    NO = "no"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class HabitCategory(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    ANYTIME = "anytime"


class EventCategory(str, Enum):
    MEETING = "meeting"
    FOCUS = "focus"
    PERSONAL = "personal"
    OTHER = "other"


class PatternType(str, Enum):
    CORRELATION = "correlation"
    TREND = "trend"
    ANOMALY = "anomaly"
    INSIGHT = "insight"


class ReminderKind(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    NONE = "none"


# ============================================================================
# Whoop snapshot (supplied by the biometric provider, every part nullable)
# ============================================================================

class WhoopRecovery(BaseModel):
    score: Optional[float] = Field(default=None, ge=0, le=100)
    hrv_rmssd: Optional[float] = None  # milliseconds
    resting_heart_rate: Optional[float] = None
    sleep_performance: Optional[float] = None


class WhoopSleepStages(BaseModel):
    rem: Optional[float] = None  # minutes
    deep: Optional[float] = None
    light: Optional[float] = None
    awake: Optional[float] = None


class WhoopSleep(BaseModel):
    quality_duration: Optional[int] = None  # minutes
    total_in_bed_duration: Optional[int] = None
    efficiency: Optional[float] = Field(default=None, ge=0, le=100)
    consistency_score: Optional[float] = None
    stages: Optional[WhoopSleepStages] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class WhoopWorkout(BaseModel):
    id: Optional[int] = None
    sport: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    strain: Optional[float] = None
    average_heart_rate: Optional[float] = None
    calories: Optional[float] = None


class WhoopStrain(BaseModel):
    score: Optional[float] = Field(default=None, ge=0, le=21)
    average_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    calories: Optional[float] = None
    workouts: List[WhoopWorkout] = Field(default_factory=list)


class WhoopSnapshot(BaseModel):
    """Biometric data for one day; providers may return any subset."""
    date: date
    recovery: Optional[WhoopRecovery] = None
    sleep: Optional[WhoopSleep] = None
    strain: Optional[WhoopStrain] = None


# ============================================================================
# Calendar snapshot
# ============================================================================

class CalendarEvent(BaseModel):
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    category: EventCategory
    location: Optional[str] = None
    description: Optional[str] = None


class CalendarSummary(BaseModel):
    total_events: int = 0
    meeting_minutes: int = 0
    focus_blocks: int = 0
    longest_free_block: int = 0  # minutes


class CalendarSnapshot(BaseModel):
    date: date
    events: List[CalendarEvent] = Field(default_factory=list)
    summary: CalendarSummary = Field(default_factory=CalendarSummary)


# ============================================================================
# Journal entries
# ============================================================================

class MorningEntry(BaseModel):
    """Everything the morning routine owns on a DailyEntry."""
    date: date

    # Provider data
    whoop_snapshot: Optional[WhoopSnapshot] = None
    calendar_snapshot: Optional[CalendarSnapshot] = None

    # Subjective ratings
    energy_rating: Optional[int] = Field(default=None, ge=1, le=10)
    mood: Optional[Mood] = None
    sleep_reflection: str = ""

    # Reflections
    yesterday_win: str = ""
    yesterday_challenge: str = ""

    # Intentions
    one_thing: str = ""
    movement_intention: Optional[MovementIntention] = None
    success_metric: str = ""

    # AI-generated content
    patterns: Optional[str] = None
    dynamic_questions: Optional[List[str]] = None


class EveningEntry(BaseModel):
    priority_completed: PriorityCompletion
    evening_reflection: str = ""
    gratitude: List[str] = Field(default_factory=list)
    tomorrow_remember: str = ""


class EveningRecord(EveningEntry):
    created_at: datetime
    updated_at: datetime


class DailyEntry(MorningEntry):
    created_at: datetime
    updated_at: datetime
    evening: Optional[EveningRecord] = None


# ============================================================================
# Habits
# ============================================================================

class HabitResponse(BaseModel):
    id: int
    name: str
    emoji: str
    category: HabitCategory
    active: bool

    model_config = ConfigDict(from_attributes=True)


class HabitLogResponse(BaseModel):
    date: date
    habit_id: int
    completed: bool
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class HabitStat(BaseModel):
    habit_id: int
    habit_name: str
    emoji: str
    completion_rate: float  # percent of the window's days
    streak: int


# ============================================================================
# Derived statistics
# ============================================================================

class HistoricalStats(BaseModel):
    avg_recovery: float = 0.0
    avg_hrv: float = 0.0
    avg_sleep_minutes: float = 0.0
    avg_energy: float = 0.0
    days_tracked: int = 0
    recovery_trend: Trend = Trend.STABLE
    hrv_trend: Trend = Trend.STABLE
    sleep_trend: Trend = Trend.STABLE
    average_window_days: int = 7
    trend_window_days: int = 7


class PeriodAverages(BaseModel):
    period: str  # "2026-W41" or "2026-10"
    days_tracked: int
    avg_recovery: Optional[float] = None
    avg_hrv: Optional[float] = None
    avg_sleep_minutes: Optional[float] = None
    avg_energy: Optional[float] = None
    avg_strain: Optional[float] = None


class PatternResponse(BaseModel):
    id: int
    detected_at: datetime
    type: PatternType
    description: str
    data_points: List[date]
    confidence: float
    dismissed: bool

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Weekly review and reminders
# ============================================================================

class DayBreakdown(BaseModel):
    date: date
    recovery: Optional[float] = None
    sleep_minutes: Optional[int] = None
    energy: Optional[int] = None
    priority_completed: Optional[PriorityCompletion] = None


class WeeklySummary(BaseModel):
    week: str  # "2026-W41"
    start_date: date
    end_date: date
    days_tracked: int
    days_in_week: int = 7
    current: HistoricalStats
    previous: HistoricalStats
    changes: Dict[str, Optional[float]]
    wins: List[str] = Field(default_factory=list)
    challenges: List[str] = Field(default_factory=list)
    priorities_done: int = 0
    priorities_partial: int = 0
    priority_completion_rate: Optional[float] = None  # percent; None without evenings
    daily: List[DayBreakdown] = Field(default_factory=list)


class Reminder(BaseModel):
    kind: ReminderKind
    message: str = ""
    subtitle: str = ""
