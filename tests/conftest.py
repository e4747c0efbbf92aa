"""
Pytest configuration and fixtures

Every test gets its own in-memory SQLite database, so nothing persists
between tests and the user's journal is never touched.
"""
import pytest
from datetime import date, datetime, timedelta, timezone

from wellness_journal.core.database import Database
from wellness_journal.schemas import (
    MorningEntry,
    Mood,
    MovementIntention,
    WhoopRecovery,
    WhoopSleep,
    WhoopSnapshot,
    WhoopStrain,
)
from wellness_journal.services.entry_store import EntryStore
from wellness_journal.services.habit_store import HabitStore


TODAY = date(2026, 10, 18)


@pytest.fixture
def today():
    """Fixed 'today' so window arithmetic is reproducible."""
    return TODAY


@pytest.fixture
def database():
    db = Database("sqlite://", echo=False)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def entry_store(db_session):
    return EntryStore(db_session)


@pytest.fixture
def habit_store(db_session):
    return HabitStore(db_session)


def build_morning(
    day,
    recovery=None,
    hrv=None,
    sleep_minutes=None,
    strain=None,
    energy=None,
    **fields
):
    """MorningEntry with an optional Whoop snapshot built from scalar metrics."""
    snapshot = None
    if any(v is not None for v in (recovery, hrv, sleep_minutes, strain)):
        snapshot = WhoopSnapshot(
            date=day,
            recovery=WhoopRecovery(score=recovery, hrv_rmssd=hrv, resting_heart_rate=52)
            if recovery is not None or hrv is not None else None,
            sleep=WhoopSleep(quality_duration=sleep_minutes, efficiency=91.5)
            if sleep_minutes is not None else None,
            strain=WhoopStrain(score=strain) if strain is not None else None,
        )

    defaults = {
        "mood": Mood.CALM_FOCUSED,
        "one_thing": "Ship the weekly report",
        "movement_intention": MovementIntention.LIGHT_WORKOUT,
        "success_metric": "Report sent before 4pm",
    }
    defaults.update(fields)
    return MorningEntry(date=day, whoop_snapshot=snapshot, energy_rating=energy, **defaults)


@pytest.fixture
def make_morning():
    return build_morning


@pytest.fixture
def add_entry(entry_store, today):
    """Store a morning entry ``days_ago`` days before today."""
    def _add(days_ago, **metrics):
        day = today - timedelta(days=days_ago)
        return entry_store.upsert_morning(build_morning(day, **metrics))
    return _add


@pytest.fixture
def work_day():
    """Helper building naive local datetimes on TODAY."""
    def _at(hour, minute=0):
        return datetime(TODAY.year, TODAY.month, TODAY.day, hour, minute)
    return _at


@pytest.fixture
def utc_work_day():
    def _at(hour, minute=0):
        return datetime(TODAY.year, TODAY.month, TODAY.day, hour, minute, tzinfo=timezone.utc)
    return _at
