"""Pytest configuration and shared fixtures for HabitPulse tests.

This module provides database fixtures, in-memory fakes of the three stores
the services depend on, and small helpers for building habits and histories
without touching a real app database.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterable, Mapping, Optional

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from habitpulse.errors import HabitNotFoundError
from habitpulse.models import CompletionRecord, Habit, Vacation
from habitpulse.models.schedule import EveryDaySchedule, Schedule
from habitpulse.models.status import HabitStatus
from habitpulse.services.habit_status import HabitStatusComputer

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one repositories receive in the app."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def habit_factory(session_factory):
    """Factory for persisted habits; defaults to an every-day schedule."""

    def _create_habit(
        schedule: Schedule | None = None,
        name: str = "Exercise",
    ) -> Habit:
        schedule = schedule or EveryDaySchedule(start_date=date(2024, 1, 1))
        habit = Habit.from_schedule(name=name, schedule=schedule)
        with session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
        return habit

    return _create_habit


@pytest.fixture(autouse=True)
def reset_habitpulse_logger():
    """Drop handlers installed by setup_logging so tests don't share streams."""

    yield
    logger = logging.getLogger("habitpulse")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# In-memory stores
# =============================================================================


class FakeHabitRepository:
    def __init__(self):
        self.habits: dict[int, Habit] = {}

    def get_by_id(self, habit_id: int) -> Habit:
        try:
            return self.habits[habit_id]
        except KeyError:
            raise HabitNotFoundError(habit_id) from None

    def list_all(self) -> list[Habit]:
        return sorted(self.habits.values(), key=lambda h: h.name)

    def create(self, habit: Habit) -> Habit:
        habit.id = len(self.habits) + 1
        self.habits[habit.id] = habit
        return habit

    def delete(self, habit_id: int) -> None:
        self.habits.pop(habit_id)


class FakeCompletionHistoryRepository:
    def __init__(self):
        self.records: dict[tuple[int, date], CompletionRecord] = {}
        self.writes = 0

    def _in_period(self, habit_id, min_date, max_date) -> list[CompletionRecord]:
        return sorted(
            (
                r
                for (hid, day), r in self.records.items()
                if hid == habit_id
                and (min_date is None or day >= min_date)
                and (max_date is None or day <= max_date)
            ),
            key=lambda r: r.occurred_on,
        )

    def get_record_by_date(self, habit_id, occurred_on):
        return self.records.get((habit_id, occurred_on))

    def get_records_in_period(self, habit_id, min_date=None, max_date=None):
        return self._in_period(habit_id, min_date, max_date)

    def get_first_completed_record(self, habit_id, min_date=None, max_date=None):
        rows = [r for r in self._in_period(habit_id, min_date, max_date) if r.num_of_times_completed > 0]
        return rows[0] if rows else None

    def get_last_completed_record(self, habit_id, min_date=None, max_date=None):
        rows = [r for r in self._in_period(habit_id, min_date, max_date) if r.num_of_times_completed > 0]
        return rows[-1] if rows else None

    def get_num_of_times_completed_in_period(self, habit_id, min_date=None, max_date=None):
        return sum(r.num_of_times_completed for r in self._in_period(habit_id, min_date, max_date))

    def insert_completion(self, habit_id, record):
        self.writes += 1
        stored = CompletionRecord(
            habit_id=habit_id,
            occurred_on=record.occurred_on,
            num_of_times_completed=record.num_of_times_completed,
        )
        self.records[(habit_id, record.occurred_on)] = stored
        return stored

    def delete_completion_by_date(self, habit_id, occurred_on):
        self.writes += 1
        self.records.pop((habit_id, occurred_on), None)


class FakeVacationRepository:
    def __init__(self):
        self.vacations: list[Vacation] = []

    def get_vacation_by_date(self, habit_id, value):
        for vacation in self.vacations:
            if vacation.habit_id == habit_id and vacation.contains_date(value):
                return vacation
        return None

    def get_vacations_in_period(self, habit_id, min_date=None, max_date=None):
        matches = []
        for vacation in self.vacations:
            if vacation.habit_id != habit_id:
                continue
            if max_date is not None and vacation.start_date > max_date:
                continue
            if min_date is not None and vacation.end_date is not None and vacation.end_date < min_date:
                continue
            matches.append(vacation)
        return sorted(matches, key=lambda v: v.start_date)

    def create(self, vacation):
        vacation.id = len(self.vacations) + 1
        self.vacations.append(vacation)
        return vacation


class FakeStores:
    """The three stores plus helpers to seed them."""

    def __init__(self):
        self.habits = FakeHabitRepository()
        self.completions = FakeCompletionHistoryRepository()
        self.vacations = FakeVacationRepository()

    def add_habit(self, schedule: Schedule, name: str = "Exercise") -> Habit:
        return self.habits.create(Habit.from_schedule(name=name, schedule=schedule))

    def complete(self, habit_id: int, day: date, times: float = 1.0) -> None:
        self.completions.insert_completion(
            habit_id,
            CompletionRecord(habit_id=habit_id, occurred_on=day, num_of_times_completed=times),
        )

    def add_vacation(self, habit_id: int, start: date, end: Optional[date] = None) -> None:
        self.vacations.create(Vacation(habit_id=habit_id, start_date=start, end_date=end))


@pytest.fixture
def stores() -> FakeStores:
    return FakeStores()


# =============================================================================
# Status helpers
# =============================================================================


def make_history(
    completions: Mapping[date, float] | None = None,
    vacations: Iterable[tuple[date, Optional[date]]] = (),
    habit_id: int = 1,
) -> tuple[list[CompletionRecord], list[Vacation]]:
    records = [
        CompletionRecord(habit_id=habit_id, occurred_on=day, num_of_times_completed=times)
        for day, times in sorted((completions or {}).items())
    ]
    vacation_rows = [
        Vacation(habit_id=habit_id, start_date=start, end_date=end) for start, end in vacations
    ]
    return records, vacation_rows


@pytest.fixture
def compute_status():
    """Classify one date of an unsaved habit from literal history."""

    computer = HabitStatusComputer()

    def _compute(
        schedule: Schedule,
        validation_date: date,
        today: date,
        completions: Mapping[date, float] | None = None,
        vacations: Iterable[tuple[date, Optional[date]]] = (),
    ) -> HabitStatus:
        habit = Habit.from_schedule(name="Habit", schedule=schedule, id=1)
        records, vacation_rows = make_history(completions, vacations)
        return computer.compute_status(
            habit=habit,
            validation_date=validation_date,
            today=today,
            completion_history=records,
            vacation_history=vacation_rows,
        )

    return _compute
