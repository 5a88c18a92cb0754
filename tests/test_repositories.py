"""Unit tests for repository implementations."""

from __future__ import annotations

from datetime import date

import pytest

from habitpulse.errors import HabitNotFoundError
from habitpulse.infra.repositories import (
    SQLModelCompletionHistoryRepository,
    SQLModelHabitRepository,
    SQLModelVacationRepository,
)
from habitpulse.models import CompletionRecord, Habit, Vacation
from habitpulse.models.schedule import EveryDaySchedule, WeeklySchedule


def d(day: int) -> date:
    return date(2024, 1, day)


def record(habit_id: int, day: date, times: float = 1.0) -> CompletionRecord:
    return CompletionRecord(habit_id=habit_id, occurred_on=day, num_of_times_completed=times)


class TestHabitRepository:
    """Tests for SQLModelHabitRepository."""

    def test_create_and_get(self, session_factory):
        repo = SQLModelHabitRepository(session_factory)
        habit = repo.create(Habit.from_schedule(name="Read", schedule=EveryDaySchedule(start_date=d(1))))

        assert habit.id is not None
        retrieved = repo.get_by_id(habit.id)
        assert retrieved.name == "Read"
        assert retrieved.schedule == EveryDaySchedule(start_date=d(1))

    def test_get_missing_raises(self, session_factory):
        repo = SQLModelHabitRepository(session_factory)
        with pytest.raises(HabitNotFoundError) as excinfo:
            repo.get_by_id(999)
        assert excinfo.value.habit_id == 999

    def test_list_all_ordered_by_name(self, session_factory, habit_factory):
        habit_factory(name="Walk")
        habit_factory(name="Drink water")

        names = [h.name for h in SQLModelHabitRepository(session_factory).list_all()]

        assert names == ["Drink water", "Walk"]

    def test_create_rejects_invalid_schedule_columns(self, session_factory):
        repo = SQLModelHabitRepository(session_factory)
        habit = Habit(name="Broken", schedule_type="weekly", due_days="", start_date=d(1))

        with pytest.raises(ValueError):
            repo.create(habit)
        assert repo.list_all() == []

    def test_delete_removes_history(self, session_factory, habit_factory):
        habit = habit_factory()
        completions = SQLModelCompletionHistoryRepository(session_factory)
        vacations = SQLModelVacationRepository(session_factory)
        completions.insert_completion(habit.id, record(habit.id, d(2)))
        vacations.create(Vacation(habit_id=habit.id, start_date=d(5)))

        repo = SQLModelHabitRepository(session_factory)
        repo.delete(habit.id)

        with pytest.raises(HabitNotFoundError):
            repo.get_by_id(habit.id)
        assert completions.get_records_in_period(habit.id) == []
        assert vacations.get_vacations_in_period(habit.id) == []

    def test_delete_missing_raises(self, session_factory):
        with pytest.raises(HabitNotFoundError):
            SQLModelHabitRepository(session_factory).delete(5)


class TestCompletionHistoryRepository:
    """Tests for SQLModelCompletionHistoryRepository."""

    @pytest.fixture
    def seeded(self, session_factory, habit_factory):
        habit = habit_factory(WeeklySchedule(start_date=d(1), due_days_of_week=frozenset({0, 2})))
        other = habit_factory(name="Other")
        repo = SQLModelCompletionHistoryRepository(session_factory)
        for day, times in ((d(1), 1), (d(3), 2.5), (d(8), 1)):
            repo.insert_completion(habit.id, record(habit.id, day, times))
        repo.insert_completion(other.id, record(other.id, d(2), 4))
        return repo, habit.id

    def test_records_in_period(self, seeded):
        repo, habit_id = seeded

        assert [r.occurred_on for r in repo.get_records_in_period(habit_id)] == [d(1), d(3), d(8)]
        assert [r.occurred_on for r in repo.get_records_in_period(habit_id, d(2), d(8))] == [d(3), d(8)]
        assert [r.occurred_on for r in repo.get_records_in_period(habit_id, max_date=d(2))] == [d(1)]

    def test_record_by_date(self, seeded):
        repo, habit_id = seeded

        assert repo.get_record_by_date(habit_id, d(3)).num_of_times_completed == 2.5
        assert repo.get_record_by_date(habit_id, d(2)) is None

    def test_first_and_last_completed(self, seeded):
        repo, habit_id = seeded

        assert repo.get_first_completed_record(habit_id).occurred_on == d(1)
        assert repo.get_first_completed_record(habit_id, min_date=d(2)).occurred_on == d(3)
        assert repo.get_last_completed_record(habit_id).occurred_on == d(8)
        assert repo.get_last_completed_record(habit_id, max_date=d(7)).occurred_on == d(3)
        assert repo.get_last_completed_record(habit_id, min_date=d(9)) is None

    def test_sum_in_period(self, seeded):
        repo, habit_id = seeded

        assert repo.get_num_of_times_completed_in_period(habit_id) == 4.5
        assert repo.get_num_of_times_completed_in_period(habit_id, d(2), d(5)) == 2.5
        assert repo.get_num_of_times_completed_in_period(habit_id, d(20), d(25)) == 0.0

    def test_insert_replaces_existing(self, seeded):
        repo, habit_id = seeded

        stored = repo.insert_completion(habit_id, record(habit_id, d(3), 1))

        assert stored.num_of_times_completed == 1
        assert len(repo.get_records_in_period(habit_id)) == 3

    def test_delete_by_date(self, seeded):
        repo, habit_id = seeded

        repo.delete_completion_by_date(habit_id, d(3))
        repo.delete_completion_by_date(habit_id, d(4))  # nothing stored there

        assert [r.occurred_on for r in repo.get_records_in_period(habit_id)] == [d(1), d(8)]


class TestVacationRepository:
    """Tests for SQLModelVacationRepository."""

    def test_vacations_in_period(self, session_factory, habit_factory):
        habit = habit_factory()
        repo = SQLModelVacationRepository(session_factory)
        repo.create(Vacation(habit_id=habit.id, start_date=d(10), end_date=d(12)))
        repo.create(Vacation(habit_id=habit.id, start_date=d(3), end_date=d(4)))
        repo.create(Vacation(habit_id=habit.id, start_date=d(20)))

        def starts(min_date=None, max_date=None):
            return [v.start_date for v in repo.get_vacations_in_period(habit.id, min_date, max_date)]

        assert starts() == [d(3), d(10), d(20)]
        assert starts(d(5), d(11)) == [d(10)]
        assert starts(d(25), None) == [d(20)]
        assert starts(None, d(2)) == []

    def test_vacation_by_date(self, session_factory, habit_factory):
        habit = habit_factory()
        repo = SQLModelVacationRepository(session_factory)
        repo.create(Vacation(habit_id=habit.id, start_date=d(3), end_date=d(4)))

        assert repo.get_vacation_by_date(habit.id, d(4)).start_date == d(3)
        assert repo.get_vacation_by_date(habit.id, d(5)) is None

    def test_create_rejects_reversed_interval(self, session_factory, habit_factory):
        habit = habit_factory()
        repo = SQLModelVacationRepository(session_factory)

        with pytest.raises(ValueError):
            repo.create(Vacation(habit_id=habit.id, start_date=d(5), end_date=d(4)))
