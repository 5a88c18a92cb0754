"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from sqlmodel import select

from ...errors import HabitNotFoundError
from ...models.completion import CompletionRecord
from ...models.habit import Habit
from ...models.vacation import Vacation
from ..database import SessionFactory


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int) -> Habit:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj is None:
                raise HabitNotFoundError(habit_id)
            session.expunge(obj)
            return obj

    def list_all(self) -> list[Habit]:
        """List all habits ordered by name."""
        with self.session_factory() as session:
            rows = list(session.exec(select(Habit).order_by(Habit.name)).all())  # type: ignore
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        # Rebuilding the schedule validates the flattened columns.
        habit.schedule  # noqa: B018
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int) -> None:
        """Delete a habit together with its completions and vacations."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)
            for record in session.exec(
                select(CompletionRecord).where(CompletionRecord.habit_id == habit_id)
            ).all():
                session.delete(record)
            for vacation in session.exec(select(Vacation).where(Vacation.habit_id == habit_id)).all():
                session.delete(vacation)
            session.delete(habit)
            session.commit()
