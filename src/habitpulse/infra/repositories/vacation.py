"""SQLModel implementation of the vacation repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlmodel import select

from ...models.vacation import Vacation
from ..database import SessionFactory


class SQLModelVacationRepository:
    """SQLModel-based vacation repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_vacation_by_date(self, habit_id: int, value: date) -> Optional[Vacation]:
        """Vacation containing *value*, if any."""
        rows = self.get_vacations_in_period(habit_id, min_date=value, max_date=value)
        return rows[0] if rows else None

    def get_vacations_in_period(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> list[Vacation]:
        """Vacations intersecting the bounds, ordered by start date."""
        with self.session_factory() as session:
            statement = select(Vacation).where(Vacation.habit_id == habit_id)
            if max_date is not None:
                statement = statement.where(Vacation.start_date <= max_date)
            if min_date is not None:
                statement = statement.where(
                    or_(Vacation.end_date == None, Vacation.end_date >= min_date)  # noqa: E711
                )
            statement = statement.order_by(Vacation.start_date)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, vacation: Vacation) -> Vacation:
        """Persist a new vacation."""
        if vacation.end_date is not None and vacation.end_date < vacation.start_date:
            raise ValueError("Vacation end date precedes its start date")
        with self.session_factory() as session:
            session.add(vacation)
            session.commit()
            session.refresh(vacation)
            session.expunge(vacation)
            return vacation
