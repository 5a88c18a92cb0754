"""SQLModel implementation of the completion history repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.completion import CompletionRecord
from ..database import SessionFactory


def _bounded(statement, habit_id: int, min_date: Optional[date], max_date: Optional[date]):
    statement = statement.where(CompletionRecord.habit_id == habit_id)
    if min_date is not None:
        statement = statement.where(CompletionRecord.occurred_on >= min_date)
    if max_date is not None:
        statement = statement.where(CompletionRecord.occurred_on <= max_date)
    return statement


class SQLModelCompletionHistoryRepository:
    """SQLModel-based completion history repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_record_by_date(self, habit_id: int, occurred_on: date) -> Optional[CompletionRecord]:
        """Get the record for one date."""
        with self.session_factory() as session:
            obj = session.get(CompletionRecord, (habit_id, occurred_on))
            if obj:
                session.expunge(obj)
            return obj

    def get_records_in_period(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> list[CompletionRecord]:
        """Get records for a habit within optional date bounds."""
        with self.session_factory() as session:
            statement = _bounded(select(CompletionRecord), habit_id, min_date, max_date)
            statement = statement.order_by(CompletionRecord.occurred_on)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_first_completed_record(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> Optional[CompletionRecord]:
        """Earliest record with a positive completion count."""
        with self.session_factory() as session:
            statement = (
                _bounded(select(CompletionRecord), habit_id, min_date, max_date)
                .where(CompletionRecord.num_of_times_completed > 0)
                .order_by(CompletionRecord.occurred_on)  # type: ignore
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_last_completed_record(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> Optional[CompletionRecord]:
        """Latest record with a positive completion count."""
        with self.session_factory() as session:
            statement = (
                _bounded(select(CompletionRecord), habit_id, min_date, max_date)
                .where(CompletionRecord.num_of_times_completed > 0)
                .order_by(CompletionRecord.occurred_on.desc())  # type: ignore
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_num_of_times_completed_in_period(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> float:
        """Sum of completions within the bounds."""
        with self.session_factory() as session:
            statement = _bounded(
                select(func.coalesce(func.sum(CompletionRecord.num_of_times_completed), 0.0)),
                habit_id,
                min_date,
                max_date,
            )
            return float(session.exec(statement).one())

    def insert_completion(self, habit_id: int, record: CompletionRecord) -> CompletionRecord:
        """Insert or update the record for ``record.occurred_on``."""
        with self.session_factory() as session:
            existing = session.get(CompletionRecord, (habit_id, record.occurred_on))
            if existing:
                existing.num_of_times_completed = record.num_of_times_completed
                target = existing
            else:
                target = CompletionRecord(
                    habit_id=habit_id,
                    occurred_on=record.occurred_on,
                    num_of_times_completed=record.num_of_times_completed,
                )
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target

    def delete_completion_by_date(self, habit_id: int, occurred_on: date) -> None:
        """Delete the record for one date."""
        with self.session_factory() as session:
            existing = session.get(CompletionRecord, (habit_id, occurred_on))
            if existing:
                session.delete(existing)
                session.commit()
