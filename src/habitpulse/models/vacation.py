"""Vacation intervals during which a habit is never due."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Vacation(SQLModel, table=True):
    """Inclusive vacation interval; an open end lasts indefinitely."""

    __tablename__: ClassVar[str] = "vacation"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    start_date: date = Field(nullable=False, index=True)
    end_date: Optional[date] = Field(default=None)

    def contains_date(self, value: date) -> bool:
        if value < self.start_date:
            return False
        return self.end_date is None or value <= self.end_date
