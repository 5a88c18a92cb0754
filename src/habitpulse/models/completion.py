"""Completion history records."""

from __future__ import annotations

from datetime import date
from typing import ClassVar

from sqlmodel import Field, SQLModel


class CompletionRecord(SQLModel, table=True):
    """How many times a habit was completed on one calendar day.

    There is at most one record per (habit, day). A record with zero
    completions is never stored; the row is deleted instead.
    """

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    num_of_times_completed: float = Field(default=1.0, nullable=False, ge=0)
