"""Habit table and schedule (de)serialisation."""

from __future__ import annotations

from datetime import date
from typing import Any, ClassVar, Optional

from sqlmodel import Field, SQLModel

from .schedule import (
    AnnualSchedule,
    EveryDaySchedule,
    MonthlySchedule,
    PeriodicSchedule,
    Schedule,
    WeeklySchedule,
)

YES_NO_HABIT = "yes_no"

SCHEDULE_EVERY_DAY = "every_day"
SCHEDULE_WEEKLY = "weekly"
SCHEDULE_MONTHLY = "monthly"
SCHEDULE_ANNUAL = "annual"
SCHEDULE_PERIODIC = "periodic"

SCHEDULE_TYPES = (
    SCHEDULE_EVERY_DAY,
    SCHEDULE_WEEKLY,
    SCHEDULE_MONTHLY,
    SCHEDULE_ANNUAL,
    SCHEDULE_PERIODIC,
)


def _join_ints(values) -> str:
    return ",".join(str(v) for v in sorted(values))


def _split_ints(raw: str) -> list[int]:
    return [int(part) for part in raw.split(",") if part.strip()]


class Habit(SQLModel, table=True):
    """A habit with its schedule flattened into columns."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    kind: str = Field(default=YES_NO_HABIT, max_length=16)

    schedule_type: str = Field(default=SCHEDULE_EVERY_DAY, max_length=16)
    start_date: date = Field(nullable=False)
    end_date: Optional[date] = Field(default=None)
    backlog_enabled: bool = Field(default=True, nullable=False)
    completing_ahead_enabled: bool = Field(default=True, nullable=False)
    period_separation_enabled: bool = Field(default=True, nullable=False)
    # weekdays, days of month or period offsets depending on schedule_type
    due_days: str = Field(default="", max_length=255)
    # "MM-DD" pairs for annual schedules
    annual_due_dates: str = Field(default="", max_length=255)
    include_last_day_of_month: bool = Field(default=False, nullable=False)
    period_length_days: Optional[int] = Field(default=None)

    @property
    def schedule(self) -> Schedule:
        """Rebuild the schedule value from the stored columns."""

        common: dict[str, Any] = {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "backlog_enabled": self.backlog_enabled,
            "completing_ahead_enabled": self.completing_ahead_enabled,
        }
        if self.schedule_type == SCHEDULE_EVERY_DAY:
            return EveryDaySchedule(**common)
        if self.schedule_type == SCHEDULE_WEEKLY:
            return WeeklySchedule(due_days_of_week=frozenset(_split_ints(self.due_days)), **common)
        if self.schedule_type == SCHEDULE_MONTHLY:
            return MonthlySchedule(
                due_days_of_month=frozenset(_split_ints(self.due_days)),
                include_last_day_of_month=self.include_last_day_of_month,
                **common,
            )
        if self.schedule_type == SCHEDULE_ANNUAL:
            pairs = []
            for part in self.annual_due_dates.split(","):
                if part.strip():
                    month, day = part.strip().split("-")
                    pairs.append((int(month), int(day)))
            return AnnualSchedule(due_dates=frozenset(pairs), **common)
        if self.schedule_type == SCHEDULE_PERIODIC:
            return PeriodicSchedule(
                period_length_days=self.period_length_days or 1,
                due_day_offsets=frozenset(_split_ints(self.due_days) or [0]),
                period_separation_enabled=self.period_separation_enabled,
                **common,
            )
        raise ValueError(f"Unknown schedule type: {self.schedule_type!r}")

    @classmethod
    def from_schedule(cls, *, name: str, schedule: Schedule, **extra: Any) -> "Habit":
        """Build a habit row whose columns encode *schedule*."""

        columns: dict[str, Any] = {
            "start_date": schedule.start_date,
            "end_date": schedule.end_date,
            "backlog_enabled": schedule.backlog_enabled,
            "completing_ahead_enabled": schedule.completing_ahead_enabled,
        }
        if isinstance(schedule, EveryDaySchedule):
            columns["schedule_type"] = SCHEDULE_EVERY_DAY
        elif isinstance(schedule, WeeklySchedule):
            columns["schedule_type"] = SCHEDULE_WEEKLY
            columns["due_days"] = _join_ints(schedule.due_days_of_week)
        elif isinstance(schedule, MonthlySchedule):
            columns["schedule_type"] = SCHEDULE_MONTHLY
            columns["due_days"] = _join_ints(schedule.due_days_of_month)
            columns["include_last_day_of_month"] = schedule.include_last_day_of_month
        elif isinstance(schedule, AnnualSchedule):
            columns["schedule_type"] = SCHEDULE_ANNUAL
            columns["annual_due_dates"] = ",".join(
                f"{month:02d}-{day:02d}" for month, day in sorted(schedule.due_dates)
            )
        elif isinstance(schedule, PeriodicSchedule):
            columns["schedule_type"] = SCHEDULE_PERIODIC
            columns["due_days"] = _join_ints(schedule.due_day_offsets)
            columns["period_length_days"] = schedule.period_length_days
            columns["period_separation_enabled"] = schedule.period_separation_enabled
        else:
            raise TypeError(f"Unsupported schedule type: {type(schedule).__name__}")
        columns.update(extra)
        return cls(name=name, **columns)
