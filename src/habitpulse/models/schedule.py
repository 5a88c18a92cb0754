"""Habit schedules.

Each schedule variant is an independent frozen dataclass; together they form
the :data:`Schedule` union. Behaviour lives in module-level functions that
dispatch over every variant explicitly, so adding a variant means touching
:func:`is_due` and :func:`period_range` (and nothing silently inherits a
default).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from .dates import DateRange, plus_days


def _check_bounds(start_date: date, end_date: Optional[date]) -> None:
    if end_date is not None and end_date < start_date:
        raise ValueError(f"Schedule end date {end_date} precedes start date {start_date}")


def _freeze(values, *, name: str, lower: int, upper: int) -> frozenset[int]:
    frozen = frozenset(int(v) for v in values)
    if not frozen:
        raise ValueError(f"{name} must not be empty")
    out_of_range = sorted(v for v in frozen if v < lower or v > upper)
    if out_of_range:
        raise ValueError(f"{name} out of range {lower}..{upper}: {out_of_range}")
    return frozen


@dataclass(frozen=True, slots=True, kw_only=True)
class EveryDaySchedule:
    """Due on every date between the start and end dates."""

    start_date: date
    end_date: Optional[date] = None
    backlog_enabled: bool = True
    completing_ahead_enabled: bool = True

    def __post_init__(self) -> None:
        _check_bounds(self.start_date, self.end_date)


@dataclass(frozen=True, slots=True, kw_only=True)
class WeeklySchedule:
    """Due on selected weekdays (0=Monday ... 6=Sunday)."""

    start_date: date
    due_days_of_week: frozenset[int]
    end_date: Optional[date] = None
    backlog_enabled: bool = True
    completing_ahead_enabled: bool = True

    def __post_init__(self) -> None:
        _check_bounds(self.start_date, self.end_date)
        object.__setattr__(
            self,
            "due_days_of_week",
            _freeze(self.due_days_of_week, name="due_days_of_week", lower=0, upper=6),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class MonthlySchedule:
    """Due on selected days of each month.

    Day numbers the month does not have (e.g. 31 in April) are not due that
    month; ``include_last_day_of_month`` covers that case explicitly.
    """

    start_date: date
    due_days_of_month: frozenset[int] = field(default_factory=frozenset)
    include_last_day_of_month: bool = False
    end_date: Optional[date] = None
    backlog_enabled: bool = True
    completing_ahead_enabled: bool = True

    def __post_init__(self) -> None:
        _check_bounds(self.start_date, self.end_date)
        days = frozenset(int(v) for v in self.due_days_of_month)
        if not days and not self.include_last_day_of_month:
            raise ValueError("Monthly schedule needs due days or include_last_day_of_month")
        if days:
            days = _freeze(days, name="due_days_of_month", lower=1, upper=31)
        object.__setattr__(self, "due_days_of_month", days)


@dataclass(frozen=True, slots=True, kw_only=True)
class AnnualSchedule:
    """Due on selected (month, day) pairs every year."""

    start_date: date
    due_dates: frozenset[tuple[int, int]]
    end_date: Optional[date] = None
    backlog_enabled: bool = True
    completing_ahead_enabled: bool = True

    def __post_init__(self) -> None:
        _check_bounds(self.start_date, self.end_date)
        pairs = frozenset((int(m), int(d)) for m, d in self.due_dates)
        if not pairs:
            raise ValueError("due_dates must not be empty")
        for month, day in pairs:
            # 2000 is a leap year, so Feb 29 is accepted here.
            if not 1 <= month <= 12 or not 1 <= day <= calendar.monthrange(2000, month)[1]:
                raise ValueError(f"Invalid annual due date: month={month} day={day}")
        object.__setattr__(self, "due_dates", pairs)


@dataclass(frozen=True, slots=True, kw_only=True)
class PeriodicSchedule:
    """Fixed-length periods anchored at ``start_date``.

    ``due_day_offsets`` are zero-based positions inside each period. With
    ``period_separation_enabled`` the schedule deviation resets at every
    period boundary.
    """

    start_date: date
    period_length_days: int
    due_day_offsets: frozenset[int] = frozenset({0})
    end_date: Optional[date] = None
    backlog_enabled: bool = True
    completing_ahead_enabled: bool = True
    period_separation_enabled: bool = True

    def __post_init__(self) -> None:
        _check_bounds(self.start_date, self.end_date)
        if self.period_length_days < 1:
            raise ValueError("period_length_days must be at least 1")
        object.__setattr__(
            self,
            "due_day_offsets",
            _freeze(
                self.due_day_offsets,
                name="due_day_offsets",
                lower=0,
                upper=self.period_length_days - 1,
            ),
        )


Schedule = Union[
    EveryDaySchedule,
    WeeklySchedule,
    MonthlySchedule,
    AnnualSchedule,
    PeriodicSchedule,
]


def within_bounds(schedule: Schedule, value: date) -> bool:
    """Return True when *value* lies within the schedule's validity window."""

    if value < schedule.start_date:
        return False
    return schedule.end_date is None or value <= schedule.end_date


def is_due(schedule: Schedule, validation_date: date) -> bool:
    """Return True when the habit is expected to be completed on *validation_date*."""

    if not within_bounds(schedule, validation_date):
        return False

    if isinstance(schedule, EveryDaySchedule):
        return True
    if isinstance(schedule, WeeklySchedule):
        return validation_date.weekday() in schedule.due_days_of_week
    if isinstance(schedule, MonthlySchedule):
        if validation_date.day in schedule.due_days_of_month:
            return True
        last_day = calendar.monthrange(validation_date.year, validation_date.month)[1]
        return schedule.include_last_day_of_month and validation_date.day == last_day
    if isinstance(schedule, AnnualSchedule):
        return (validation_date.month, validation_date.day) in schedule.due_dates
    if isinstance(schedule, PeriodicSchedule):
        offset = (validation_date - schedule.start_date).days % schedule.period_length_days
        return offset in schedule.due_day_offsets
    raise TypeError(f"Unsupported schedule type: {type(schedule).__name__}")


def period_range(schedule: Schedule, current_date: date) -> Optional[DateRange]:
    """Return the period containing *current_date*.

    Only periodic schedules have periods; every other variant returns ``None``,
    as does a date before the schedule starts.
    """

    if isinstance(schedule, PeriodicSchedule):
        if current_date < schedule.start_date:
            return None
        length = schedule.period_length_days
        index = (current_date - schedule.start_date).days // length
        start = plus_days(schedule.start_date, index * length)
        return DateRange(start, plus_days(start, length - 1))
    if isinstance(
        schedule, (EveryDaySchedule, WeeklySchedule, MonthlySchedule, AnnualSchedule)
    ):
        return None
    raise TypeError(f"Unsupported schedule type: {type(schedule).__name__}")


def separates_periods(schedule: Schedule) -> bool:
    """Return True when schedule deviation resets at each period boundary."""

    return isinstance(schedule, PeriodicSchedule) and schedule.period_separation_enabled


__all__ = [
    "AnnualSchedule",
    "EveryDaySchedule",
    "MonthlySchedule",
    "PeriodicSchedule",
    "Schedule",
    "WeeklySchedule",
    "is_due",
    "period_range",
    "separates_periods",
    "within_bounds",
]
