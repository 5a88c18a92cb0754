"""SQLModel tables and domain value types."""

from .completion import CompletionRecord
from .dates import DateRange
from .habit import Habit
from .schedule import (
    AnnualSchedule,
    EveryDaySchedule,
    MonthlySchedule,
    PeriodicSchedule,
    Schedule,
    WeeklySchedule,
)
from .status import HabitCompletionData, HabitStatus
from .vacation import Vacation

__all__ = [
    "AnnualSchedule",
    "CompletionRecord",
    "DateRange",
    "EveryDaySchedule",
    "Habit",
    "HabitCompletionData",
    "HabitStatus",
    "MonthlySchedule",
    "PeriodicSchedule",
    "Schedule",
    "Vacation",
    "WeeklySchedule",
]
