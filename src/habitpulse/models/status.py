"""Habit statuses and the per-date result returned to callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HabitStatus(str, Enum):
    """Semantic status of a habit on one calendar date."""

    NOT_STARTED = "not_started"
    FINISHED = "finished"
    COMPLETED = "completed"
    OVER_COMPLETED = "over_completed"
    SORTED_OUT_BACKLOG = "sorted_out_backlog"
    PARTIALLY_COMPLETED = "partially_completed"
    PLANNED = "planned"
    FAILED = "failed"
    COMPLETED_LATER = "completed_later"
    PAST_DATE_ALREADY_COMPLETED = "past_date_already_completed"
    FUTURE_DATE_ALREADY_COMPLETED = "future_date_already_completed"
    BACKLOG = "backlog"
    SKIPPED = "skipped"
    NOT_DUE = "not_due"
    ON_VACATION = "on_vacation"


COMPLETED_STATUSES = frozenset(
    {
        HabitStatus.COMPLETED,
        HabitStatus.OVER_COMPLETED,
        HabitStatus.SORTED_OUT_BACKLOG,
        HabitStatus.COMPLETED_LATER,
        HabitStatus.PAST_DATE_ALREADY_COMPLETED,
        HabitStatus.FUTURE_DATE_ALREADY_COMPLETED,
    }
)

FAILED_STATUSES = frozenset({HabitStatus.FAILED, HabitStatus.PARTIALLY_COMPLETED})


@dataclass(frozen=True, slots=True)
class HabitCompletionData:
    """Status and completion count for a single date."""

    habit_status: HabitStatus
    num_of_times_completed: float = 0.0


__all__ = [
    "COMPLETED_STATUSES",
    "FAILED_STATUSES",
    "HabitCompletionData",
    "HabitStatus",
]
