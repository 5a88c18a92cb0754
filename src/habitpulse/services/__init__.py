"""Service module exports."""

from . import (
    completion,
    completion_data,
    execution,
    habit_status,
    history,
    schedule_deviation,
    streaks,
)

__all__ = [
    "completion",
    "completion_data",
    "execution",
    "habit_status",
    "history",
    "schedule_deviation",
    "streaks",
]
