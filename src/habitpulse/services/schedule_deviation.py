"""Schedule deviation: how far ahead of or behind schedule a habit is."""

from __future__ import annotations

from datetime import date

from ..models.dates import DateRange, plus_days
from ..models.schedule import Schedule, period_range, separates_periods
from .history import HabitHistory


def deviation_cutoff(*, today: date, current_date: date, completed_today: bool) -> date:
    """Return the last date whose history counts towards *current_date*.

    Past dates and today look at everything before them. Future dates look
    at history up to yesterday, or up to today once today has a record.
    """

    if current_date <= today:
        return plus_days(current_date, -1)
    return today if completed_today else plus_days(today, -1)


def compute_schedule_deviation(
    *,
    schedule: Schedule,
    history: HabitHistory,
    today: date,
    current_date: date,
    completed_today: bool,
) -> float:
    """Return completions minus due occurrences up to the cutoff.

    Positive means the habit is ahead of schedule, negative means there is a
    backlog and zero means it is on schedule. With period separation only the
    period holding the cutoff counts, and a *current_date* outside that period
    has a deviation of exactly zero.
    """

    actual_date = deviation_cutoff(
        today=today, current_date=current_date, completed_today=completed_today
    )

    if separates_periods(schedule):
        last_period = period_range(schedule, actual_date)
        if last_period is None or current_date not in last_period:
            return 0.0
        window = DateRange(last_period.start, actual_date)
    else:
        window = DateRange(schedule.start_date, actual_date)

    if window.is_empty:
        return 0.0

    completed = history.num_of_times_completed_in(window)
    due = history.num_of_due_times_in(schedule, window)
    return completed - due


__all__ = ["compute_schedule_deviation", "deviation_cutoff"]
