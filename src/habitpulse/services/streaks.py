"""Streaks derived from per-date habit statuses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

from ..models.dates import plus_days
from ..models.status import COMPLETED_STATUSES, FAILED_STATUSES, HabitCompletionData


@dataclass(frozen=True, slots=True)
class Streak:
    """Run of dates not interrupted by a failure.

    A finished streak ends the day before the failure that broke it.
    ``ongoing`` is set when no failure has happened since, in which case
    ``end_date`` is the last date looked at (normally today).
    """

    start_date: date
    end_date: date
    ongoing: bool = False

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


def compute_streaks(
    completion_data: Mapping[date, HabitCompletionData], *, today: date
) -> list[Streak]:
    """Return streaks in chronological order.

    Dates after *today* are ignored. A streak starts at a completed date,
    or at the first date given when nothing failed before that completion.
    Neutral statuses (skipped, vacation, not due, ...) neither start nor
    break a streak. A partially completed date only breaks a streak once it
    is in the past.
    """

    days = sorted(d for d in completion_data if d <= today)
    streaks: list[Streak] = []
    start: Optional[date] = None
    failed_before = False

    for day in days:
        status = completion_data[day].habit_status
        if status in FAILED_STATUSES and day < today:
            if start is not None:
                streaks.append(Streak(start, plus_days(day, -1)))
                start = None
            failed_before = True
        elif status in COMPLETED_STATUSES and start is None:
            start = day if failed_before else days[0]

    if start is not None:
        streaks.append(Streak(start, days[-1], ongoing=True))
    return streaks


def current_streak(streaks: Iterable[Streak]) -> Optional[Streak]:
    """Return the streak that is still running, if any."""

    for streak in streaks:
        if streak.ongoing:
            return streak
    return None


def longest_streak(streaks: Iterable[Streak]) -> Optional[Streak]:
    """Return the longest streak; the earliest one wins a tie."""

    longest: Optional[Streak] = None
    for streak in streaks:
        if longest is None or streak.duration_days > longest.duration_days:
            longest = streak
    return longest


__all__ = ["Streak", "compute_streaks", "current_streak", "longest_streak"]
