"""In-memory snapshot of a habit's completions and vacations.

Status computation reads history many times per date; callers fetch the
records once and wrap them here. Window sums are answered from prefix sums,
so classifying every date of a long history stays linear.
"""

from __future__ import annotations

import threading
from bisect import bisect_left, bisect_right
from datetime import date
from fractions import Fraction
from itertools import accumulate
from typing import Iterable, Optional

from ..models.completion import CompletionRecord
from ..models.dates import DateRange, plus_days
from ..models.schedule import Schedule, is_due
from ..models.vacation import Vacation

# Yes/no habits are due once per due date.
DEFAULT_NUM_OF_DUE_TIMES = 1.0


class HabitHistory:
    """Read-only view over one habit's completion records and vacations.

    Safe to share between threads: the only mutable state is the per-schedule
    due-day prefix, which is extended under a lock.
    """

    def __init__(
        self,
        completions: Iterable[CompletionRecord] = (),
        vacations: Iterable[Vacation] = (),
    ) -> None:
        self._completed: dict[date, float] = {}
        for record in completions:
            self._completed[record.occurred_on] = self._completed.get(
                record.occurred_on, 0.0
            ) + float(record.num_of_times_completed)
        self._completed_dates = sorted(day for day, value in self._completed.items() if value > 0)
        # Exact running totals; float(b - a) rounds once, like math.fsum.
        self._completed_prefix = [Fraction(0)] + list(
            accumulate(Fraction(self._completed[day]) for day in self._completed_dates)
        )
        self.vacations: list[Vacation] = list(vacations)
        self._due_prefix: dict[Schedule, list[int]] = {}
        self._due_lock = threading.Lock()

    def has_record_on(self, value: date) -> bool:
        return value in self._completed

    def num_of_times_completed_on(self, value: date) -> float:
        return self._completed.get(value, 0.0)

    def is_on_vacation(self, value: date) -> bool:
        return any(vacation.contains_date(value) for vacation in self.vacations)

    def num_of_due_times_on(self, schedule: Schedule, value: date) -> float:
        """Due count for one date; vacations force it to zero."""

        if self.is_on_vacation(value) or not is_due(schedule, value):
            return 0.0
        return DEFAULT_NUM_OF_DUE_TIMES

    def num_of_due_times_in(self, schedule: Schedule, period: DateRange) -> float:
        # Nothing is due before the schedule starts.
        start = max(period.start, schedule.start_date)
        if period.end < start:
            return 0.0
        prefix = self._due_days_through(schedule, period.end)
        lo = (start - schedule.start_date).days
        hi = (period.end - schedule.start_date).days + 1
        return (prefix[hi] - prefix[lo]) * DEFAULT_NUM_OF_DUE_TIMES

    def num_of_not_due_times_in(self, schedule: Schedule, period: DateRange) -> float:
        return len(period) * DEFAULT_NUM_OF_DUE_TIMES - self.num_of_due_times_in(schedule, period)

    def num_of_times_completed_in(self, period: DateRange) -> float:
        if period.is_empty:
            return 0.0
        lo = bisect_left(self._completed_dates, period.start)
        hi = bisect_right(self._completed_dates, period.end)
        return float(self._completed_prefix[hi] - self._completed_prefix[lo])

    def first_completed_date(
        self, min_date: Optional[date] = None, max_date: Optional[date] = None
    ) -> Optional[date]:
        candidates = self._completed_between(min_date, max_date)
        return candidates[0] if candidates else None

    def last_completed_date(
        self, min_date: Optional[date] = None, max_date: Optional[date] = None
    ) -> Optional[date]:
        candidates = self._completed_between(min_date, max_date)
        return candidates[-1] if candidates else None

    def _completed_between(self, min_date: Optional[date], max_date: Optional[date]) -> list[date]:
        lo = 0 if min_date is None else bisect_left(self._completed_dates, min_date)
        hi = len(self._completed_dates) if max_date is None else bisect_right(self._completed_dates, max_date)
        return self._completed_dates[lo:hi]

    def _due_days_through(self, schedule: Schedule, end: date) -> list[int]:
        """Return due-day counts where ``prefix[i]`` covers the first *i* schedule days.

        The list is grown on demand until it reaches *end*.
        """

        with self._due_lock:
            prefix = self._due_prefix.setdefault(schedule, [0])
            needed = (end - schedule.start_date).days + 2
            while len(prefix) < needed:
                day = plus_days(schedule.start_date, len(prefix) - 1)
                prefix.append(prefix[-1] + (1 if self.num_of_due_times_on(schedule, day) > 0 else 0))
            return prefix

    def reaches_surplus(self, schedule: Schedule, dates: Iterable[date], target: float) -> bool:
        """Replay daily deviation over *dates* in the given order.

        Returns True as soon as the running ``completed - due`` total reaches
        *target*. Used for both the forward and the backward history scans.
        """

        completed = 0.0
        due = 0.0
        for day in dates:
            due += self.num_of_due_times_on(schedule, day)
            completed += self.num_of_times_completed_on(day)
            if completed - due >= target:
                return True
        return False


__all__ = ["DEFAULT_NUM_OF_DUE_TIMES", "HabitHistory"]
