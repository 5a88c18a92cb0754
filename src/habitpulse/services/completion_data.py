"""Batched completion data for calendars and reports."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..domain.repositories import (
    CompletionHistoryRepository,
    HabitRepository,
    VacationRepository,
)
from ..logging_config import get_logger
from ..models.dates import DateRange
from ..models.schedule import Schedule, period_range, separates_periods
from ..models.status import HabitCompletionData
from .execution import ExecutionPolicy, SynchronousExecution
from .habit_status import HabitStatusComputer
from .history import HabitHistory
from .streaks import Streak, compute_streaks

logger = get_logger("services.completion_data")


def expand_period_to_schedule_bounds(
    requested_dates: Iterable[date], schedule: Schedule
) -> DateRange:
    """Clamp the requested dates to the schedule and widen them to whole periods."""

    dates = list(requested_dates)
    if not dates:
        raise ValueError("requested_dates must not be empty")

    requested_start = max(schedule.start_date, min(dates))
    start_period = period_range(schedule, requested_start)
    start = start_period.start if start_period else requested_start

    requested_end = max(dates)
    if schedule.end_date is not None and schedule.end_date < requested_end:
        requested_end = schedule.end_date
    end_period = period_range(schedule, requested_end)
    end = end_period.end if end_period else requested_end

    return DateRange(start, end)


def history_bounds(
    requested_dates: Iterable[date], schedule: Schedule
) -> tuple[date, Optional[date]]:
    """Return the completion history needed to classify *requested_dates*.

    Independent periods only ever look inside their own period. Otherwise the
    deviation reaches back to the schedule start and the completed-later scan
    runs up to the last completion, so the window is left open-ended.
    """

    if separates_periods(schedule):
        bounds = expand_period_to_schedule_bounds(requested_dates, schedule)
        return bounds.start, bounds.end
    return schedule.start_date, None


class HabitCompletionDataService:
    """Loads one history snapshot per request and classifies every date from it."""

    def __init__(
        self,
        habit_repository: HabitRepository,
        completion_repository: CompletionHistoryRepository,
        vacation_repository: VacationRepository,
        *,
        computer: HabitStatusComputer | None = None,
        execution: ExecutionPolicy | None = None,
    ):
        self.habit_repository = habit_repository
        self.completion_repository = completion_repository
        self.vacation_repository = vacation_repository
        self.computer = computer or HabitStatusComputer()
        self.execution = execution or SynchronousExecution()

    def get_completion_data(
        self, habit_id: int, validation_date: date, today: date
    ) -> HabitCompletionData:
        return self.get_completion_data_for_dates(habit_id, [validation_date], today)[
            validation_date
        ]

    def get_completion_data_for_dates(
        self, habit_id: int, validation_dates: Iterable[date], today: date
    ) -> dict[date, HabitCompletionData]:
        """Return completion data keyed by date, in the order requested."""

        dates = list(dict.fromkeys(validation_dates))
        if not dates:
            return {}

        habit = self.habit_repository.get_by_id(habit_id)
        min_date, max_date = history_bounds(dates, habit.schedule)
        history = HabitHistory(
            self.completion_repository.get_records_in_period(habit_id, min_date, max_date),
            self.vacation_repository.get_vacations_in_period(habit_id),
        )

        def evaluate(day: date) -> tuple[date, HabitCompletionData]:
            status = self.computer.compute_status_from_history(
                habit=habit, validation_date=day, today=today, history=history
            )
            return day, HabitCompletionData(
                habit_status=status,
                num_of_times_completed=history.num_of_times_completed_on(day),
            )

        results = dict(self.execution.map(evaluate, dates))
        logger.debug(
            "Computed completion data",
            extra={
                "habit_id": habit_id,
                "num_of_dates": len(dates),
                "first_date": dates[0].isoformat(),
                "last_date": dates[-1].isoformat(),
            },
        )
        return results

    def get_streaks(self, habit_id: int, today: date) -> list[Streak]:
        """Streaks from the habit's start through *today* (or its end date)."""

        schedule = self.habit_repository.get_by_id(habit_id).schedule
        last_date = today
        if schedule.end_date is not None and schedule.end_date < last_date:
            last_date = schedule.end_date
        period = DateRange(schedule.start_date, last_date)
        if period.is_empty:
            return []
        data = self.get_completion_data_for_dates(habit_id, period, today)
        return compute_streaks(data, today=today)


__all__ = [
    "HabitCompletionDataService",
    "expand_period_to_schedule_bounds",
    "history_bounds",
]
