"""Per-date habit status computation.

The status of a date depends on the rest of the history: an over-completed
day lets the user skip the next due day, a missed day becomes backlog that a
later completion can sort out, and future dates are judged against what has
happened up to today. Today itself counts as the future.

Classification runs in two stages. Lifetime bounds (``NotStarted`` and
``Finished``) are settled first, without touching history. Everything else is
an ordered tuple of guards, :data:`STATUS_GUARDS`; the first guard returning
a status wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from ..domain.repositories import (
    CompletionHistoryRepository,
    HabitRepository,
    VacationRepository,
)
from ..logging_config import get_logger
from ..models.completion import CompletionRecord
from ..models.dates import DateRange, plus_days
from ..models.habit import Habit
from ..models.schedule import Schedule, period_range, separates_periods
from ..models.status import HabitStatus
from ..models.vacation import Vacation
from .history import HabitHistory
from .schedule_deviation import compute_schedule_deviation

logger = get_logger("services.habit_status")


@dataclass(frozen=True, slots=True)
class StatusContext:
    """Everything the status guards need to classify one date."""

    schedule: Schedule
    history: HabitHistory
    validation_date: date
    today: date
    completed_today: bool
    schedule_deviation: float
    num_of_due_times: float
    num_of_times_completed: float
    on_vacation: bool

    @property
    def is_due(self) -> bool:
        return self.num_of_due_times > 0

    @property
    def is_past(self) -> bool:
        return self.validation_date < self.today


StatusGuard = Callable[[StatusContext], Optional[HabitStatus]]


def lifetime_status(schedule: Schedule, validation_date: date) -> Optional[HabitStatus]:
    """Return ``NotStarted``/``Finished`` outside the schedule's lifetime."""

    if validation_date < schedule.start_date:
        return HabitStatus.NOT_STARTED
    if schedule.end_date is not None and validation_date > schedule.end_date:
        return HabitStatus.FINISHED
    return None


# ---------------------------------------------------------------------------
# History scans
# ---------------------------------------------------------------------------


def is_already_completed(ctx: StatusContext) -> bool:
    """True when earlier completions already cover this due date."""

    schedule = ctx.schedule
    if not schedule.completing_ahead_enabled:
        return False

    if schedule.backlog_enabled:
        if ctx.validation_date >= ctx.today:
            num_of_due_times = ctx.history.num_of_due_times_in(
                schedule, DateRange(ctx.today, ctx.validation_date)
            )
        else:
            num_of_due_times = ctx.num_of_due_times
        return ctx.schedule_deviation >= num_of_due_times

    # Without backlog a negative deviation would leave the user no way to
    # either sort out the backlog or complete ahead, so look only at the
    # surplus accumulated since the first completion of the current period.
    current_period = (
        period_range(schedule, ctx.validation_date) if separates_periods(schedule) else None
    )
    last_date = plus_days(ctx.validation_date, -1)
    first_date = ctx.history.first_completed_date(
        min_date=current_period.start if current_period else schedule.start_date,
        max_date=last_date,
    )
    if first_date is None:
        return False
    return ctx.history.reaches_surplus(
        schedule, DateRange(first_date, last_date).reversed(), ctx.num_of_due_times
    )


def was_completed_later(ctx: StatusContext) -> bool:
    """True when a later surplus sorted out the backlog this date created."""

    schedule = ctx.schedule
    if not schedule.backlog_enabled:
        return False

    last_completed = ctx.history.last_completed_date()
    if last_completed is None:
        return False

    last_date = last_completed
    if separates_periods(schedule):
        current_period = period_range(schedule, ctx.validation_date)
        if current_period is not None and current_period.end < last_completed:
            last_date = current_period.end

    return ctx.history.reaches_surplus(
        schedule,
        DateRange(plus_days(ctx.validation_date, 1), last_date),
        ctx.num_of_due_times,
    )


# ---------------------------------------------------------------------------
# Guards, in priority order
# ---------------------------------------------------------------------------


def completed_on_due_date(ctx: StatusContext) -> Optional[HabitStatus]:
    if not ctx.is_due:
        return None
    if ctx.num_of_times_completed == ctx.num_of_due_times:
        return HabitStatus.COMPLETED
    if ctx.num_of_times_completed > ctx.num_of_due_times:
        if ctx.schedule_deviation < 0 and ctx.schedule.backlog_enabled:
            return HabitStatus.SORTED_OUT_BACKLOG
        return HabitStatus.OVER_COMPLETED
    if ctx.num_of_times_completed > 0:
        return HabitStatus.PARTIALLY_COMPLETED
    return None


def completed_ahead(ctx: StatusContext) -> Optional[HabitStatus]:
    if not ctx.is_due or not is_already_completed(ctx):
        return None
    if ctx.is_past:
        return HabitStatus.PAST_DATE_ALREADY_COMPLETED
    return HabitStatus.FUTURE_DATE_ALREADY_COMPLETED


def completed_later(ctx: StatusContext) -> Optional[HabitStatus]:
    if ctx.is_due and ctx.is_past and was_completed_later(ctx):
        return HabitStatus.COMPLETED_LATER
    return None


def failed_or_planned(ctx: StatusContext) -> Optional[HabitStatus]:
    if not ctx.is_due:
        return None
    return HabitStatus.FAILED if ctx.is_past else HabitStatus.PLANNED


def backlog(ctx: StatusContext) -> Optional[HabitStatus]:
    """Sorted-out or outstanding backlog on a date that is not due."""

    if ctx.is_due:
        return None
    if ctx.schedule_deviation >= 0 or not ctx.schedule.backlog_enabled:
        return None

    num_of_not_due_times = 0.0
    if ctx.validation_date >= ctx.today:
        start = plus_days(ctx.today, 1) if ctx.completed_today else ctx.today
        num_of_not_due_times = ctx.history.num_of_not_due_times_in(
            ctx.schedule, DateRange(start, ctx.validation_date)
        )

    if ctx.schedule_deviation <= -num_of_not_due_times:
        if ctx.num_of_times_completed > 0:
            return HabitStatus.SORTED_OUT_BACKLOG
        if ctx.validation_date >= ctx.today:
            return HabitStatus.BACKLOG
    return None


def completed_when_not_due(ctx: StatusContext) -> Optional[HabitStatus]:
    if not ctx.is_due and ctx.num_of_times_completed > 0:
        return HabitStatus.OVER_COMPLETED
    return None


def on_vacation(ctx: StatusContext) -> Optional[HabitStatus]:
    if not ctx.is_due and ctx.on_vacation:
        return HabitStatus.ON_VACATION
    return None


def skipped_or_not_due(ctx: StatusContext) -> Optional[HabitStatus]:
    if ctx.is_due:
        return None
    return HabitStatus.SKIPPED if ctx.is_past else HabitStatus.NOT_DUE


STATUS_GUARDS: tuple[StatusGuard, ...] = (
    completed_on_due_date,
    completed_ahead,
    completed_later,
    failed_or_planned,
    backlog,
    completed_when_not_due,
    on_vacation,
    skipped_or_not_due,
)


class HabitStatusComputer:
    """Classifies dates from an in-memory history; performs no I/O."""

    def __init__(self, guards: Sequence[StatusGuard] = STATUS_GUARDS):
        self.guards = tuple(guards)

    def compute_status(
        self,
        *,
        habit: Habit,
        validation_date: date,
        today: date,
        completion_history: Iterable[CompletionRecord],
        vacation_history: Iterable[Vacation],
    ) -> HabitStatus:
        """Compute the status of *validation_date* as seen on *today*."""
        return self.compute_status_from_history(
            habit=habit,
            validation_date=validation_date,
            today=today,
            history=HabitHistory(completion_history, vacation_history),
        )

    def compute_status_from_history(
        self,
        *,
        habit: Habit,
        validation_date: date,
        today: date,
        history: HabitHistory,
    ) -> HabitStatus:
        schedule = habit.schedule
        status = lifetime_status(schedule, validation_date)
        if status is not None:
            return status

        ctx = self.build_context(
            schedule=schedule, history=history, validation_date=validation_date, today=today
        )
        for guard in self.guards:
            status = guard(ctx)
            if status is not None:
                return status
        raise RuntimeError(f"No status guard matched {validation_date.isoformat()}")

    @staticmethod
    def build_context(
        *, schedule: Schedule, history: HabitHistory, validation_date: date, today: date
    ) -> StatusContext:
        completed_today = history.has_record_on(today)
        return StatusContext(
            schedule=schedule,
            history=history,
            validation_date=validation_date,
            today=today,
            completed_today=completed_today,
            schedule_deviation=compute_schedule_deviation(
                schedule=schedule,
                history=history,
                today=today,
                current_date=validation_date,
                completed_today=completed_today,
            ),
            num_of_due_times=history.num_of_due_times_on(schedule, validation_date),
            num_of_times_completed=history.num_of_times_completed_on(validation_date),
            on_vacation=history.is_on_vacation(validation_date),
        )


class HabitStatusService:
    """Computes statuses for stored habits, reading the full history per call."""

    def __init__(
        self,
        habit_repository: HabitRepository,
        completion_repository: CompletionHistoryRepository,
        vacation_repository: VacationRepository,
        *,
        computer: HabitStatusComputer | None = None,
    ):
        self.habit_repository = habit_repository
        self.completion_repository = completion_repository
        self.vacation_repository = vacation_repository
        self.computer = computer or HabitStatusComputer()

    def compute_status(self, habit_id: int, validation_date: date, today: date) -> HabitStatus:
        habit = self.habit_repository.get_by_id(habit_id)
        status = lifetime_status(habit.schedule, validation_date)
        if status is None:
            status = self.computer.compute_status(
                habit=habit,
                validation_date=validation_date,
                today=today,
                completion_history=self.completion_repository.get_records_in_period(habit_id),
                vacation_history=self.vacation_repository.get_vacations_in_period(habit_id),
            )
        logger.debug(
            "Computed habit status",
            extra={
                "habit_id": habit_id,
                "validation_date": validation_date.isoformat(),
                "today": today.isoformat(),
                "status": status.value,
            },
        )
        return status


__all__ = [
    "STATUS_GUARDS",
    "HabitStatusComputer",
    "HabitStatusService",
    "StatusContext",
    "StatusGuard",
    "is_already_completed",
    "lifetime_status",
    "was_completed_later",
]
