"""Recording habit completions."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..domain.repositories import CompletionHistoryRepository, HabitRepository
from ..errors import IllegalDateError
from ..logging_config import get_logger
from ..models.completion import CompletionRecord

logger = get_logger("services.completion")


def insert_habit_completion(
    *,
    habit_repository: HabitRepository,
    completion_repository: CompletionHistoryRepository,
    habit_id: int,
    record: CompletionRecord,
    today: date,
) -> Optional[CompletionRecord]:
    """Store *record* for the habit, or delete the date's record when it is zero.

    Raises:
        HabitNotFoundError: the habit does not exist.
        IllegalDateError: the date is after *today* or outside the schedule's
            start/end dates. Nothing is written in that case.

    Returns:
        The stored record, or ``None`` when the date was cleared.
    """

    habit = habit_repository.get_by_id(habit_id)
    schedule = habit.schedule
    occurred_on = record.occurred_on

    reason = None
    if occurred_on > today:
        reason = "date is in the future"
    elif occurred_on < schedule.start_date:
        reason = f"habit starts on {schedule.start_date.isoformat()}"
    elif schedule.end_date is not None and occurred_on > schedule.end_date:
        reason = f"habit ended on {schedule.end_date.isoformat()}"
    if reason is not None:
        logger.warning(
            "Rejected habit completion",
            extra={"habit_id": habit_id, "date": occurred_on.isoformat(), "reason": reason},
        )
        raise IllegalDateError(habit_id=habit_id, value=occurred_on, reason=reason)

    if record.num_of_times_completed < 0:
        raise ValueError("num_of_times_completed must not be negative")

    if record.num_of_times_completed > 0:
        stored = completion_repository.insert_completion(habit_id, record)
        logger.info(
            "Habit completion recorded",
            extra={
                "habit_id": habit_id,
                "date": occurred_on.isoformat(),
                "num_of_times_completed": stored.num_of_times_completed,
            },
        )
        return stored

    completion_repository.delete_completion_by_date(habit_id, occurred_on)
    logger.info(
        "Habit completion cleared",
        extra={"habit_id": habit_id, "date": occurred_on.isoformat()},
    )
    return None


__all__ = ["insert_habit_completion"]
