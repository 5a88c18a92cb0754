"""Exceptions raised by HabitPulse services."""

from __future__ import annotations

from datetime import date


class HabitPulseError(Exception):
    """Base class for HabitPulse errors."""


class IllegalDateError(HabitPulseError, ValueError):
    """A completion was recorded outside the habit's valid dates or in the future."""

    def __init__(self, *, habit_id: int, value: date, reason: str):
        self.habit_id = habit_id
        self.date = value
        self.reason = reason
        super().__init__(f"Illegal completion date {value.isoformat()} for habit {habit_id}: {reason}")


class HabitNotFoundError(HabitPulseError, LookupError):
    """No habit exists with the requested id."""

    def __init__(self, habit_id: int):
        self.habit_id = habit_id
        super().__init__(f"Habit {habit_id} not found")


__all__ = ["HabitNotFoundError", "HabitPulseError", "IllegalDateError"]
