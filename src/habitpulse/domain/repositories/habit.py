"""Habit repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Repository for managing habit entities."""

    def get_by_id(self, habit_id: int) -> Habit:
        """Retrieve a habit by ID, raising ``HabitNotFoundError`` when absent."""
        ...

    def list_all(self) -> list[Habit]:
        """List all habits ordered by name."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def delete(self, habit_id: int) -> None:
        """Delete a habit together with its completions and vacations."""
        ...
