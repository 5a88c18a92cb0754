"""Concrete repository implementations using SQLModel."""

from .completion_history import SQLModelCompletionHistoryRepository
from .habit import SQLModelHabitRepository
from .vacation import SQLModelVacationRepository

__all__ = [
    "SQLModelCompletionHistoryRepository",
    "SQLModelHabitRepository",
    "SQLModelVacationRepository",
]
