"""Repository protocol definitions for domain layer."""

from .completion_history import CompletionHistoryRepository
from .habit import HabitRepository
from .vacation import VacationRepository

__all__ = [
    "CompletionHistoryRepository",
    "HabitRepository",
    "VacationRepository",
]
