"""Vacation repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.vacation import Vacation


class VacationRepository(Protocol):
    """Vacation history of a habit."""

    def get_vacation_by_date(self, habit_id: int, value: date) -> Optional[Vacation]:
        """Vacation containing *value*, if any."""
        ...

    def get_vacations_in_period(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> list[Vacation]:
        """Vacations intersecting the bounds, ordered by start date."""
        ...

    def create(self, vacation: Vacation) -> Vacation:
        """Persist a new vacation."""
        ...
