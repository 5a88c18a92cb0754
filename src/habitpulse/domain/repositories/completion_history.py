"""Completion history repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.completion import CompletionRecord


class CompletionHistoryRepository(Protocol):
    """Per-habit record of how many times the habit was completed each day."""

    def get_record_by_date(self, habit_id: int, occurred_on: date) -> Optional[CompletionRecord]:
        """Get the record for one date, if any."""
        ...

    def get_records_in_period(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> list[CompletionRecord]:
        """Get records ordered by date; ``None`` bounds are open."""
        ...

    def get_first_completed_record(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> Optional[CompletionRecord]:
        """Earliest record with a positive completion count in the bounds."""
        ...

    def get_last_completed_record(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> Optional[CompletionRecord]:
        """Latest record with a positive completion count in the bounds."""
        ...

    def get_num_of_times_completed_in_period(
        self,
        habit_id: int,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> float:
        """Sum of completions in the bounds."""
        ...

    def insert_completion(self, habit_id: int, record: CompletionRecord) -> CompletionRecord:
        """Insert or replace the record for ``record.occurred_on``."""
        ...

    def delete_completion_by_date(self, habit_id: int, occurred_on: date) -> None:
        """Delete the record for one date; a missing record is not an error."""
        ...
