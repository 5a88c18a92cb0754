"""Calendar date helpers shared by schedules and history scans."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator


def plus_days(value: date, days: int) -> date:
    """Return *value* shifted by ``days`` (negative values move backwards)."""

    return value + timedelta(days=days)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive range of calendar dates.

    A range whose ``end`` precedes ``start`` is empty: it contains nothing and
    iterates over nothing.
    """

    start: date
    end: date

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, date):
            return False
        return self.start <= value <= self.end

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def reversed(self) -> Iterator[date]:
        """Iterate from ``end`` back to ``start``."""

        current = self.end
        while current >= self.start:
            yield current
            current -= timedelta(days=1)


__all__ = ["DateRange", "plus_days"]
