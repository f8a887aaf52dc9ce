from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CalendarDay


class CalendarRepository(Protocol):
    def get_by_date(self, calendar_date: date) -> Optional[CalendarDay]:
        raise NotImplementedError

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CalendarDay]:
        raise NotImplementedError

    def replace_all(self, days: Sequence[CalendarDay]) -> int:
        """Delete every calendar row and insert `days`, atomically.

        Returns the number of inserted rows.
        """

        raise NotImplementedError

    def upsert(self, day: CalendarDay) -> None:
        raise NotImplementedError

    def delete_by_date(self, calendar_date: date) -> bool:
        raise NotImplementedError
